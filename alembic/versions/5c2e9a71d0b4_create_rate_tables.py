"""create organization rate tables

Revision ID: 5c2e9a71d0b4
Revises:
Create Date: 2026-10-17 09:30:00.000000

Creates the six rate tables the estimate calculator reads. Each table is only
created if missing, so databases bootstrapped by Base.metadata.create_all()
upgrade cleanly.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5c2e9a71d0b4'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    insp = inspect(bind)
    return table_name in insp.get_table_names()


def _audit_columns():
    return [
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    if not _table_exists("labor_rates"):
        op.create_table(
            "labor_rates",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("organization_id", sa.String(), nullable=False),
            sa.Column("role_title", sa.String(), nullable=False),
            sa.Column("hourly_rate", sa.Float(), nullable=False),
            sa.Column("overtime_rate", sa.Float(), nullable=True),
            *_audit_columns(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_labor_rates_organization_id", "labor_rates", ["organization_id"])

    if not _table_exists("equipment_rates"):
        op.create_table(
            "equipment_rates",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("organization_id", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("hourly_rate", sa.Float(), nullable=True),
            sa.Column("daily_rate", sa.Float(), nullable=True),
            sa.Column("weekly_rate", sa.Float(), nullable=True),
            sa.Column("monthly_rate", sa.Float(), nullable=True),
            *_audit_columns(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_equipment_rates_organization_id", "equipment_rates", ["organization_id"])

    if not _table_exists("material_costs"):
        op.create_table(
            "material_costs",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("organization_id", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("unit", sa.String(), nullable=True),
            sa.Column("unit_cost", sa.Float(), nullable=False),
            *_audit_columns(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_material_costs_organization_id", "material_costs", ["organization_id"])

    if not _table_exists("disposal_fees"):
        op.create_table(
            "disposal_fees",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("organization_id", sa.String(), nullable=False),
            sa.Column("hazard_code", sa.String(), nullable=False),
            sa.Column("unit", sa.String(), nullable=True),
            sa.Column("unit_cost", sa.Float(), nullable=False),
            *_audit_columns(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_disposal_fees_organization_id", "disposal_fees", ["organization_id"])

    if not _table_exists("travel_rates"):
        op.create_table(
            "travel_rates",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("organization_id", sa.String(), nullable=False),
            sa.Column("min_miles", sa.Float(), nullable=True),
            sa.Column("max_miles", sa.Float(), nullable=True),
            sa.Column("flat_fee", sa.Float(), nullable=True),
            sa.Column("per_mile_rate", sa.Float(), nullable=True),
            sa.Column("minimum_fee", sa.Float(), nullable=True),
            *_audit_columns(),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_travel_rates_organization_id", "travel_rates", ["organization_id"])

    if not _table_exists("pricing_settings"):
        op.create_table(
            "pricing_settings",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("organization_id", sa.String(), nullable=False),
            sa.Column("default_markup_percent", sa.Float(), nullable=True),
            sa.Column("minimum_markup_percent", sa.Float(), nullable=True),
            sa.Column("maximum_discount_percent", sa.Float(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("organization_id"),
        )


def downgrade() -> None:
    for table_name in ["pricing_settings", "travel_rates", "disposal_fees",
                       "material_costs", "equipment_rates", "labor_rates"]:
        if _table_exists(table_name):
            op.drop_table(table_name)
