"""
Rate table providers — where an organization's pricing data comes from.

The calculator only depends on RateTableProvider.load(). The SQLAlchemy
provider reads the six rate tables for one organization; the static provider
serves tables that are already in memory (imports, previews, tests).

Both return active rows only.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Union

from sqlalchemy.orm import Session

from . import models, schemas

logger = logging.getLogger(__name__)


class RateTableProvider(ABC):
    """Read contract for organization-scoped rate tables."""

    @abstractmethod
    def load(self, organization_id: str) -> schemas.RateTables:
        """Return the organization's active rate tables."""
        pass


class SqlAlchemyRateTableProvider(RateTableProvider):
    """Loads rate tables from the database session it is given."""

    def __init__(self, db: Session):
        self.db = db

    def _active_rows(self, model, organization_id: str) -> list:
        return (
            self.db.query(model)
            .filter(model.organization_id == organization_id, model.is_active.is_(True))
            .order_by(model.id)
            .all()
        )

    def load(self, organization_id: str) -> schemas.RateTables:
        labor = self._active_rows(models.LaborRate, organization_id)
        equipment = self._active_rows(models.EquipmentRate, organization_id)
        material = self._active_rows(models.MaterialCost, organization_id)
        disposal = self._active_rows(models.DisposalFee, organization_id)
        travel = self._active_rows(models.TravelRate, organization_id)
        pricing = self.db.query(models.PricingSetting).filter(
            models.PricingSetting.organization_id == organization_id
        ).first()

        tables = schemas.RateTables(
            labor_rates=[schemas.LaborRate.model_validate(r) for r in labor],
            equipment_rates=[schemas.EquipmentRate.model_validate(r) for r in equipment],
            material_costs=[schemas.MaterialCost.model_validate(r) for r in material],
            disposal_fees=[schemas.DisposalFee.model_validate(r) for r in disposal],
            travel_rates=[schemas.TravelRate.model_validate(r) for r in travel],
            pricing_settings=schemas.PricingSetting.model_validate(pricing) if pricing else None,
        )
        logger.info(
            "Loaded rate tables for org %s: %d labor, %d equipment, %d material, "
            "%d disposal, %d travel, pricing settings %s",
            organization_id, len(labor), len(equipment), len(material),
            len(disposal), len(travel), "present" if pricing else "missing",
        )
        return tables


class StaticRateTableProvider(RateTableProvider):
    """
    Serves pre-built RateTables.

    Pass a single RateTables to use it for every organization, or a dict
    keyed by organization_id. Unknown organizations get empty tables.
    """

    def __init__(self, tables: Union[schemas.RateTables, Dict[str, schemas.RateTables]]):
        self.tables = tables
        self.load_count = 0

    def load(self, organization_id: str) -> schemas.RateTables:
        self.load_count += 1
        if isinstance(self.tables, schemas.RateTables):
            found = self.tables
        else:
            found = self.tables.get(organization_id, schemas.RateTables())
        return found.only_active()
