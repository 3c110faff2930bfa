"""
Labor — supervisor and technician hours.

hours = effective area × hours/sqft(hazard, containment)
Supervisor works the base hours; each technician on the crew works the same.
Crew size grows with containment level (rules.CREW_SIZE_BY_CONTAINMENT).
"""

import logging
from typing import List, Optional, Tuple

from ..models import LineItemType
from ..schemas import EstimateLineItem, LaborRate
from . import rules
from .base import EstimateContext, make_line_item

logger = logging.getLogger(__name__)

_DEFAULT_HOURS_PER_SQFT = 0.2


def _title_has(rate: LaborRate, keywords) -> bool:
    title = rate.role_title.lower()
    return any(k in title for k in keywords)


def select_roles(labor_rates):
    # type: (List[LaborRate]) -> Tuple[Optional[LaborRate], Optional[LaborRate]]
    """
    Pick (supervisor, technician) rates from whatever the organization configured.

    Supervisor: title keyword match, else the highest hourly rate.
    Technician: title keyword match among the rest, else the cheapest of the
    rest, else the supervisor rate itself (single-rate organizations).
    """
    if not labor_rates:
        return None, None

    supervisor = next((r for r in labor_rates if _title_has(r, rules.SUPERVISOR_KEYWORDS)), None)
    if supervisor is None:
        supervisor = max(labor_rates, key=lambda r: r.hourly_rate)

    others = [r for r in labor_rates if r is not supervisor]
    technician = next((r for r in others if _title_has(r, rules.TECHNICIAN_KEYWORDS)), None)
    if technician is None and others:
        technician = min(others, key=lambda r: r.hourly_rate)
    if technician is None:
        technician = supervisor
    return supervisor, technician


def labor_hours(hazard, containment_level, area_sqft):
    # type: (str, int, float) -> Tuple[float, float, int]
    """Returns (supervisor_hours, technician_hours, technician_count)."""
    hours_per_sqft = rules.LABOR_HOURS_PER_SQFT.get(hazard, {}).get(
        containment_level, _DEFAULT_HOURS_PER_SQFT
    )
    crew_size = rules.CREW_SIZE_BY_CONTAINMENT.get(containment_level, 2)
    tech_count = max(crew_size - 1, 1)
    base_hours = area_sqft * hours_per_sqft
    return base_hours, base_hours * tech_count, tech_count


def generate_labor(ctx: EstimateContext) -> List[EstimateLineItem]:
    supervisor, technician = select_roles(ctx.rates.labor_rates)
    if supervisor is None:
        return []

    supervisor_hours, technician_hours, tech_count = labor_hours(
        ctx.hazard, ctx.containment_level, ctx.area_sqft
    )
    logger.debug(
        "Labor for %s level %d: %.1f sqft → %.1f supervisor hrs, %.1f technician hrs (x%d)",
        ctx.hazard, ctx.containment_level, ctx.area_sqft,
        supervisor_hours, technician_hours, tech_count,
    )

    return [
        make_line_item(
            LineItemType.LABOR,
            category="Supervisor",
            description=f"{supervisor.role_title} ({ctx.hazard})",
            quantity=supervisor_hours,
            unit="hour",
            unit_cost=supervisor.hourly_rate,
            source_rate_id=supervisor.id,
            source_table="labor_rates",
        ),
        make_line_item(
            LineItemType.LABOR,
            category="Technician",
            description=f"{technician.role_title} x{tech_count} ({ctx.hazard})",
            quantity=technician_hours,
            unit="hour",
            unit_cost=technician.hourly_rate,
            source_rate_id=technician.id,
            source_table="labor_rates",
        ),
    ]
