"""
Shared pieces for all line-item generators.

EstimateContext carries everything one estimate needs; the helpers below
keep rounding and rate matching consistent across categories.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models import LineItemType
from ..schemas import CalculatorOptions, EstimateLineItem, RateTables, SiteSurvey
from . import rules

logger = logging.getLogger(__name__)


class InvalidSurveyError(ValueError):
    """Survey cannot be priced — raised before any line item is generated."""


@dataclass(frozen=True)
class EstimateContext:
    survey: SiteSurvey
    hazard: str               # HazardType value
    containment_level: int    # 1-4
    area_sqft: float          # effective area from resolve_effective_area()
    rates: RateTables         # active rows only
    options: CalculatorOptions
    travel_miles: float
    waste_volume_cuyd: Optional[float] = None  # assessed volume, replaces area × cuyd/sqft
    friable: Optional[bool] = None
    permits_required: bool = False


def resolve_effective_area(survey, default_area_sqft):
    # type: (SiteSurvey, Optional[float]) -> float
    """
    Square-foot-equivalent work area. First match wins:
      area_sqft → linear_ft × 2 → volume_cuft ÷ 8 → default_area_sqft
    Zero or missing measurements are skipped.
    """
    if survey.area_sqft and survey.area_sqft > 0:
        return float(survey.area_sqft)
    if survey.linear_ft and survey.linear_ft > 0:
        return survey.linear_ft * rules.LINEAR_FT_BAND_WIDTH
    if survey.volume_cuft and survey.volume_cuft > 0:
        return survey.volume_cuft / rules.VOLUME_WORKING_HEIGHT
    if default_area_sqft is None or default_area_sqft <= 0:
        raise InvalidSurveyError(
            f"Survey {survey.id or '(unsaved)'} has no area_sqft, linear_ft, or volume_cuft "
            f"and no default area is configured"
        )
    return float(default_area_sqft)


def round_currency(value: float) -> float:
    return round(value, 2)


def round_quantity(value: float) -> float:
    """Two decimals below 1 (bags, suits), one decimal otherwise (hours, sqft)."""
    if value < 1:
        return round(value, 2)
    return round(value, 1)


def names_match(a: str, b: str) -> bool:
    """Loose name match — either name contains the other, case-insensitive."""
    a, b = a.strip().lower(), b.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


def find_by_name(rows: Iterable, name: str, attr: str = "name"):
    """Row whose `attr` equals `name` (case-insensitive), else the first loose match, else None."""
    rows = list(rows)
    wanted = name.strip().lower()
    for row in rows:
        if getattr(row, attr).strip().lower() == wanted:
            return row
    for row in rows:
        if names_match(getattr(row, attr), name):
            logger.debug("Loose match: %r priced from %r", name, getattr(row, attr))
            return row
    return None


def make_line_item(
    item_type: LineItemType,
    category: str,
    description: str,
    quantity: float,
    unit: str,
    unit_cost: float,
    source_rate_id: Optional[int] = None,
    source_table: Optional[str] = None,
    is_optional: bool = False,
) -> EstimateLineItem:
    """Build a line item; total is always the rounded quantity × unit cost, to the cent."""
    quantity = round_quantity(quantity)
    return EstimateLineItem(
        item_type=item_type,
        category=category,
        description=description,
        quantity=quantity,
        unit=unit,
        unit_cost=unit_cost,
        total=round_currency(quantity * unit_cost),
        is_included=True,
        is_optional=is_optional,
        source_rate_id=source_rate_id,
        source_table=source_table,
    )


def hazard_label(hazard: str) -> str:
    return hazard.capitalize()


def total_of(items: List[EstimateLineItem]) -> float:
    return round_currency(sum(i.total for i in items if i.is_included))
