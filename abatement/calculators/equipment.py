"""
Equipment — rental days × daily rate.

Which equipment: rules.equipment_for(hazard, containment).
How long: ceil(area ÷ sqft/day at this containment level), minimum 2 days.
Equipment the organization has no rate for is left off the estimate. When
nothing matches at all, a HEPA vacuum is priced at the first usable rate.
"""

import logging
import math
from typing import List, Optional

from ..models import LineItemType
from ..schemas import EquipmentRate, EstimateLineItem
from . import rules
from .base import EstimateContext, find_by_name, make_line_item, round_currency

logger = logging.getLogger(__name__)


def rental_days(area_sqft, containment_level):
    # type: (float, int) -> int
    sqft_per_day = rules.EQUIPMENT_SQFT_PER_DAY.get(containment_level, rules.EQUIPMENT_SQFT_PER_DAY[1])
    return max(rules.MIN_EQUIPMENT_DAYS, math.ceil(area_sqft / sqft_per_day))


def daily_rate(rate):
    # type: (EquipmentRate) -> Optional[float]
    """Daily rate, or a daily equivalent of the hourly/weekly/monthly rate."""
    if rate.daily_rate is not None:
        return rate.daily_rate
    if rate.hourly_rate is not None:
        return round_currency(rate.hourly_rate * rules.HOURS_PER_DAY)
    if rate.weekly_rate is not None:
        return round_currency(rate.weekly_rate / rules.DAYS_PER_WEEK)
    if rate.monthly_rate is not None:
        return round_currency(rate.monthly_rate / rules.DAYS_PER_MONTH)
    return None


def _first_usable(rates):
    # type: (List[EquipmentRate]) -> Optional[EquipmentRate]
    return next((r for r in rates if daily_rate(r) is not None), None)


def generate_equipment(ctx: EstimateContext) -> List[EstimateLineItem]:
    items = []
    days = rental_days(ctx.area_sqft, ctx.containment_level)

    for equipment_name in rules.equipment_for(ctx.hazard, ctx.containment_level):
        rate = find_by_name(ctx.rates.equipment_rates, equipment_name)
        if rate is None:
            logger.debug("No equipment rate for %s, skipped", equipment_name)
            continue
        per_day = daily_rate(rate)
        if per_day is None:
            logger.warning("Equipment rate %s (%s) has no hourly/daily/weekly/monthly rate", rate.id, rate.name)
            continue
        items.append(make_line_item(
            LineItemType.EQUIPMENT,
            category="Equipment Rental",
            description=equipment_name,
            quantity=days,
            unit="day",
            unit_cost=per_day,
            source_rate_id=rate.id,
            source_table="equipment_rates",
        ))

    if not items:
        fallback = _first_usable(ctx.rates.equipment_rates)
        if fallback is not None:
            logger.warning(
                "No equipment rate matches %s level %d, pricing %s at %s (%s)",
                ctx.hazard, ctx.containment_level, rules.FALLBACK_EQUIPMENT, fallback.name, fallback.id,
            )
            items.append(make_line_item(
                LineItemType.EQUIPMENT,
                category="Equipment Rental",
                description=rules.FALLBACK_EQUIPMENT,
                quantity=days,
                unit="day",
                unit_cost=daily_rate(fallback),
                source_rate_id=fallback.id,
                source_table="equipment_rates",
            ))

    return items
