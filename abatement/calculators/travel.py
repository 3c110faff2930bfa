"""
Travel / mobilization — at most one line item.

Band: the travel rate whose mileage band covers the trip distance, else the
lowest usable band. Cost: flat fee if the band has one, otherwise
per-mile rate × distance, never below the band's minimum fee.
"""

from typing import List, Optional

from ..models import LineItemType
from ..schemas import EstimateLineItem, TravelRate
from .base import EstimateContext, make_line_item, round_currency


def _usable(rate: TravelRate) -> bool:
    return rate.flat_fee is not None or rate.per_mile_rate is not None


def select_travel_rate(travel_rates, miles):
    # type: (List[TravelRate], float) -> Optional[TravelRate]
    usable = sorted((r for r in travel_rates if _usable(r)), key=lambda r: r.min_miles)
    for rate in usable:
        if rate.min_miles <= miles and (rate.max_miles is None or miles <= rate.max_miles):
            return rate
    return usable[0] if usable else None


def travel_cost(rate, miles):
    # type: (TravelRate, float) -> float
    if rate.flat_fee is not None:
        cost = rate.flat_fee
    else:
        cost = rate.per_mile_rate * miles
    if rate.minimum_fee is not None:
        cost = max(cost, rate.minimum_fee)
    return round_currency(cost)


def generate_travel(ctx: EstimateContext) -> List[EstimateLineItem]:
    if not ctx.options.include_travel:
        return []
    rate = select_travel_rate(ctx.rates.travel_rates, ctx.travel_miles)
    if rate is None:
        return []

    if rate.flat_fee is not None:
        description = "Travel/Mobilization"
    else:
        description = f"Travel/Mobilization ({ctx.travel_miles:g} mi)"

    return [make_line_item(
        LineItemType.TRAVEL,
        category="Travel",
        description=description,
        quantity=1,
        unit="trip",
        unit_cost=travel_cost(rate, ctx.travel_miles),
        source_rate_id=rate.id,
        source_table="travel_rates",
        is_optional=True,
    )]
