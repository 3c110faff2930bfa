"""Regulatory notification / permit filing fees."""

from typing import List

from ..models import LineItemType
from ..schemas import EstimateLineItem
from . import rules
from .base import EstimateContext, make_line_item


def generate_permits(ctx: EstimateContext) -> List[EstimateLineItem]:
    if not (ctx.options.include_permits and ctx.permits_required):
        return []
    permits = rules.PERMITS_BY_HAZARD.get(ctx.hazard, rules.PERMITS_BY_HAZARD["other"])
    return [
        make_line_item(
            LineItemType.PERMIT,
            category="Permits & Fees",
            description=permit["name"],
            quantity=1,
            unit="each",
            unit_cost=permit["cost"],
            is_optional=True,
        )
        for permit in permits
    ]
