"""Materials — containment and PPE consumables, linear in effective area."""

from typing import List

from ..models import LineItemType
from ..schemas import EstimateLineItem
from . import rules
from .base import EstimateContext, find_by_name, make_line_item


def generate_materials(ctx: EstimateContext) -> List[EstimateLineItem]:
    items = []
    for material in rules.MATERIALS_BY_HAZARD.get(ctx.hazard, rules.MATERIALS_BY_HAZARD["other"]):
        cost = find_by_name(ctx.rates.material_costs, material["name"])
        if cost is None:
            continue
        items.append(make_line_item(
            LineItemType.MATERIAL,
            category="Materials",
            description=material["name"],
            quantity=ctx.area_sqft * material["qty_per_sqft"],
            unit=cost.unit,
            unit_cost=cost.unit_cost,
            source_rate_id=cost.id,
            source_table="material_costs",
        ))
    return items
