"""
Disposal — one line item per hazard priced.

Fee code: rules.disposal_code_for(hazard, containment, friable), falling back
to the plain hazard code, then "other", then the organization's most
expensive active fee when none of those codes is configured.
Volume: the assessed waste volume when there is one, otherwise effective
area × cubic yards/sqft; converted to the fee's unit.
"""

import logging
from typing import List, Optional

from ..models import LineItemType
from ..schemas import DisposalFee, EstimateLineItem
from . import rules
from .base import EstimateContext, hazard_label, make_line_item

logger = logging.getLogger(__name__)


def find_disposal_fee(fees, hazard, code):
    # type: (List[DisposalFee], str, str) -> Optional[DisposalFee]
    for candidate in (code, hazard, rules.FALLBACK_DISPOSAL_CODE):
        for fee in fees:
            if fee.hazard_code.strip().lower() == candidate:
                if candidate != code:
                    logger.info("No disposal fee for %s, billing under %s", code, candidate)
                return fee
    if not fees:
        return None
    fee = max(fees, key=lambda f: f.unit_cost)
    logger.warning(
        "No disposal fee for %s, %s or %s, billing under %s",
        code, hazard, rules.FALLBACK_DISPOSAL_CODE, fee.hazard_code,
    )
    return fee


def unit_factor(unit: str) -> float:
    factor = rules.DISPOSAL_UNIT_FACTORS.get(unit.strip().lower())
    if factor is None:
        logger.warning("Unknown disposal unit %r, treating as cubic yards", unit)
        return 1.0
    return factor


def waste_volume_cuyd(ctx: EstimateContext) -> float:
    if ctx.waste_volume_cuyd and ctx.waste_volume_cuyd > 0:
        return ctx.waste_volume_cuyd
    multiplier = rules.DISPOSAL_CUYD_PER_SQFT.get(ctx.hazard, rules.DISPOSAL_CUYD_PER_SQFT["other"])
    return ctx.area_sqft * multiplier


def generate_disposal(ctx: EstimateContext) -> List[EstimateLineItem]:
    code = rules.disposal_code_for(ctx.hazard, ctx.containment_level, ctx.friable)
    fee = find_disposal_fee(ctx.rates.disposal_fees, ctx.hazard, code)
    if fee is None:
        return []

    return [make_line_item(
        LineItemType.DISPOSAL,
        category="Waste Disposal",
        description=f"{hazard_label(ctx.hazard)} Waste Disposal ({fee.hazard_code})",
        quantity=waste_volume_cuyd(ctx) * unit_factor(fee.unit),
        unit=fee.unit,
        unit_cost=fee.unit_cost,
        source_rate_id=fee.id,
        source_table="disposal_fees",
    )]
