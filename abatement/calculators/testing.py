"""Clearance testing / air monitoring — only when the survey calls for clearance."""

import math
from typing import List

from ..models import LineItemType
from ..schemas import EstimateLineItem
from . import rules
from .base import EstimateContext, make_line_item


def sample_count(area_sqft: float) -> int:
    return max(math.ceil(area_sqft / rules.SQFT_PER_SAMPLE), rules.MIN_SAMPLES)


def generate_testing(ctx: EstimateContext) -> List[EstimateLineItem]:
    if not (ctx.options.include_testing and ctx.survey.clearance_required):
        return []
    testing = rules.TESTING_BY_HAZARD.get(ctx.hazard, rules.TESTING_BY_HAZARD["other"])
    return [make_line_item(
        LineItemType.TESTING,
        category="Testing",
        description=testing["name"],
        quantity=sample_count(ctx.area_sqft),
        unit="sample",
        unit_cost=testing["cost_per_sample"],
        is_optional=True,
    )]
