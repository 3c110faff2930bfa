"""
Generator registry — maps line-item categories to generator functions.

Order matters: sort_order is assigned in this order, so estimates always
read labor, equipment, material, disposal, travel, testing, permit.
Multi-hazard jobs run each generator once per hazard, except the job-level
categories, which run once per estimate.
"""

from typing import Callable, List

from ..models import LineItemType
from ..schemas import EstimateLineItem
from .base import EstimateContext
from .disposal import generate_disposal
from .equipment import generate_equipment
from .labor import generate_labor
from .material import generate_materials
from .permit import generate_permits
from .testing import generate_testing
from .travel import generate_travel

Generator = Callable[[EstimateContext], List[EstimateLineItem]]

GENERATOR_REGISTRY: dict[LineItemType, Generator] = {
    LineItemType.LABOR: generate_labor,
    LineItemType.EQUIPMENT: generate_equipment,
    LineItemType.MATERIAL: generate_materials,
    LineItemType.DISPOSAL: generate_disposal,
    LineItemType.TRAVEL: generate_travel,
    LineItemType.TESTING: generate_testing,
    LineItemType.PERMIT: generate_permits,
}


# Priced once per job, not once per hazard
JOB_LEVEL_CATEGORIES = {LineItemType.TRAVEL}


def get_generator(item_type: LineItemType) -> Generator:
    """Returns the generator for a category, or raises ValueError."""
    if item_type not in GENERATOR_REGISTRY:
        raise ValueError(
            f"No generator registered for line item type: {item_type}. "
            f"Available: {[t.value for t in GENERATOR_REGISTRY]}"
        )
    return GENERATOR_REGISTRY[item_type]


def list_categories() -> List[LineItemType]:
    """Categories in sort order."""
    return list(GENERATOR_REGISTRY.keys())


def is_job_level(item_type: LineItemType) -> bool:
    return item_type in JOB_LEVEL_CATEGORIES
