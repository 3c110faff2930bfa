from pydantic import BaseModel, Field
from typing import Optional, List
from .models import HazardType, LineItemType


# --- Site survey (owned upstream, read-only here) ---

class HazardAssessment(BaseModel):
    """Per-hazard findings. Blank fields fall back to the survey's own fields."""
    hazard_type: HazardType
    area_sqft: Optional[float] = Field(default=None, ge=0)
    containment_level: Optional[int] = Field(default=None, ge=1, le=4)
    waste_volume_cuyd: Optional[float] = Field(default=None, ge=0)  # overrides the area-based volume
    friable: Optional[bool] = None
    permits_required: bool = False  # EPA notification / RRP rule applies
    class Config:
        from_attributes = True


class SiteSurvey(BaseModel):
    id: Optional[str] = None
    organization_id: str
    hazard_type: Optional[HazardType] = None
    containment_level: Optional[int] = Field(default=None, ge=1, le=4)
    # At most one measurement is authoritative: see resolve_effective_area()
    area_sqft: Optional[float] = Field(default=None, ge=0)
    linear_ft: Optional[float] = Field(default=None, ge=0)
    volume_cuft: Optional[float] = Field(default=None, ge=0)
    friable: Optional[bool] = None  # asbestos only: overrides the containment-based disposal code
    occupied: bool = False
    clearance_required: bool = False
    regulatory_notifications_needed: bool = False
    # One entry per hazard on a multi-hazard job; empty = price hazard_type alone
    hazard_assessments: List[HazardAssessment] = []
    # Informational: never priced
    access_issues: Optional[str] = None
    special_conditions: Optional[str] = None
    notes: Optional[str] = None
    class Config:
        from_attributes = True


# --- Rate tables ---

class LaborRate(BaseModel):
    id: Optional[int] = None
    organization_id: Optional[str] = None
    role_title: str
    hourly_rate: float = Field(ge=0)
    overtime_rate: Optional[float] = None  # reserved: not used by the calculator
    is_active: bool = True
    class Config:
        from_attributes = True

class EquipmentRate(BaseModel):
    id: Optional[int] = None
    organization_id: Optional[str] = None
    name: str
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    daily_rate: Optional[float] = Field(default=None, ge=0)
    weekly_rate: Optional[float] = Field(default=None, ge=0)
    monthly_rate: Optional[float] = Field(default=None, ge=0)
    is_active: bool = True
    class Config:
        from_attributes = True

class MaterialCost(BaseModel):
    id: Optional[int] = None
    organization_id: Optional[str] = None
    name: str
    unit: str = "each"
    unit_cost: float = Field(ge=0)
    is_active: bool = True
    class Config:
        from_attributes = True

class DisposalFee(BaseModel):
    id: Optional[int] = None
    organization_id: Optional[str] = None
    hazard_code: str
    unit: str = "cubic yard"
    unit_cost: float = Field(ge=0)
    is_active: bool = True
    class Config:
        from_attributes = True

class TravelRate(BaseModel):
    id: Optional[int] = None
    organization_id: Optional[str] = None
    min_miles: float = 0.0
    max_miles: Optional[float] = None
    flat_fee: Optional[float] = Field(default=None, ge=0)
    per_mile_rate: Optional[float] = Field(default=None, ge=0)
    minimum_fee: Optional[float] = Field(default=None, ge=0)
    is_active: bool = True
    class Config:
        from_attributes = True

class PricingSetting(BaseModel):
    organization_id: Optional[str] = None
    default_markup_percent: Optional[float] = None
    minimum_markup_percent: Optional[float] = None
    maximum_discount_percent: Optional[float] = None
    class Config:
        from_attributes = True


class RateTables(BaseModel):
    """Everything an organization has configured for pricing, loaded as one batch."""
    labor_rates: List[LaborRate] = []
    equipment_rates: List[EquipmentRate] = []
    material_costs: List[MaterialCost] = []
    disposal_fees: List[DisposalFee] = []
    travel_rates: List[TravelRate] = []
    pricing_settings: Optional[PricingSetting] = None

    def only_active(self) -> "RateTables":
        """Copy without retired rows."""
        return RateTables(
            labor_rates=[r for r in self.labor_rates if r.is_active],
            equipment_rates=[r for r in self.equipment_rates if r.is_active],
            material_costs=[r for r in self.material_costs if r.is_active],
            disposal_fees=[r for r in self.disposal_fees if r.is_active],
            travel_rates=[r for r in self.travel_rates if r.is_active],
            pricing_settings=self.pricing_settings,
        )


# --- Calculator input/output ---

class CalculatorOptions(BaseModel):
    include_travel: bool = True
    include_testing: bool = True
    include_permits: bool = True
    custom_markup: Optional[float] = Field(default=None, ge=0)
    travel_miles: Optional[float] = Field(default=None, ge=0)
    # Hooks: the calculator never picks these itself
    discount_percent: float = Field(default=0.0, ge=0, le=100)
    tax_percent: float = Field(default=0.0, ge=0)


class EstimateLineItem(BaseModel):
    item_type: LineItemType
    category: str
    description: str
    quantity: float
    unit: str
    unit_cost: float
    total: float
    is_included: bool = True
    is_optional: bool = False
    sort_order: int = 0
    source_rate_id: Optional[int] = None
    source_table: Optional[str] = None


class EstimateResult(BaseModel):
    line_items: List[EstimateLineItem] = []
    effective_area_sqft: float
    subtotal: float
    markup_percent: float
    markup_amount: float
    discount_percent: float = 0.0
    discount_amount: float = 0.0
    tax_percent: float = 0.0
    tax_amount: float = 0.0
    total: float
    warnings: List[str] = []


class CalculateEstimateRequest(BaseModel):
    survey: SiteSurvey
    options: CalculatorOptions = CalculatorOptions()
