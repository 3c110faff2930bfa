from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean
from datetime import datetime
from .database import Base
import enum


# --- Enums ---

class HazardType(str, enum.Enum):
    ASBESTOS = "asbestos"
    MOLD = "mold"
    LEAD = "lead"
    VERMICULITE = "vermiculite"
    OTHER = "other"


class LineItemType(str, enum.Enum):
    LABOR = "labor"
    EQUIPMENT = "equipment"
    MATERIAL = "material"
    DISPOSAL = "disposal"
    TRAVEL = "travel"
    TESTING = "testing"
    PERMIT = "permit"


# --- Organization rate tables ---
# Every row is scoped to one organization and can be retired with is_active=False
# instead of deleted, so historical estimates stay explainable.

class LaborRate(Base):
    __tablename__ = "labor_rates"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(String, nullable=False, index=True)
    role_title = Column(String, nullable=False)  # 'Supervisor' | 'Technician' | ...
    hourly_rate = Column(Float, nullable=False)
    overtime_rate = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class EquipmentRate(Base):
    """Rental or ownership cost — at least one of the four rates is populated."""
    __tablename__ = "equipment_rates"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    hourly_rate = Column(Float, nullable=True)
    daily_rate = Column(Float, nullable=True)
    weekly_rate = Column(Float, nullable=True)
    monthly_rate = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class MaterialCost(Base):
    __tablename__ = "material_costs"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    unit = Column(String, default="each")  # 'sqft' | 'roll' | 'each' | 'gallon' | ...
    unit_cost = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class DisposalFee(Base):
    """Disposal fee per hazard code — codes can be finer than HazardType (asbestos_friable)."""
    __tablename__ = "disposal_fees"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(String, nullable=False, index=True)
    hazard_code = Column(String, nullable=False)
    unit = Column(String, default="cubic yard")
    unit_cost = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class TravelRate(Base):
    """Mileage band — flat fee or per-mile rate, with an optional minimum."""
    __tablename__ = "travel_rates"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(String, nullable=False, index=True)
    min_miles = Column(Float, default=0.0)
    max_miles = Column(Float, nullable=True)  # NULL = open-ended band
    flat_fee = Column(Float, nullable=True)
    per_mile_rate = Column(Float, nullable=True)
    minimum_fee = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class PricingSetting(Base):
    """One row per organization."""
    __tablename__ = "pricing_settings"

    id = Column(Integer, primary_key=True, index=True)
    organization_id = Column(String, unique=True, nullable=False)
    default_markup_percent = Column(Float, nullable=True)
    minimum_markup_percent = Column(Float, nullable=True)
    maximum_discount_percent = Column(Float, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
