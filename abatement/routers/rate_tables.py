from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from .. import models, schemas
from ..database import get_db
from ..rate_tables import SqlAlchemyRateTableProvider

router = APIRouter(prefix="/rate-tables", tags=["rate-tables"])

# Default rate tables for a new organization: national averages, 2024-2025.
# NOTE: These are starting points. Organizations are expected to replace them
# with their own negotiated rates.
DEFAULT_LABOR_RATES = [
    {"role_title": "Supervisor", "hourly_rate": 85.00, "overtime_rate": 127.50},
    {"role_title": "Technician", "hourly_rate": 55.00, "overtime_rate": 82.50},
]

DEFAULT_EQUIPMENT_RATES = [
    {"name": "HEPA Vacuum", "daily_rate": 75.00},
    {"name": "Negative Air Machine", "daily_rate": 150.00},
    {"name": "Decontamination Unit", "daily_rate": 200.00},
    {"name": "Air Monitoring Equipment", "daily_rate": 100.00},
    {"name": "Air Scrubber", "daily_rate": 125.00},
    {"name": "Dehumidifier", "daily_rate": 85.00},
    {"name": "Moisture Meter", "daily_rate": 25.00},
    {"name": "Lead Test Kit", "daily_rate": 50.00},
    {"name": "Encapsulation Sprayer", "daily_rate": 75.00},
    {"name": "Containment Materials", "daily_rate": 100.00},
]

DEFAULT_MATERIAL_COSTS = [
    {"name": "Poly Sheeting (6 mil)", "unit": "sqft", "unit_cost": 0.15},
    {"name": "Poly Sheeting (4 mil)", "unit": "sqft", "unit_cost": 0.10},
    {"name": "Duct Tape", "unit": "roll", "unit_cost": 8.00},
    {"name": "Disposal Bags (6 mil)", "unit": "each", "unit_cost": 5.00},
    {"name": "Disposal Bags", "unit": "each", "unit_cost": 3.50},
    {"name": "Warning Labels", "unit": "each", "unit_cost": 0.50},
    {"name": "Tyvek Suits", "unit": "each", "unit_cost": 12.00},
    {"name": "Respirator Filters", "unit": "pair", "unit_cost": 15.00},
    {"name": "Antimicrobial Solution", "unit": "gallon", "unit_cost": 45.00},
    {"name": "HEPA Filters", "unit": "each", "unit_cost": 75.00},
    {"name": "Lead Encapsulant", "unit": "gallon", "unit_cost": 55.00},
]

DEFAULT_DISPOSAL_FEES = [
    {"hazard_code": "asbestos_friable", "unit": "cubic yard", "unit_cost": 450.00},
    {"hazard_code": "asbestos_non_friable", "unit": "cubic yard", "unit_cost": 400.00},
    {"hazard_code": "mold", "unit": "cubic yard", "unit_cost": 150.00},
    {"hazard_code": "lead", "unit": "cubic yard", "unit_cost": 350.00},
    {"hazard_code": "other", "unit": "cubic yard", "unit_cost": 100.00},
]

DEFAULT_TRAVEL_RATES = [
    {"min_miles": 0, "max_miles": 25, "flat_fee": 250.00},
    {"min_miles": 25, "max_miles": None, "per_mile_rate": 3.50, "minimum_fee": 250.00},
]

DEFAULT_PRICING_SETTINGS = {
    "default_markup_percent": 20.0,
    "minimum_markup_percent": 10.0,
    "maximum_discount_percent": 15.0,
}


def seed_rate_tables(db: Session, organization_id: str) -> int:
    """Add any missing default rows for an organization. Returns rows added."""
    seeded = 0
    defaults = [
        (models.LaborRate, "role_title", DEFAULT_LABOR_RATES),
        (models.EquipmentRate, "name", DEFAULT_EQUIPMENT_RATES),
        (models.MaterialCost, "name", DEFAULT_MATERIAL_COSTS),
        (models.DisposalFee, "hazard_code", DEFAULT_DISPOSAL_FEES),
    ]
    for model, key, rows in defaults:
        for data in rows:
            existing = db.query(model).filter(
                model.organization_id == organization_id,
                getattr(model, key) == data[key],
            ).first()
            if not existing:
                db.add(model(organization_id=organization_id, **data))
                seeded += 1

    for data in DEFAULT_TRAVEL_RATES:
        existing = db.query(models.TravelRate).filter(
            models.TravelRate.organization_id == organization_id,
            models.TravelRate.min_miles == data["min_miles"],
        ).first()
        if not existing:
            db.add(models.TravelRate(organization_id=organization_id, **data))
            seeded += 1

    existing = db.query(models.PricingSetting).filter(
        models.PricingSetting.organization_id == organization_id
    ).first()
    if not existing:
        db.add(models.PricingSetting(organization_id=organization_id, **DEFAULT_PRICING_SETTINGS))
        seeded += 1

    db.commit()
    return seeded


@router.get("/{organization_id}/seed")
def seed_organization(organization_id: str, db: Session = Depends(get_db)):
    """Seed default rate tables for an organization. Safe to run multiple times — skips existing."""
    seeded = seed_rate_tables(db, organization_id)
    return {"ok": True, "organization_id": organization_id, "seeded": seeded}


@router.get("/{organization_id}", response_model=schemas.RateTables)
def get_rate_tables(organization_id: str, db: Session = Depends(get_db)):
    """Active rate tables for an organization — exactly what the calculator will price with."""
    return SqlAlchemyRateTableProvider(db).load(organization_id)
