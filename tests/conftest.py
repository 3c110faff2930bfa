"""
Shared test fixtures — SQLite test database, test client, rate tables.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Point settings at the test database before importing app modules
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["DEFAULT_ORGANIZATION_ID"] = ""

from abatement import schemas
from abatement.database import Base, get_db
from abatement.main import app
from abatement.routers.rate_tables import (
    DEFAULT_DISPOSAL_FEES,
    DEFAULT_EQUIPMENT_RATES,
    DEFAULT_LABOR_RATES,
    DEFAULT_MATERIAL_COSTS,
    DEFAULT_TRAVEL_RATES,
)


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def build_rate_tables(markup=25.0):
    """Full rate tables for one organization, built from the seed defaults."""
    return schemas.RateTables(
        labor_rates=[
            schemas.LaborRate(id=i + 1, organization_id="org-123", **r)
            for i, r in enumerate(DEFAULT_LABOR_RATES)
        ],
        equipment_rates=[
            schemas.EquipmentRate(id=i + 1, organization_id="org-123", **r)
            for i, r in enumerate(DEFAULT_EQUIPMENT_RATES)
        ],
        material_costs=[
            schemas.MaterialCost(id=i + 1, organization_id="org-123", **r)
            for i, r in enumerate(DEFAULT_MATERIAL_COSTS)
        ],
        disposal_fees=[
            schemas.DisposalFee(id=i + 1, organization_id="org-123", **r)
            for i, r in enumerate(DEFAULT_DISPOSAL_FEES)
        ],
        travel_rates=[
            schemas.TravelRate(id=i + 1, organization_id="org-123", **r)
            for i, r in enumerate(DEFAULT_TRAVEL_RATES)
        ],
        pricing_settings=schemas.PricingSetting(
            organization_id="org-123",
            default_markup_percent=markup,
            minimum_markup_percent=10.0,
            maximum_discount_percent=15.0,
        ),
    )


@pytest.fixture
def rate_tables():
    """Fully configured rate tables with a 25% organization markup."""
    return build_rate_tables()


@pytest.fixture
def make_rate_tables():
    """Builder for tests that need a different markup or want to strip categories."""
    return build_rate_tables


@pytest.fixture
def survey():
    """1,000 sqft asbestos job at containment level 2 — clearance and permits required."""
    return schemas.SiteSurvey(
        id="survey-1",
        organization_id="org-123",
        hazard_type="asbestos",
        containment_level=2,
        area_sqft=1000,
        clearance_required=True,
        regulatory_notifications_needed=True,
    )
