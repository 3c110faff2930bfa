from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .database import engine, Base
from .routers import estimates, rate_tables

logger = logging.getLogger("abatement")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _run_migrations():
    """Run pending Alembic migrations on startup.

    The rate-table migrations check for existing tables, so databases created by
    Base.metadata.create_all() above upgrade cleanly.
    """
    try:
        from alembic.config import Config
        from alembic import command

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)
        alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning("Alembic migration warning: %s", e)

app = FastAPI(
    title="Abatement Estimator",
    description="Itemized cost estimates for hazardous-material remediation jobs",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(estimates.router, prefix="/api")
app.include_router(rate_tables.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "abatement-estimator"}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()


@app.on_event("startup")
def auto_seed():
    """Seed the default organization's rate tables on first run."""
    if not settings.DEFAULT_ORGANIZATION_ID:
        return
    from .database import SessionLocal
    db = SessionLocal()
    try:
        seeded = rate_tables.seed_rate_tables(db, settings.DEFAULT_ORGANIZATION_ID)
        if seeded:
            logger.info("Seeded %d rate table rows for org %s", seeded, settings.DEFAULT_ORGANIZATION_ID)
    finally:
        db.close()
