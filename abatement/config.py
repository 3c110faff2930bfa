from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./abatement.db"
    DB_TIMEOUT_SECONDS: float = 10.0

    # Estimate defaults: used when the organization has no pricing settings
    DEFAULT_MARKUP_PERCENT: float = 20.0
    DEFAULT_AREA_SQFT: float = 100.0  # survey has no area, linear ft, or volume
    DEFAULT_TRAVEL_MILES: float = 25.0

    # Seed this organization's rate tables on startup (blank = skip)
    DEFAULT_ORGANIZATION_ID: str = ""

    class Config:
        env_file = ".env"


settings = Settings()
