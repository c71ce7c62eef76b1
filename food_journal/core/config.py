"""Application configuration settings."""

from typing import Optional
from pydantic import validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./food_journal.db"

    # Google Places (new v1 endpoints)
    GOOGLE_MAPS_API_KEY: Optional[str] = None
    PLACES_BASE_URL: str = "https://places.googleapis.com/v1"
    PLACES_MAX_RESULTS: int = 10
    NEARBY_RADIUS_METERS: float = 2000.0
    TEXT_SEARCH_BIAS_RADIUS_METERS: float = 10000.0
    PLACES_PHOTO_MAX_PX: int = 400
    PLACES_TIMEOUT_SECONDS: float = 10.0

    # App Settings
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    API_V1_STR: str = "/api/v1"

    # View settings
    RECENT_RESTAURANTS_LIMIT: int = 10
    DISH_SUGGESTION_LIMIT: int = 5
    EXPORT_FILENAME: str = "menu-reviews-export.csv"

    # OCR (mocked provider)
    OCR_SIMULATED_DELAY_SECONDS: float = 1.5

    # Photo storage
    PHOTO_STORAGE_DIR: str = "./media"
    PHOTO_PUBLIC_BASE_URL: str = "http://localhost:8000/media"

    @validator("DATABASE_URL", pre=True)
    def validate_database_url(cls, v: str) -> str:
        """Ensure database URL is provided."""
        if not v:
            raise ValueError("DATABASE_URL must be provided")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
