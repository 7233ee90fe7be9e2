from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Pharmacy Back Office"
    VERSION: str = "0.1.0"

    # Storage
    STORAGE_BACKEND: Literal["memory", "sql"] = "memory"
    DATABASE_URL: str = "sqlite+aiosqlite:///./pharmacy.db"
    DATABASE_ECHO: bool = False
    SEED_DEMO_DATA: bool = True

    # Dashboard
    TIMEZONE: str = "UTC"  # store timezone used for sales buckets
    STATS_WINDOW_DAYS: int = 30
    SALES_VELOCITY_DAYS: int = 30
    RECENT_TRANSACTIONS_DEFAULT: int = 5

    # Point of sale
    TOTAL_TOLERANCE: float = 0.01

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    CORS_ORIGINS: str = "*"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()
