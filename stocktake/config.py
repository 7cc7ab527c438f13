from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Stocktake"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./stocktake.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # HTTP
    # ==============================
    CORS_ORIGINS: Optional[str] = None

    # ==============================
    # Import
    # ==============================
    # POST /ingest/products only reads workbooks inside this directory.
    IMPORT_DIR: str = "./imports"

    def cors_origins(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return []
        return [value.strip() for value in self.CORS_ORIGINS.split(",") if value.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
