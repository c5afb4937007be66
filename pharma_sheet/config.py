from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Pharma Sheet Service"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./pharma_sheet.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    API_KEY_HEADER: str = "X-API-Key"

    # ==============================
    # Spreadsheet Sync
    # ==============================
    SYNC_TIMEOUT_SECONDS: float = 120.0
    SYNC_PRUNE_MISSING: bool = False
    SYNC_CREATE_MISSING_WAREHOUSE: bool = False

    # Tab titles are fixed by the shared spreadsheet template.
    SHEET_MEDICATION_NAME: str = "Medication_ID"
    SHEET_BRAND_NAME: str = "Pictures"
    SHEET_HOUSE_NAME: str = "บ้านเลขที่ยา"
    SHEET_BLISTER_DATE_NAME: str = "วันที่เปลี่ยนแผงยา"


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
