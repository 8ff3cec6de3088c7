"""Runtime settings, read from ``TMS_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TMS_", env_file=".env", extra="ignore")

    DATA_FILE: Path = _PROJECT_ROOT / "data" / "tms.json"
    LOG_LEVEL: str = "INFO"
    REUSE_DRIVER_BY_EMAIL: bool = False
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 200
    RETRY_ATTEMPTS: int = 2
