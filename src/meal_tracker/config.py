"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["file", "supabase"] = "file"
    data_dir: Path = Path(".meal_tracker")
    data_file: str = "state.json"
    timezone: str = "UTC"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "app_state"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="MEAL_TRACKER_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def data_path(self) -> Path:
        """Location of the local state file."""
        return self.data_dir / self.data_file
