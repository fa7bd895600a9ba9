"""Application configuration."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from carbcheck.adapters.catalog_source import BUNDLED_DATASET

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    catalog_path: Path = BUNDLED_DATASET
    default_glucose_sensitivity: float = Field(default=12.0, gt=0)
    search_limit: int = Field(default=10, ge=1, le=10)
    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    remote_fallback: bool = True
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="CARBCHECK_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def remote_enabled(self) -> bool:
        """Remote lookups need both the flag and an API key."""
        return self.remote_fallback and bool(self.fdc_api_key)
