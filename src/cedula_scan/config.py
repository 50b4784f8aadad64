"""
Configuration for cedula-scan.

Values come from ``CEDULA_``-prefixed environment variables or a ``.env`` file.
Decoding constants (offsets, thresholds, penalties) are module constants of the
decoders and are not configurable.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cedula_scan.logging_config import DEFAULT_LOG_FORMAT, DEFAULT_LOG_LEVEL


class Settings(BaseSettings):
    """Settings for the cedula decoders"""

    model_config = SettingsConfigDict(env_prefix="CEDULA_", env_file=".env", extra="ignore")

    # Logging configuration
    SERVICE_NAME: str = "cedula-scan"
    LOG_LEVEL: str = DEFAULT_LOG_LEVEL
    LOG_FORMAT: str = DEFAULT_LOG_FORMAT  # "json" for structured output

    # Gazetteer catalog; None uses the packaged sample catalog
    GAZETTEER_PATH: Optional[Path] = None

    # Reject legacy payloads that do not follow the documented layout exactly
    STRICT_PDF417: bool = True

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return Settings()
