"""Configuration settings for run analytics."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PACKAGE_ROOT = Path(__file__).parent.parent.parent  # repository root in a src layout


class Settings(BaseSettings):
    """
    Athlete defaults and runtime options, loaded from environment variables.

    Variables use the RUN_ANALYTICS_ prefix, e.g. RUN_ANALYTICS_MAX_HR=190.
    The metric functions never read these; callers pass them in.
    """

    model_config = SettingsConfigDict(
        env_prefix="RUN_ANALYTICS_",
        env_file=str(PACKAGE_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Athlete physiology
    max_hr: int = 185
    rest_hr: int = 60

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @model_validator(mode="after")
    def _check_heart_rates(self) -> "Settings":
        if self.rest_hr <= 0 or self.max_hr <= self.rest_hr:
            raise ValueError("max_hr must be greater than rest_hr, and rest_hr positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
