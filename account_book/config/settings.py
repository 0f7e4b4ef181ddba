"""
Configuration Management for Account Book

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The validation thresholds live next to the file location so that
the rules a user sees at the prompt and the file the ledger writes
are configured in one place.
"""

import logging
from datetime import date
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATA_FILE = "ledger.csv"


class LedgerSettings(BaseSettings):
    """
    Ledger application settings.

    Loads configuration from ACCOUNT_BOOK_* environment variables
    and an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ACCOUNT_BOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Persistence
    data_file: str = Field(
        default=DEFAULT_DATA_FILE,
        min_length=1,
        description="Path of the flat file holding the ledger"
    )
    atomic_save: bool = Field(
        default=True,
        description="Write to a temporary file and rename it over the ledger"
    )

    # Validation thresholds
    min_entry_date: date = Field(
        default=date(2025, 10, 1),
        description="Earliest date an entry may carry"
    )
    max_amount: int = Field(
        default=100_000_000,
        ge=1,
        description="Largest amount an entry may carry"
    )
    max_note_length: int = Field(
        default=50,
        ge=1,
        description="Maximum note length after trimming"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Write logs to this file instead of stderr"
    )
    audit_history_size: int = Field(
        default=200,
        ge=0,
        description="How many audit events to keep in memory"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept the standard logging level names."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> LedgerSettings:
        return LedgerSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.app
        results["app"] = True
    except ValueError as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
