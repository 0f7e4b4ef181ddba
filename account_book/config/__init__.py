"""Configuration package."""

from account_book.config.settings import (
    DEFAULT_DATA_FILE,
    LedgerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_DATA_FILE",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
