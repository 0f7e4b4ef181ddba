"""Services package."""

from account_book.services.storage import (
    EntryStorageInterface,
    FlatFileEntryStorage,
    LoadReport,
    LoadWarning,
    StorageError,
    StorageReadError,
)

__all__ = [
    # Storage services
    "EntryStorageInterface",
    "FlatFileEntryStorage",
    "LoadReport",
    "LoadWarning",
    "StorageError",
    "StorageReadError",
]
