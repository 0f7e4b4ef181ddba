"""
Storage Services Package

Provides the abstract storage interface and the flat-file implementation
the ledger is persisted with.
"""

from account_book.services.storage.interface import (
    EntryStorageInterface,
    LoadReport,
    LoadWarning,
    StorageError,
    StorageReadError,
)
from account_book.services.storage.flat_file import (
    ENTRY_COLUMNS,
    HEADER,
    EntryLineError,
    FlatFileEntryStorage,
    format_entry_line,
    parse_entry_line,
)

__all__ = [
    # Interfaces
    "EntryStorageInterface",
    "LoadReport",
    "LoadWarning",
    # Exceptions
    "EntryLineError",
    "StorageError",
    "StorageReadError",
    # Flat file implementation
    "ENTRY_COLUMNS",
    "HEADER",
    "FlatFileEntryStorage",
    "format_entry_line",
    "parse_entry_line",
]
