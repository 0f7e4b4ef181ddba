"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the flat file for another backend later
2. Use a failing or in-memory storage in tests
3. Keep the ledger service decoupled from file handling

The interface is intentionally small: the ledger always loads and
saves the whole collection at once.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from account_book.models.entry import LedgerEntry


class LoadWarning(BaseModel):
    """A problem found while loading, tied to a line when possible."""

    line_number: Optional[int] = Field(
        default=None,
        description="1-based line number in the source (header is line 1)"
    )
    message: str

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"Line {self.line_number}: {self.message}"


class LoadReport(BaseModel):
    """
    Outcome of loading the ledger.

    A load never fails because of bad content: bad lines are skipped
    and reported here instead.
    """

    entries: list[LedgerEntry] = Field(default_factory=list)
    warnings: list[LoadWarning] = Field(default_factory=list)
    source_found: bool = Field(
        default=True,
        description="False when there was no ledger to read yet"
    )
    header_valid: bool = Field(
        default=True,
        description="False when the header line did not match"
    )

    @property
    def skipped_count(self) -> int:
        return sum(1 for warning in self.warnings if warning.line_number is not None)


class EntryStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Any storage implementation must implement these methods.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the ledger (e.g., a file path)."""
        pass

    @abstractmethod
    def exists(self) -> bool:
        """Check whether the ledger has been written before."""
        pass

    @abstractmethod
    def load_entries(self) -> LoadReport:
        """
        Load the full entry collection.

        Returns:
            LoadReport with the parsed entries in stored order

        Raises:
            StorageReadError: If the ledger exists but cannot be read
        """
        pass

    @abstractmethod
    def save_entries(self, entries: Iterable[LedgerEntry]) -> bool:
        """
        Replace the stored collection with the given entries.

        Args:
            entries: Entries in the order they should be written

        Returns:
            True if saved successfully, False on any I/O failure
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The ledger exists but could not be read."""
    pass
