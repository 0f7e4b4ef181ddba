"""
Ledger Service for Account Book

This module owns the in-memory entry collection and ties together
validation-checked input, storage and the audit trail.

DESIGN DECISION: The service enforces the ledger's invariants:
- Ids are assigned here and only here (max existing id + 1)
- Every mutation is followed by a full save
- A reload never silently throws away entries already in memory

SAVE FAILURES: persistence is at-least-once. If a save fails after an
add or delete, the in-memory change is kept and the ledger is marked
dirty; the next successful save (automatic or manual) clears it.
"""

from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel

from account_book.audit import AuditLogger, get_logger
from account_book.config import LedgerSettings, get_settings
from account_book.models.entry import Category, LedgerEntry
from account_book.services.storage import (
    EntryStorageInterface,
    FlatFileEntryStorage,
    LoadReport,
    StorageReadError,
)


logger = get_logger(__name__)


class AddResult(BaseModel):
    """Outcome of adding an entry. The entry exists in memory either way."""
    entry: LedgerEntry
    saved: bool


class DeleteStatus(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    SAVE_FAILED = "save_failed"


class DeleteResult(BaseModel):
    entry_id: int
    status: DeleteStatus

    @property
    def succeeded(self) -> bool:
        return self.status == DeleteStatus.DELETED


class ReloadStatus(str, Enum):
    LOADED = "loaded"
    REFUSED = "refused"
    FAILED = "failed"


class ReloadResult(BaseModel):
    """Outcome of a manual reload from storage."""
    status: ReloadStatus
    report: Optional[LoadReport] = None
    error_message: Optional[str] = None


def _sorted_by_id(entries: list[LedgerEntry]) -> list[LedgerEntry]:
    return sorted(entries, key=lambda entry: entry.id)


class LedgerService:
    """
    Owns the authoritative entry collection and the next-id counter.

    Flow for a mutation:
    1. Change the in-memory collection
    2. Save the whole collection through the storage
    3. Audit the outcome

    The collection keeps insertion order (that is what gets saved);
    every query returns entries sorted by ascending id.
    """

    def __init__(
        self,
        storage: EntryStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the service and load the ledger.

        Args:
            storage: Where the ledger is loaded from and saved to
            audit_logger: Audit trail. A local-only logger is created if None.

        Raises:
            StorageReadError: If the ledger exists but cannot be read
        """
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._entries: list[LedgerEntry] = []
        self._next_id = 1
        self._dirty = False

        self.last_load_report = self._load()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def location(self) -> str:
        return self._storage.location

    @property
    def count(self) -> int:
        return len(self._entries)

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def has_unsaved_changes(self) -> bool:
        """True when the last attempt to persist a change failed."""
        return self._dirty

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def data_file_exists(self) -> bool:
        return self._storage.exists()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self,
        entry_date: date,
        amount: int,
        category: Union[Category, str],
        note: str = "",
    ) -> AddResult:
        """
        Add a new entry with the next id and save the ledger.

        Input is expected to have passed the InputValidator already; the
        entry model only re-checks structural rules.

        Returns:
            AddResult with the new entry and whether the save succeeded
        """
        entry = LedgerEntry(
            id=self._next_id,
            date=entry_date,
            amount=amount,
            category=Category(category),
            note=note or "",
        )
        self._entries.append(entry)
        self._next_id += 1

        self._audit_logger.log_entry_added(entry.id, entry.category.value, entry.amount)
        saved = self.save()

        return AddResult(entry=entry, saved=saved)

    def delete(self, entry_id: int) -> DeleteResult:
        """
        Delete the entry with the given id and save the ledger.

        An unknown id changes nothing and does not touch storage.
        """
        remaining = [entry for entry in self._entries if entry.id != entry_id]

        if len(remaining) == len(self._entries):
            self._audit_logger.log_entry_not_found(entry_id)
            return DeleteResult(entry_id=entry_id, status=DeleteStatus.NOT_FOUND)

        self._entries = remaining
        self._audit_logger.log_entry_deleted(entry_id)

        if not self.save():
            return DeleteResult(entry_id=entry_id, status=DeleteStatus.SAVE_FAILED)

        return DeleteResult(entry_id=entry_id, status=DeleteStatus.DELETED)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, entry_id: int) -> Optional[LedgerEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def exists(self, entry_id: int) -> bool:
        return self.get(entry_id) is not None

    def list_all(self) -> list[LedgerEntry]:
        """All entries, ascending by id."""
        return _sorted_by_id(self._entries)

    def list_by_date_range(self, start: date, end: date) -> list[LedgerEntry]:
        """
        Entries dated within [start, end], both ends inclusive.

        The caller is responsible for rejecting start > end; a reversed
        range simply matches nothing.
        """
        return _sorted_by_id([
            entry for entry in self._entries
            if start <= entry.date <= end
        ])

    def list_by_category(self, category: Union[Category, str]) -> list[LedgerEntry]:
        """Entries with exactly this category. Unknown names match nothing."""
        if isinstance(category, Category):
            wanted = category.value
        else:
            wanted = category
        return _sorted_by_id([
            entry for entry in self._entries
            if entry.category.value == wanted
        ])

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """
        Persist the whole collection in its current order.

        Returns True on success. On failure the ledger stays dirty.
        """
        saved = self._storage.save_entries(self._entries)

        if saved:
            self._dirty = False
            self._audit_logger.log_saved(self.location, len(self._entries))
        else:
            self._dirty = True
            self._audit_logger.log_save_failed(self.location, len(self._entries))

        return saved

    def reload(self, force: bool = False) -> ReloadResult:
        """
        Replace the in-memory collection with what is in storage.

        Refuses when entries are loaded or a change is still unsaved,
        unless force is True.
        """
        if (self._entries or self._dirty) and not force:
            self._audit_logger.log_reload_refused(len(self._entries), self._dirty)
            return ReloadResult(status=ReloadStatus.REFUSED)

        try:
            report = self._load()
        except StorageReadError as e:
            self._audit_logger.log_error("StorageReadError", str(e))
            return ReloadResult(status=ReloadStatus.FAILED, error_message=str(e))

        self.last_load_report = report
        return ReloadResult(status=ReloadStatus.LOADED, report=report)

    def _load(self) -> LoadReport:
        report = self._storage.load_entries()

        for warning in report.warnings:
            self._audit_logger.log_load_warning(
                self.location,
                warning.message,
                warning.line_number,
            )

        self._entries = list(report.entries)
        self._next_id = max((entry.id for entry in self._entries), default=0) + 1
        self._dirty = False

        self._audit_logger.log_loaded(
            location=self.location,
            entry_count=len(self._entries),
            skipped_lines=report.skipped_count,
            source_found=report.source_found,
        )
        logger.debug("next_id_computed", next_id=self._next_id)
        return report


def create_ledger_service(
    data_file: Optional[Union[str, Path]] = None,
    settings: Optional[LedgerSettings] = None,
) -> LedgerService:
    """
    Factory function to wire settings, storage and audit logging.

    Args:
        data_file: Ledger file path. Falls back to settings.data_file.
        settings: Ledger settings. Defaults to the cached application settings.

    Returns:
        A loaded LedgerService
    """
    settings = settings or get_settings().app
    storage = FlatFileEntryStorage(
        data_file or settings.data_file,
        atomic=settings.atomic_save,
    )
    audit_logger = AuditLogger(history_size=settings.audit_history_size)
    return LedgerService(storage, audit_logger=audit_logger)
