"""
Flat File Storage Implementation

DESIGN DECISION: The ledger is a plain comma-separated text file because:
1. Users can open and read it in any editor or spreadsheet
2. No database setup required
3. The whole ledger is small enough to rewrite on every change

FORMAT:
    id,date,category,amount,note
    1,2025-10-02,Food,15000,lunch

TRADEOFFS:
- No quoting or escaping. A note containing a comma is written as-is
  and that line will be skipped on the next load.
- No locking. If two processes write the same file, the last one wins.
- Bad lines are skipped with a warning; they are never repaired.
"""

import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import ValidationError

from account_book.audit.logger import get_logger
from account_book.models.entry import Category, LedgerEntry
from account_book.services.storage.interface import (
    EntryStorageInterface,
    LoadReport,
    LoadWarning,
    StorageReadError,
)
from account_book.validation.validator import parse_integer, parse_iso_date


logger = get_logger(__name__)

# Column order on disk. Category comes before amount.
ENTRY_COLUMNS = [
    "id",
    "date",
    "category",
    "amount",
    "note",
]

HEADER = ",".join(ENTRY_COLUMNS)
FIELD_SEPARATOR = ","


class EntryLineError(ValueError):
    """A single ledger line could not be turned into an entry."""
    pass


def format_entry_line(entry: LedgerEntry) -> str:
    """Format an entry as one line of the ledger file (no newline)."""
    return FIELD_SEPARATOR.join(entry.to_row())


def parse_entry_line(line: str) -> LedgerEntry:
    """
    Parse one data line of the ledger file.

    Splits on every comma and keeps trailing empty fields, so
    "1,2025-10-02,Food,100," is five fields with an empty note.

    Raises:
        EntryLineError: With a message describing the first problem found
    """
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) != len(ENTRY_COLUMNS):
        raise EntryLineError(
            f"expected {len(ENTRY_COLUMNS)} fields but found {len(parts)}"
        )

    raw_id, raw_date, raw_category, raw_amount, note = (part.strip() for part in parts)

    try:
        entry_id = parse_integer(raw_id)
    except ValueError:
        raise EntryLineError(f"invalid id: {raw_id!r}")

    try:
        entry_date = parse_iso_date(raw_date)
    except ValueError:
        raise EntryLineError(f"invalid date: {raw_date!r}")

    if not Category.is_valid(raw_category):
        raise EntryLineError(f"invalid category: {raw_category!r}")

    try:
        amount = parse_integer(raw_amount)
    except ValueError:
        raise EntryLineError(f"invalid amount: {raw_amount!r}")
    if amount <= 0:
        raise EntryLineError(f"invalid amount: {amount}")

    try:
        return LedgerEntry(
            id=entry_id,
            date=entry_date,
            amount=amount,
            category=Category(raw_category),
            note=note,
        )
    except ValidationError as e:
        raise EntryLineError(f"invalid entry: {e.errors()[0]['msg']}")


class FlatFileEntryStorage(EntryStorageInterface):
    """
    Entry storage backed by a single comma-separated text file.

    Stateless apart from the path: every load reads the whole file,
    every save rewrites it.
    """

    def __init__(
        self,
        path: Union[str, Path],
        atomic: bool = True,
    ):
        """
        Initialize storage.

        Args:
            path: Ledger file location
            atomic: Write to a temporary sibling file and rename it into
                    place, so a failed save leaves the old file intact.
        """
        self._path = Path(path)
        self._atomic = atomic

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def exists(self) -> bool:
        return self._path.is_file()

    def load_entries(self) -> LoadReport:
        """
        Load all entries from the ledger file.

        - Missing file: empty report, source_found=False
        - Header mismatch or empty file: empty report with one warning
        - Bad line: skipped with a warning naming the line number
        - Blank line: skipped silently
        """
        if not self._path.exists():
            logger.info("ledger_file_missing", path=self.location)
            return LoadReport(source_found=False)

        try:
            with self._path.open("r", encoding="utf-8-sig") as handle:
                lines = [line.rstrip("\r\n") for line in handle]
        except (OSError, UnicodeDecodeError) as e:
            logger.error("ledger_read_failed", path=self.location, error=str(e))
            raise StorageReadError(f"Could not read {self.location}: {e}") from e

        if not lines or lines[0] != HEADER:
            message = f"Invalid or missing header in {self.location}; expected '{HEADER}'"
            logger.info("ledger_header_invalid", path=self.location)
            return LoadReport(
                header_valid=False,
                warnings=[LoadWarning(message=message)],
            )

        entries: list[LedgerEntry] = []
        warnings: list[LoadWarning] = []
        seen_ids: set[int] = set()

        for line_number, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue

            problem: Optional[str] = None
            try:
                entry = parse_entry_line(line)
            except EntryLineError as e:
                problem = str(e)
            else:
                if entry.id in seen_ids:
                    problem = f"duplicate id: {entry.id}"

            if problem is not None:
                logger.info(
                    "entry_line_skipped",
                    path=self.location,
                    line_number=line_number,
                    reason=problem,
                )
                warnings.append(LoadWarning(
                    line_number=line_number,
                    message=f"skipping invalid entry ({problem})",
                ))
                continue

            seen_ids.add(entry.id)
            entries.append(entry)

        logger.info(
            "ledger_loaded",
            path=self.location,
            entry_count=len(entries),
            skipped=len(warnings),
        )
        return LoadReport(entries=entries, warnings=warnings)

    def save_entries(self, entries: Iterable[LedgerEntry]) -> bool:
        """
        Overwrite the ledger file with the header and the given entries.

        Entries are written in the order given; no sorting happens here.
        """
        entries = list(entries)
        lines = [HEADER]
        for entry in entries:
            if FIELD_SEPARATOR in entry.note:
                logger.warning(
                    "note_contains_separator",
                    path=self.location,
                    entry_id=entry.id,
                )
            lines.append(format_entry_line(entry))
        content = "\n".join(lines) + "\n"

        try:
            if self._atomic:
                self._write_atomic(content)
            else:
                with self._path.open("w", encoding="utf-8", newline="\n") as handle:
                    handle.write(content)
        except OSError as e:
            logger.error(
                "ledger_save_failed",
                path=self.location,
                entry_count=len(entries),
                error=str(e),
            )
            return False

        logger.info("ledger_saved", path=self.location, entry_count=len(entries))
        return True

    def _write_atomic(self, content: str) -> None:
        # Write through symlinks so the link keeps pointing at the data
        target = self._path.resolve()
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.",
            suffix=".tmp",
            dir=target.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, _file_mode(target))
            os.replace(tmp_name, target)
        except OSError:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise


def _file_mode(path: Path) -> int:
    """Mode for a rewritten ledger: the existing file's, else what open() would give."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask
