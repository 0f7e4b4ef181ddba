"""
Shared fixtures for Account Book tests.

Every test runs in its own temporary working directory with a fresh
settings cache and no ACCOUNT_BOOK_* variables from the environment,
so a developer's .env or shell never leaks into the results.
"""

import os
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

import pytest

from account_book.config import get_settings
from account_book.models.entry import Category, LedgerEntry
from account_book.services.storage import (
    EntryStorageInterface,
    LoadReport,
    StorageReadError,
)


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for name in list(os.environ):
        if name.startswith("ACCOUNT_BOOK_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ledger_path(tmp_path: Path) -> Path:
    return tmp_path / "ledger.csv"


def make_entry(
    entry_id: int,
    entry_date: date = date(2025, 10, 2),
    amount: int = 15000,
    category: Category = Category.FOOD,
    note: str = "lunch",
) -> LedgerEntry:
    return LedgerEntry(
        id=entry_id,
        date=entry_date,
        amount=amount,
        category=category,
        note=note,
    )


class MemoryStorage(EntryStorageInterface):
    """
    In-memory storage double.

    Set fail_saves / fail_loads to simulate I/O problems.
    """

    def __init__(self, entries: Optional[Iterable[LedgerEntry]] = None):
        self.entries: list[LedgerEntry] = list(entries or [])
        self.save_calls = 0
        self.fail_saves = False
        self.fail_loads = False

    @property
    def location(self) -> str:
        return "memory://ledger"

    def exists(self) -> bool:
        return True

    def load_entries(self) -> LoadReport:
        if self.fail_loads:
            raise StorageReadError("simulated read failure")
        return LoadReport(entries=list(self.entries))

    def save_entries(self, entries: Iterable[LedgerEntry]) -> bool:
        self.save_calls += 1
        if self.fail_saves:
            return False
        self.entries = list(entries)
        return True


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()
