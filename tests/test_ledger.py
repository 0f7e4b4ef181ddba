"""
Tests for the ledger service.

File-backed tests check what ends up on disk; MemoryStorage tests
cover save and load failures.
"""

from datetime import date

import pytest

from account_book.config import LedgerSettings
from account_book.ledger import (
    DeleteStatus,
    LedgerService,
    ReloadStatus,
    create_ledger_service,
)
from account_book.models.audit import AuditEventType
from account_book.models.entry import Category
from account_book.services.storage import HEADER, FlatFileEntryStorage, StorageReadError

from conftest import MemoryStorage, make_entry


def file_service(path) -> LedgerService:
    return LedgerService(FlatFileEntryStorage(path))


class TestStartup:
    """Tests for loading the ledger when the service starts."""

    def test_start_without_file(self, ledger_path):
        """Test that a missing file gives an empty ledger starting at id 1."""
        service = file_service(ledger_path)

        assert service.count == 0
        assert service.next_id == 1
        assert service.data_file_exists() is False
        assert service.last_load_report.source_found is False

    def test_next_id_follows_highest_id(self, ledger_path):
        """Test that ids continue after the largest id in the file."""
        ledger_path.write_text(
            HEADER + "\n3,2025-10-02,Food,100,a\n7,2025-10-03,Food,200,b\n",
            encoding="utf-8",
        )
        service = file_service(ledger_path)

        assert service.next_id == 8
        assert service.add(date(2025, 10, 4), 300, Category.FOOD).entry.id == 8

    def test_unreadable_file_fails_startup(self, tmp_path):
        """Test that a read error is not mistaken for an empty ledger."""
        (tmp_path / "ledger.csv").mkdir()

        with pytest.raises(StorageReadError):
            file_service(tmp_path / "ledger.csv")

    def test_long_data_file_path(self, tmp_path):
        """Test that a long but legal ledger path does not break the audit trail."""
        directory = tmp_path
        for index in range(4):
            directory = directory / (f"d{index}" * 60)
        directory.mkdir(parents=True)
        path = directory / "ledger.csv"
        assert len(str(path)) > 500

        service = file_service(path)
        result = service.add(date(2025, 10, 2), 100, Category.FOOD)

        assert result.saved is True
        loaded = service.audit_logger.recent_events[0]
        assert loaded.event_type == AuditEventType.LEDGER_LOADED
        assert loaded.details["location"] == str(path)


class TestAdd:
    """Tests for adding entries."""

    def test_first_entry_written_to_file(self, ledger_path):
        """Test adding to an empty ledger."""
        service = file_service(ledger_path)
        result = service.add(date(2025, 10, 2), 15000, Category.FOOD, "lunch")

        assert result.saved is True
        assert result.entry.id == 1
        assert ledger_path.read_text(encoding="utf-8") == (
            "id,date,category,amount,note\n"
            "1,2025-10-02,Food,15000,lunch\n"
        )

    def test_ids_increase(self, memory_storage):
        """Test sequential id assignment."""
        service = LedgerService(memory_storage)
        ids = [service.add(date(2025, 10, 2), 10, Category.FOOD).entry.id for _ in range(3)]
        assert ids == [1, 2, 3]

    def test_ids_are_not_reused_after_delete(self, memory_storage):
        """Test that deleting the newest entry does not free its id."""
        service = LedgerService(memory_storage)
        service.add(date(2025, 10, 2), 10, Category.FOOD)
        service.add(date(2025, 10, 2), 20, Category.FOOD)
        service.delete(2)

        assert service.add(date(2025, 10, 2), 30, Category.FOOD).entry.id == 3

    def test_category_name_is_accepted(self, memory_storage):
        """Test passing the category as its name."""
        service = LedgerService(memory_storage)
        assert service.add(date(2025, 10, 2), 10, "Hobby").entry.category == Category.HOBBY

    def test_unknown_category_is_rejected(self, memory_storage):
        """Test that the service does not invent categories."""
        service = LedgerService(memory_storage)
        with pytest.raises(ValueError):
            service.add(date(2025, 10, 2), 10, "Snacks")
        assert service.count == 0

    def test_save_failure_keeps_entry(self, memory_storage):
        """Test at-least-once persistence when the save fails."""
        service = LedgerService(memory_storage)
        memory_storage.fail_saves = True

        result = service.add(date(2025, 10, 2), 10, Category.FOOD)

        assert result.saved is False
        assert service.count == 1
        assert service.has_unsaved_changes is True

        memory_storage.fail_saves = False
        assert service.save() is True
        assert service.has_unsaved_changes is False
        assert [entry.id for entry in memory_storage.entries] == [1]

    def test_add_is_audited(self, memory_storage):
        """Test that the audit trail records the new entry."""
        service = LedgerService(memory_storage)
        service.add(date(2025, 10, 2), 10, Category.FOOD)

        events = service.audit_logger.events_for_entry(1)
        assert events[0].event_type == AuditEventType.ENTRY_ADDED


class TestDelete:
    """Tests for deleting entries."""

    def test_delete_existing(self, ledger_path):
        """Test that the deleted entry disappears from the file."""
        service = file_service(ledger_path)
        service.add(date(2025, 10, 2), 15000, Category.FOOD, "lunch")
        service.add(date(2025, 10, 3), 2500, Category.TRANSPORT, "bus")

        result = service.delete(1)

        assert result.status == DeleteStatus.DELETED
        assert result.succeeded is True
        assert service.exists(1) is False
        assert ledger_path.read_text(encoding="utf-8").splitlines() == [
            HEADER,
            "2,2025-10-03,Transport,2500,bus",
        ]

    def test_delete_missing_changes_nothing(self, ledger_path):
        """Test that an unknown id leaves memory and the file untouched."""
        service = file_service(ledger_path)
        service.add(date(2025, 10, 2), 15000, Category.FOOD, "lunch")
        before = ledger_path.read_bytes()

        result = service.delete(42)

        assert result.status == DeleteStatus.NOT_FOUND
        assert result.succeeded is False
        assert service.count == 1
        assert ledger_path.read_bytes() == before

    def test_delete_missing_does_not_save(self, memory_storage):
        """Test that no save is attempted for an unknown id."""
        service = LedgerService(memory_storage)
        service.delete(1)
        assert memory_storage.save_calls == 0

    def test_delete_save_failure(self, memory_storage):
        """Test that the entry is gone from memory even when the save fails."""
        service = LedgerService(memory_storage)
        service.add(date(2025, 10, 2), 10, Category.FOOD)
        memory_storage.fail_saves = True

        result = service.delete(1)

        assert result.status == DeleteStatus.SAVE_FAILED
        assert service.count == 0
        assert service.has_unsaved_changes is True


class TestQueries:
    """Tests for listing and filtering."""

    @pytest.fixture
    def service(self, memory_storage):
        memory_storage.entries = [
            make_entry(5, date(2025, 10, 4), 300, Category.SHOPPING, "socks"),
            make_entry(2, date(2025, 10, 5), 200, Category.FOOD, "dinner"),
            make_entry(9, date(2025, 10, 6), 900, Category.FOOD, "groceries"),
            make_entry(1, date(2025, 10, 7), 100, Category.TRANSFER, ""),
        ]
        return LedgerService(memory_storage)

    def test_list_all_sorted_by_id(self, service):
        """Test ascending id order regardless of file order."""
        assert [entry.id for entry in service.list_all()] == [1, 2, 5, 9]

    def test_date_range_is_inclusive(self, service):
        """Test that both ends of the range are included."""
        result = service.list_by_date_range(date(2025, 10, 5), date(2025, 10, 6))
        assert [entry.id for entry in result] == [2, 9]

    def test_single_day_range(self, service):
        """Test start == end."""
        result = service.list_by_date_range(date(2025, 10, 4), date(2025, 10, 4))
        assert [entry.id for entry in result] == [5]

    def test_first_day_range_excludes_next_day(self, memory_storage):
        """Test a one-day range on the earliest allowed date."""
        memory_storage.entries = [
            make_entry(1, date(2025, 10, 1)),
            make_entry(2, date(2025, 10, 2)),
        ]
        service = LedgerService(memory_storage)

        result = service.list_by_date_range(date(2025, 10, 1), date(2025, 10, 1))

        assert [entry.id for entry in result] == [1]

    def test_reversed_range_matches_nothing(self, service):
        """Test that the service itself does not reorder a reversed range."""
        assert service.list_by_date_range(date(2025, 10, 7), date(2025, 10, 4)) == []

    def test_filter_by_category(self, service):
        """Test category filtering by enum and by name."""
        assert [entry.id for entry in service.list_by_category(Category.FOOD)] == [2, 9]
        assert [entry.id for entry in service.list_by_category("Food")] == [2, 9]

    def test_filter_is_exact(self, service):
        """Test that case-mismatched names match nothing."""
        assert service.list_by_category("food") == []
        assert service.list_by_category(Category.HOBBY) == []

    def test_get(self, service):
        """Test lookup by id."""
        assert service.get(9).note == "groceries"
        assert service.get(3) is None


class TestReload:
    """Tests for manual reload from storage."""

    def test_reload_refused_when_entries_loaded(self, memory_storage):
        """Test that a reload without force never drops loaded entries."""
        memory_storage.entries = [make_entry(1)]
        service = LedgerService(memory_storage)
        memory_storage.entries = []

        result = service.reload()

        assert result.status == ReloadStatus.REFUSED
        assert service.count == 1

    def test_forced_reload_replaces_entries(self, memory_storage):
        """Test that force replaces memory with storage content."""
        memory_storage.entries = [make_entry(1)]
        service = LedgerService(memory_storage)
        memory_storage.entries = [make_entry(4), make_entry(6)]

        result = service.reload(force=True)

        assert result.status == ReloadStatus.LOADED
        assert [entry.id for entry in service.list_all()] == [4, 6]
        assert service.next_id == 7
        assert service.last_load_report == result.report

    def test_reload_on_empty_ledger(self, memory_storage):
        """Test that an empty ledger can always be reloaded."""
        service = LedgerService(memory_storage)
        memory_storage.entries = [make_entry(1)]

        assert service.reload().status == ReloadStatus.LOADED
        assert service.count == 1

    def test_reload_refused_with_unsaved_delete(self, memory_storage):
        """Test that an unsaved delete of the last entry is not silently undone."""
        memory_storage.entries = [make_entry(1)]
        service = LedgerService(memory_storage)
        memory_storage.fail_saves = True
        service.delete(1)

        result = service.reload()

        assert result.status == ReloadStatus.REFUSED
        assert service.count == 0
        assert service.has_unsaved_changes is True
        assert service.audit_logger.recent_events[-1].details["unsaved_changes"] is True

    def test_reload_failure_keeps_entries(self, memory_storage):
        """Test that a failed read leaves memory as it was."""
        memory_storage.entries = [make_entry(1)]
        service = LedgerService(memory_storage)
        memory_storage.fail_loads = True

        result = service.reload(force=True)

        assert result.status == ReloadStatus.FAILED
        assert "simulated read failure" in result.error_message
        assert service.count == 1


class TestFactory:
    """Tests for create_ledger_service."""

    def test_uses_settings_data_file(self, tmp_path):
        """Test wiring from settings."""
        target = tmp_path / "books.csv"
        service = create_ledger_service(settings=LedgerSettings(data_file=str(target)))

        service.add(date(2025, 10, 2), 10, Category.FOOD)

        assert service.location == str(target)
        assert target.exists()

    def test_explicit_data_file_wins(self, tmp_path):
        """Test that an explicit path overrides settings."""
        target = tmp_path / "explicit.csv"
        service = create_ledger_service(
            data_file=target,
            settings=LedgerSettings(data_file=str(tmp_path / "other.csv")),
        )
        assert service.location == str(target)

    def test_default_is_ledger_csv_in_working_directory(self):
        """Test the default file name."""
        assert create_ledger_service().location == "ledger.csv"
