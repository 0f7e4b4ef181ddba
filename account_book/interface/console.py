"""
Menu-Driven Text Interface for Account Book

This is the interactive front end a user works with:

    ==== Account Book ====
    1. Manage entries      (1. Add  2. Delete)
    2. View entries        (1. All  2. By date range  3. By category)
    3. Save to file
    4. Load from file
    5. Exit

DESIGN PRINCIPLES:
1. Every field is re-prompted until it passes validation
2. Clear error messages, never a stack trace
3. Nothing on disk is replaced without confirmation (load asks first)
4. End of input (Ctrl-D / closed stdin) ends the session cleanly

Input and output are injectable so the whole protocol can be driven
from tests.
"""

import sys
from typing import Callable, Optional, TextIO

from account_book.ledger import DeleteStatus, LedgerService, ReloadStatus
from account_book.models.entry import Category, LedgerEntry
from account_book.models.validation import Invalid
from account_book.services.storage import LoadReport
from account_book.validation import InputValidator, parse_integer


RULE_WIDTH = 66

MAIN_MENU = [
    "==== Account Book ====",
    "1. Manage entries",
    "   1.1 Add entry",
    "   1.2 Delete entry",
    "2. View entries",
    "   2.1 All entries",
    "   2.2 By date range",
    "   2.3 By category",
    "3. Save to file",
    "4. Load from file",
    "5. Exit",
]

MANAGE_MENU = [
    "=== Manage Entries ===",
    "1. Add entry",
    "2. Delete entry",
]

VIEW_MENU = [
    "=== View Entries ===",
    "1. All entries",
    "2. By date range",
    "3. By category",
]


class ConsoleClosed(Exception):
    """Input ended (EOF) while the console was waiting for the user."""
    pass


def render_entries(entries: list[LedgerEntry]) -> str:
    """Render entries as a fixed-width table followed by a count line."""
    if not entries:
        return "No entries to display."

    lines = [
        "=" * RULE_WIDTH,
        f" {'ID':<3} | {'Date':<12} | {'Category':<10} | {'Amount':<11} | {'Note':<20}",
        "-" * RULE_WIDTH,
    ]
    for entry in entries:
        lines.append(
            f" {entry.id:<3} | {entry.date.isoformat():<12} | "
            f"{entry.category.value:<10} | {entry.amount:<11} | {entry.note:<20}".rstrip()
        )
    lines.append("=" * RULE_WIDTH)
    lines.append(f"Total entries: {len(entries)}")
    return "\n".join(lines)


class LedgerConsole:
    """
    Interactive menu loop over a LedgerService.

    The console owns no ledger state of its own; it only collects
    input, validates it and calls the service.
    """

    def __init__(
        self,
        service: LedgerService,
        validator: Optional[InputValidator] = None,
        input_func: Callable[[], str] = input,
        output: Optional[TextIO] = None,
    ):
        self._service = service
        self._validator = validator or InputValidator()
        self._input = input_func
        self._out = output or sys.stdout
        self._running = False

    # ------------------------------------------------------------------
    # I/O helpers
    # ------------------------------------------------------------------

    def _print(self, text: str = "") -> None:
        self._out.write(text + "\n")

    def _prompt(self, text: str) -> str:
        self._out.write(text)
        self._out.flush()
        try:
            return self._input()
        except EOFError:
            self._print()
            raise ConsoleClosed()

    def _error(self, message: str) -> None:
        self._print(f"Error: {message}")

    def _ask(self, prompt: str, validate: Callable[[str], object]):
        """Prompt until validate() returns a valid result; return its value."""
        while True:
            result = validate(self._prompt(prompt))
            if isinstance(result, Invalid):
                self._error(result.message)
                continue
            return result.value

    def _choose(self, menu: list[str], maximum: int) -> Optional[int]:
        for line in menu:
            self._print(line)
        self._print()
        result = self._validator.validate_menu_option(
            self._prompt("Select an option: "), 1, maximum
        )
        if isinstance(result, Invalid):
            self._error(result.message)
            self._print()
            return None
        self._print()
        return result.value

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> int:
        """Run the menu loop until the user exits or input ends. Returns 0."""
        self._print("Welcome to Account Book!")
        self._print(f"Data file: {self._service.location}")
        self._report_load(self._service.last_load_report)
        self._print()

        self._running = True
        try:
            while self._running:
                self._main_menu()
        except ConsoleClosed:
            self._print("Input closed.")

        self._print("Thank you for using Account Book!")
        return 0

    def _main_menu(self) -> None:
        choice = self._choose(MAIN_MENU, 5)
        if choice == 1:
            self._manage_menu()
        elif choice == 2:
            self._view_menu()
        elif choice == 3:
            self.save()
        elif choice == 4:
            self.load()
        elif choice == 5:
            self.exit()

    def _manage_menu(self) -> None:
        choice = self._choose(MANAGE_MENU, 2)
        if choice == 1:
            self.add_entry()
        elif choice == 2:
            self.delete_entry()

    def _view_menu(self) -> None:
        choice = self._choose(VIEW_MENU, 3)
        if choice == 1:
            self.view_all()
        elif choice == 2:
            self.view_by_date_range()
        elif choice == 3:
            self.view_by_category()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_entry(self) -> None:
        self._print("=== Add Entry ===")
        categories = ", ".join(Category.values())

        entry_date = self._ask("Enter date (YYYY-MM-DD): ", self._validator.validate_date)
        amount = self._ask("Enter amount: ", self._validator.validate_amount)
        category = self._ask(f"Enter category ({categories}): ", self._validator.validate_category)
        note = self._ask(
            f"Enter note (optional, max {self._validator.max_note_length} characters): ",
            self._validator.validate_note,
        )

        result = self._service.add(entry_date, amount, category, note)
        if result.saved:
            self._print(f"Entry added with ID: {result.entry.id}.")
        else:
            self._print(
                f"Entry {result.entry.id} was added but could not be saved to "
                f"{self._service.location}."
            )
        self._print()

    def delete_entry(self) -> None:
        self._print("=== Delete Entry ===")

        if self._service.count == 0:
            self._print("There are no entries to delete.")
            self._print()
            return

        self._print("Current entries:")
        self._print(render_entries(self._service.list_all()))
        self._print()

        raw = self._prompt("Enter the ID of the entry to delete: ").strip()
        try:
            entry_id = parse_integer(raw)
        except ValueError:
            self._error("Please enter a valid ID number.")
            self._print()
            return

        result = self._service.delete(entry_id)
        if result.status == DeleteStatus.NOT_FOUND:
            self._print(f"No entry with ID {entry_id} exists.")
        elif result.status == DeleteStatus.SAVE_FAILED:
            self._print(
                f"Entry {entry_id} was deleted but the file could not be saved."
            )
        else:
            self._print(f"Entry with ID {entry_id} deleted.")
        self._print()

    def view_all(self) -> None:
        self._print("=== All Entries ===")
        self._print(render_entries(self._service.list_all()))
        self._print()

    def view_by_date_range(self) -> None:
        self._print("=== View by Date Range ===")

        start = self._ask("Enter start date (YYYY-MM-DD): ", self._validator.validate_date)
        end = self._ask("Enter end date (YYYY-MM-DD): ", self._validator.validate_date)

        date_range = self._validator.validate_date_range(start, end)
        if isinstance(date_range, Invalid):
            self._error(date_range.message)
            self._print()
            return

        self._print(f"Entries from {start.isoformat()} to {end.isoformat()}:")
        self._print(render_entries(self._service.list_by_date_range(start, end)))
        self._print()

    def view_by_category(self) -> None:
        self._print("=== View by Category ===")
        categories = ", ".join(Category.values())

        category = self._ask(f"Enter category ({categories}): ", self._validator.validate_category)

        self._print(f"Entries in category '{category.value}':")
        self._print(render_entries(self._service.list_by_category(category)))
        self._print()

    def save(self) -> None:
        self._print("=== Save to File ===")
        if self._service.save():
            self._print(f"Saved {self._service.count} entries to {self._service.location}.")
        else:
            self._print("Failed to save data to file.")
        self._print()

    def load(self) -> None:
        self._print("=== Load from File ===")
        answer = self._prompt(
            "Current data will be replaced by the file contents. Continue? (y/N): "
        ).strip().lower()

        if answer not in ("y", "yes"):
            self._print("Load cancelled.")
            self._print()
            return

        result = self._service.reload(force=True)
        if result.status == ReloadStatus.FAILED:
            self._print(f"Failed to load data from file: {result.error_message}")
        elif result.report is not None:
            self._report_load(result.report)
        self._print()

    def exit(self) -> None:
        if self._service.has_unsaved_changes:
            answer = self._prompt(
                "Some changes could not be saved. Try saving again before exiting? (y/N): "
            ).strip().lower()
            if answer in ("y", "yes"):
                self.save()
        self._running = False

    def _report_load(self, report: Optional[LoadReport]) -> None:
        if report is None:
            return
        for warning in report.warnings:
            self._print(f"Warning: {warning}")
        if not report.source_found:
            self._print("No existing data file found. Starting with an empty ledger.")
        else:
            self._print(f"Loaded {len(report.entries)} entries.")
