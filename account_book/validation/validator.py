"""
Input Validation

DESIGN DECISION: Every raw string typed at the prompt goes through one of
these checks before it reaches the ledger. Each check returns a result
union (Valid... | Invalid) instead of raising, so the interface can show
the message and re-prompt.

Rules applied in order, first failure wins:

DATE:     empty -> format (strict YYYY-MM-DD) -> minimum date
AMOUNT:   empty -> leading zero -> integer -> positive -> maximum
CATEGORY: empty -> exact member of the category set
NOTE:     length -> not made of special characters only

IMPORTANT: Validation NEVER silently fixes input.
"12a" is not an amount of 12, and "food" is not the Food category.
"""

import re
from datetime import date
from typing import Optional

from account_book.config import LedgerSettings, get_settings
from account_book.models.entry import Category
from account_book.models.validation import (
    AmountValidation,
    CategoryValidation,
    DateRangeValidation,
    DateValidation,
    Invalid,
    InvalidReason,
    MenuOptionValidation,
    NoteValidation,
    ValidAmount,
    ValidCategory,
    ValidDate,
    ValidDateRange,
    ValidMenuOption,
    ValidNote,
)


DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_iso_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD date.

    Raises ValueError for anything else, including real-looking
    but impossible dates such as 2025-02-30.
    """
    if not DATE_PATTERN.fullmatch(value):
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return date.fromisoformat(value)


def parse_integer(value: str) -> int:
    """
    Parse an optionally signed run of ASCII digits.

    Unlike int(), this rejects "1_000", " 12 " and non-ASCII digits.
    """
    if not INTEGER_PATTERN.fullmatch(value):
        raise ValueError(f"Expected an integer, got {value!r}")
    return int(value)


class InputValidator:
    """
    Validates raw user input against the ledger's rules.

    Thresholds come from LedgerSettings so that the minimum date,
    maximum amount and note length are configured in one place.
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        """
        Initialize validator.

        Args:
            settings: Ledger settings. Defaults to the cached application settings.
        """
        self._settings = settings or get_settings().app

    @property
    def min_date(self) -> date:
        return self._settings.min_entry_date

    @property
    def max_amount(self) -> int:
        return self._settings.max_amount

    @property
    def max_note_length(self) -> int:
        return self._settings.max_note_length

    def validate_date(self, raw: Optional[str]) -> DateValidation:
        """
        Validate a transaction date.

        Must be YYYY-MM-DD and not earlier than the minimum entry date.
        """
        text = (raw or "").strip()
        if not text:
            return Invalid(
                field="date",
                reason=InvalidReason.EMPTY,
                message="Date cannot be empty.",
            )

        try:
            value = parse_iso_date(text)
        except ValueError:
            return Invalid(
                field="date",
                reason=InvalidReason.INVALID_FORMAT,
                message="Invalid date format. Please use YYYY-MM-DD.",
            )

        if value < self.min_date:
            return Invalid(
                field="date",
                reason=InvalidReason.BEFORE_MINIMUM,
                message=f"Date must be on or after {self.min_date.isoformat()}.",
            )

        return ValidDate(value=value)

    def validate_amount(self, raw: Optional[str]) -> AmountValidation:
        """
        Validate an amount.

        The leading zero check runs before any parsing, so "0100" is
        rejected as a leading zero rather than read as 100.
        """
        text = (raw or "").strip()
        if not text:
            return Invalid(
                field="amount",
                reason=InvalidReason.EMPTY,
                message="Amount cannot be empty.",
            )

        if len(text) > 1 and text.startswith("0"):
            return Invalid(
                field="amount",
                reason=InvalidReason.LEADING_ZERO,
                message="Amount cannot have leading zeros.",
            )

        try:
            value = parse_integer(text)
        except ValueError:
            return Invalid(
                field="amount",
                reason=InvalidReason.NOT_AN_INTEGER,
                message="Amount must be a valid positive integer.",
            )

        if value <= 0:
            return Invalid(
                field="amount",
                reason=InvalidReason.NOT_POSITIVE,
                message="Amount must be a positive number.",
            )

        if value > self.max_amount:
            return Invalid(
                field="amount",
                reason=InvalidReason.ABOVE_MAXIMUM,
                message=f"Amount cannot exceed {self.max_amount:,}.",
            )

        return ValidAmount(value=value)

    def validate_category(self, raw: Optional[str]) -> CategoryValidation:
        """Validate a category name (exact, case-sensitive match)."""
        text = (raw or "").strip()
        if not text:
            return Invalid(
                field="category",
                reason=InvalidReason.EMPTY,
                message="Category cannot be empty.",
            )

        if not Category.is_valid(text):
            return Invalid(
                field="category",
                reason=InvalidReason.UNKNOWN_CATEGORY,
                message="Category must be one of: " + ", ".join(Category.values()),
            )

        return ValidCategory(value=Category(text))

    def validate_note(self, raw: Optional[str]) -> NoteValidation:
        """
        Validate an optional note.

        Empty or missing notes are fine and normalize to "".
        """
        if raw is None:
            return ValidNote(value="")

        text = raw.strip()

        if len(text) > self.max_note_length:
            return Invalid(
                field="note",
                reason=InvalidReason.TOO_LONG,
                message=f"Note cannot exceed {self.max_note_length} characters.",
            )

        # No letter, digit or whitespace anywhere -> symbols only
        if text and not any(c.isalnum() or c.isspace() for c in text):
            return Invalid(
                field="note",
                reason=InvalidReason.SYMBOLS_ONLY,
                message="Note cannot consist of special characters only.",
            )

        return ValidNote(value=text)

    def validate_menu_option(
        self,
        raw: Optional[str],
        minimum: int,
        maximum: int,
    ) -> MenuOptionValidation:
        """Validate a menu choice within the inclusive [minimum, maximum] range."""
        text = (raw or "").strip()
        if not text:
            return Invalid(
                field="option",
                reason=InvalidReason.EMPTY,
                message="Please enter a valid option.",
            )

        try:
            value = parse_integer(text)
        except ValueError:
            return Invalid(
                field="option",
                reason=InvalidReason.NOT_AN_INTEGER,
                message="Please enter a valid number.",
            )

        if value < minimum or value > maximum:
            return Invalid(
                field="option",
                reason=InvalidReason.OUT_OF_RANGE,
                message=f"Please enter a number between {minimum} and {maximum}.",
            )

        return ValidMenuOption(value=value)

    def validate_date_range(self, start: date, end: date) -> DateRangeValidation:
        """Check that a query range is not reversed."""
        if start > end:
            return Invalid(
                field="date_range",
                reason=InvalidReason.START_AFTER_END,
                message="Start date cannot be after end date.",
            )
        return ValidDateRange(start=start, end=end)


# =============================================================================
# MODULE-LEVEL SHORTCUTS (default settings)
# =============================================================================

def _default() -> InputValidator:
    return InputValidator(get_settings().app)


def validate_date(raw: Optional[str]) -> DateValidation:
    return _default().validate_date(raw)


def validate_amount(raw: Optional[str]) -> AmountValidation:
    return _default().validate_amount(raw)


def validate_category(raw: Optional[str]) -> CategoryValidation:
    return _default().validate_category(raw)


def validate_note(raw: Optional[str]) -> NoteValidation:
    return _default().validate_note(raw)


def validate_menu_option(
    raw: Optional[str],
    minimum: int,
    maximum: int,
) -> MenuOptionValidation:
    return _default().validate_menu_option(raw, minimum, maximum)


def validate_date_range(start: date, end: date) -> DateRangeValidation:
    return _default().validate_date_range(start, end)
