"""Input validation package."""

from account_book.validation.validator import (
    InputValidator,
    parse_integer,
    parse_iso_date,
    validate_amount,
    validate_category,
    validate_date,
    validate_date_range,
    validate_menu_option,
    validate_note,
)

__all__ = [
    "InputValidator",
    "parse_integer",
    "parse_iso_date",
    "validate_amount",
    "validate_category",
    "validate_date",
    "validate_date_range",
    "validate_menu_option",
    "validate_note",
]
