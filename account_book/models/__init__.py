"""
Data Models Package

This package contains all Pydantic models used in Account Book.
All data flowing through the system must conform to these schemas.
"""

from account_book.models.entry import (
    Category,
    LedgerEntry,
)
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
from account_book.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Entry models
    "Category",
    "LedgerEntry",
    # Validation results
    "AmountValidation",
    "CategoryValidation",
    "DateRangeValidation",
    "DateValidation",
    "Invalid",
    "InvalidReason",
    "MenuOptionValidation",
    "NoteValidation",
    "ValidAmount",
    "ValidCategory",
    "ValidDate",
    "ValidDateRange",
    "ValidMenuOption",
    "ValidNote",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
