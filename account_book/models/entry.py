"""
Core Data Models for Account Book

These models define the schema of a ledger entry.
They are designed to:
1. Enforce type safety at runtime
2. Stay immutable once created
3. Map one-to-one onto a line of the ledger file

DESIGN DECISION: The model only enforces structural rules (positive id,
positive amount, known category). The stricter input rules (minimum date,
maximum amount, note content) belong to the validator, so a hand-edited
ledger file that breaks them can still be loaded and inspected.
"""

import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Supported entry categories.

    Values are matched exactly (case-sensitive) both at the prompt
    and when reading the ledger file.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    LIVING = "Living"
    SHOPPING = "Shopping"
    TRANSFER = "Transfer"
    HOBBY = "Hobby"

    @classmethod
    def values(cls) -> list[str]:
        """Category names in display order."""
        return [member.value for member in cls]

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls.values()


# =============================================================================
# CORE ENTRY MODEL
# =============================================================================

class LedgerEntry(BaseModel):
    """
    One recorded transaction.

    CRITICAL: Entries are only created by the ledger service's add
    operation (which assigns the id) or by loading the ledger file.
    There is no update; an entry is deleted and re-added instead.
    """
    model_config = ConfigDict(frozen=True, strict=True)

    id: int = Field(
        ...,
        gt=0,
        description="Unique entry identifier, never reused"
    )
    date: datetime.date = Field(
        ...,
        description="Transaction date"
    )
    amount: int = Field(
        ...,
        gt=0,
        description="Amount as a positive integer"
    )
    category: Category = Field(
        ...,
        description="Entry category"
    )
    note: str = Field(
        default="",
        description="Free-text note, may be empty"
    )

    def to_row(self) -> list[str]:
        """
        Convert to the field list written to the ledger file.

        Returns columns in order:
        [id, date, category, amount, note]
        """
        return [
            str(self.id),
            self.date.isoformat(),
            self.category.value,
            str(self.amount),
            self.note,
        ]

    def __str__(self) -> str:
        return f"{self.id} | {self.date} | {self.category.value} | {self.amount} | {self.note}"
