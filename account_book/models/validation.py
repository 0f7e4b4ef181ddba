"""
Validation Result Models

Each validation kind has its own result union, e.g.

    DateValidation = ValidDate | Invalid

so a caller that checks the tag gets a correctly typed value
without any casting. The `kind` field is the discriminator.

IMPORTANT: Validation failures are data, not exceptions.
Callers must inspect the result.
"""

from datetime import date
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from account_book.models.entry import Category


class InvalidReason(str, Enum):
    """Machine-readable reason for a rejected input."""
    EMPTY = "empty"
    INVALID_FORMAT = "invalid_format"
    BEFORE_MINIMUM = "before_minimum"
    LEADING_ZERO = "leading_zero"
    NOT_AN_INTEGER = "not_an_integer"
    NOT_POSITIVE = "not_positive"
    ABOVE_MAXIMUM = "above_maximum"
    UNKNOWN_CATEGORY = "unknown_category"
    TOO_LONG = "too_long"
    SYMBOLS_ONLY = "symbols_only"
    OUT_OF_RANGE = "out_of_range"
    START_AFTER_END = "start_after_end"


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def is_valid(self) -> bool:
        return self.kind == "valid"


class Invalid(_Result):
    """A rejected input, with the reason and a message for the user."""
    kind: Literal["invalid"] = "invalid"
    field: str = Field(
        ...,
        description="Which input was rejected (e.g., 'date', 'amount')"
    )
    reason: InvalidReason
    message: str = Field(
        ...,
        description="Human-readable description of the problem"
    )


class ValidDate(_Result):
    kind: Literal["valid"] = "valid"
    value: date


class ValidAmount(_Result):
    kind: Literal["valid"] = "valid"
    value: int


class ValidCategory(_Result):
    kind: Literal["valid"] = "valid"
    value: Category


class ValidNote(_Result):
    kind: Literal["valid"] = "valid"
    value: str = ""


class ValidMenuOption(_Result):
    kind: Literal["valid"] = "valid"
    value: int


class ValidDateRange(_Result):
    kind: Literal["valid"] = "valid"
    start: date
    end: date


DateValidation = Annotated[Union[ValidDate, Invalid], Field(discriminator="kind")]
AmountValidation = Annotated[Union[ValidAmount, Invalid], Field(discriminator="kind")]
CategoryValidation = Annotated[Union[ValidCategory, Invalid], Field(discriminator="kind")]
NoteValidation = Annotated[Union[ValidNote, Invalid], Field(discriminator="kind")]
MenuOptionValidation = Annotated[Union[ValidMenuOption, Invalid], Field(discriminator="kind")]
DateRangeValidation = Annotated[Union[ValidDateRange, Invalid], Field(discriminator="kind")]
