"""Locale models: message trees and number, currency, date, and time formats."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from formlocale.core.types import SymbolPosition


class NumberFormat(BaseModel):
    """Separators, digit grouping, and fraction digit bounds.

    ``grouping`` lists group widths from the right: ``[3]`` gives
    ``1,234,567`` and ``[3, 2]`` gives ``12,34,567``. The last width repeats.
    """

    decimal_separator: str = "."
    thousands_separator: str = ","
    grouping: list[int] = Field(default_factory=lambda: [3])
    min_fraction_digits: int = 0
    max_fraction_digits: int = 2

    @field_validator("grouping")
    @classmethod
    def _check_grouping(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("grouping must not be empty")
        if any(width <= 0 for width in value):
            raise ValueError("grouping widths must be positive")
        return value

    @model_validator(mode="after")
    def _check_fraction_digits(self) -> NumberFormat:
        if self.min_fraction_digits < 0 or self.max_fraction_digits < 0:
            raise ValueError("fraction digits must not be negative")
        if self.min_fraction_digits > self.max_fraction_digits:
            raise ValueError("min_fraction_digits must not exceed max_fraction_digits")
        return self


class CurrencyFormat(NumberFormat):
    """A number format plus symbol placement."""

    symbol: str = "$"
    position: SymbolPosition = SymbolPosition.BEFORE
    space: bool = False
    min_fraction_digits: int = 2
    max_fraction_digits: int = 2

    def number_format(self) -> NumberFormat:
        return NumberFormat(
            decimal_separator=self.decimal_separator,
            thousands_separator=self.thousands_separator,
            grouping=list(self.grouping),
            min_fraction_digits=self.min_fraction_digits,
            max_fraction_digits=self.max_fraction_digits,
        )


class DateFormat(BaseModel):
    """Short, medium, and long date patterns plus optional month names."""

    short: str = ""
    medium: str = ""
    long: str = ""
    month_names: list[str] | None = None
    month_abbreviations: list[str] | None = None

    @field_validator("month_names", "month_abbreviations")
    @classmethod
    def _check_months(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and len(value) != 12:
            raise ValueError("month name lists must have 12 entries")
        return value


class TimeFormat(BaseModel):
    """Short, medium, and long time patterns."""

    short: str = ""
    medium: str = ""
    long: str = ""


class Locale(BaseModel):
    """A locale's message tree and format tables."""

    code: str
    messages: dict[str, Any] = Field(default_factory=dict)
    number_format: NumberFormat = Field(default_factory=NumberFormat)
    currency_format: CurrencyFormat = Field(default_factory=CurrencyFormat)
    date_format: DateFormat = Field(default_factory=DateFormat)
    time_format: TimeFormat = Field(default_factory=TimeFormat)

    @property
    def language(self) -> str:
        """Primary language subtag (``es`` for ``es-MX``)."""
        return primary_subtag(self.code)


def primary_subtag(code: str) -> str:
    return code.replace("_", "-").split("-", 1)[0].lower()
