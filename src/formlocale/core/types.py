"""Core type definitions shared across all formlocale modules."""

from __future__ import annotations

from enum import StrEnum


class ValueKind(StrEnum):
    """Target kind a form field's text value is coerced into."""

    STRING = "string"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    OTHER = "other"

    @property
    def is_numeric(self) -> bool:
        return self in (ValueKind.INT, ValueKind.UINT, ValueKind.FLOAT)


class RuleCategory(StrEnum):
    """Registry category that owns a rule name, in engine lookup order."""

    CONTEXT = "context"
    SIMPLE = "simple"
    BUILTIN_SIMPLE = "builtin_simple"
    BUILTIN_CONTEXT = "builtin_context"


class PluralCategory(StrEnum):
    """CLDR plural categories."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


class FormatType(StrEnum):
    """Length selector for date and time patterns."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class SymbolPosition(StrEnum):
    """Where a currency symbol sits relative to the amount."""

    BEFORE = "before"
    AFTER = "after"


# Reserved error keys
FORM_ERROR_KEY = "_form"
STRUCT_ERROR_KEY = "_struct"
JSON_ERROR_KEY = "_json"

RESERVED_ERROR_KEYS = frozenset({FORM_ERROR_KEY, STRUCT_ERROR_KEY, JSON_ERROR_KEY})

FieldErrors = dict[str, list[str]]
