"""Built-in validators for common field types."""

from __future__ import annotations

import math
import re
from typing import Callable

from formlocale.core.types import ValueKind
from formlocale.forms.models import parse_float

# Registry of validator functions: name -> callable(value, param) -> str
# Returns an error message on failure, "" on success.
BUILTIN_VALIDATORS: dict[str, Callable[[str, str], str]] = {}

ERR_FIELD_REQUIRED = "This field is required"
ERR_MUST_BE_NUMBER = "Must be a number"
ERR_INVALID_EMAIL = "Invalid email format"
ERR_INVALID_URL = "Invalid URL format"
ERR_MUST_BE_ALPHA = "Must contain only letters"
ERR_MUST_BE_ALPHANUMERIC = "Must contain only letters and numbers"

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}")
URL_PATTERN = re.compile(r"https?://[^\s/$.?#].\S*")


def register(name: str):
    """Decorator to register a built-in validator."""
    def decorator(fn):
        BUILTIN_VALIDATORS[name] = fn
        return fn
    return decorator


def is_number(value: str) -> bool:
    try:
        parse_float(value)
    except ValueError:
        return False
    return True


def _is_letter_or_number(char: str) -> bool:
    return char.isalpha() or char.isnumeric()


@register("required")
def validate_required(value: str, _param: str = "") -> str:
    if not value.strip():
        return ERR_FIELD_REQUIRED
    return ""


@register("email")
def validate_email(value: str, _param: str = "") -> str:
    if not value:
        return ""
    if not EMAIL_PATTERN.fullmatch(value):
        return ERR_INVALID_EMAIL
    return ""


@register("url")
def validate_url(value: str, _param: str = "") -> str:
    if not value:
        return ""
    if not URL_PATTERN.fullmatch(value):
        return ERR_INVALID_URL
    return ""


@register("numeric")
def validate_numeric(value: str, _param: str = "") -> str:
    if not value:
        return ""
    if not is_number(value):
        return ERR_MUST_BE_NUMBER
    return ""


@register("alpha")
def validate_alpha(value: str, _param: str = "") -> str:
    if not value:
        return ""
    if not all(char.isalpha() for char in value):
        return ERR_MUST_BE_ALPHA
    return ""


@register("alphanumeric")
def validate_alphanumeric(value: str, _param: str = "") -> str:
    if not value:
        return ""
    if not all(_is_letter_or_number(char) for char in value):
        return ERR_MUST_BE_ALPHANUMERIC
    return ""


def validate_min(value: str, param: str, kind: ValueKind = ValueKind.STRING) -> str:
    """Lower bound: numeric for numeric kinds, character length otherwise.

    A non-numeric ``param`` disables the rule.
    """
    if not value:
        return ""
    try:
        bound = parse_float(param)
    except ValueError:
        return ""
    if not math.isfinite(bound):
        return ""
    if kind.is_numeric:
        try:
            number = parse_float(value)
        except ValueError:
            return ERR_MUST_BE_NUMBER
        if number < bound:
            return f"Must be at least {param}"
        return ""
    if len(value) < int(bound):
        return f"Must be at least {int(bound)} characters long"
    return ""


def validate_max(value: str, param: str, kind: ValueKind = ValueKind.STRING) -> str:
    """Upper bound: numeric for numeric kinds, character length otherwise."""
    if not value:
        return ""
    try:
        bound = parse_float(param)
    except ValueError:
        return ""
    if not math.isfinite(bound):
        return ""
    if kind.is_numeric:
        try:
            number = parse_float(value)
        except ValueError:
            return ERR_MUST_BE_NUMBER
        if number > bound:
            return f"Must be no more than {param}"
        return ""
    if len(value) > int(bound):
        return f"Must be no more than {int(bound)} characters long"
    return ""


BOUND_VALIDATORS: dict[str, Callable[[str, str, ValueKind], str]] = {
    "min": validate_min,
    "max": validate_max,
}
