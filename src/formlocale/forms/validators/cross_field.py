"""Built-in cross-field validators that read other fields from the context."""

from __future__ import annotations

import operator
import re
from typing import Callable

from formlocale.forms.context import ValidationContext
from formlocale.forms.models import parse_float
from formlocale.forms.validators.common import ERR_FIELD_REQUIRED, ERR_MUST_BE_NUMBER

# Registry of context validators: name -> callable(value, param, context) -> str
BUILTIN_CONTEXT_VALIDATORS: dict[str, Callable[[str, str, ValidationContext], str]] = {}

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
ERR_INVALID_DATE = "Must be a valid date (YYYY-MM-DD)"


def register(name: str):
    """Decorator to register a built-in context validator."""
    def decorator(fn):
        BUILTIN_CONTEXT_VALIDATORS[name] = fn
        return fn
    return decorator


@register("required_if")
def validate_required_if(value: str, param: str, context: ValidationContext) -> str:
    """``field:value`` requires this field when ``field`` equals ``value``.

    The bare ``field`` form requires this field whenever ``field`` is non-empty.
    """
    if value.strip() or not param:
        return ""
    field_name, sep, expected = param.partition(":")
    if sep:
        if context.get(field_name) == expected:
            return f"This field is required when {field_name} is {expected}"
        return ""
    if context.get(field_name).strip():
        return ERR_FIELD_REQUIRED
    return ""


@register("required_unless")
def validate_required_unless(value: str, param: str, context: ValidationContext) -> str:
    """``field:value`` requires this field unless ``field`` equals ``value``.

    The bare ``field`` form requires this field whenever ``field`` is empty.
    """
    if value.strip() or not param:
        return ""
    field_name, sep, exempt = param.partition(":")
    if sep:
        if context.get(field_name) != exempt:
            return f"This field is required unless {field_name} is {exempt}"
        return ""
    if not context.get(field_name).strip():
        return ERR_FIELD_REQUIRED
    return ""


@register("eqfield")
def validate_eqfield(value: str, param: str, context: ValidationContext) -> str:
    if not param:
        return ""
    if value != context.get(param):
        return f'Must match the "{param}" field'
    return ""


@register("nefield")
def validate_nefield(value: str, param: str, context: ValidationContext) -> str:
    if not param:
        return ""
    if value == context.get(param):
        return f'Must not match the "{param}" field'
    return ""


def _numeric_comparator(
    name: str, ok: Callable[[float, float], bool], phrase: str
) -> Callable[[str, str, ValidationContext], str]:
    def validate(value: str, param: str, context: ValidationContext) -> str:
        if not value or not param:
            return ""
        other = context.get(param)
        try:
            number = parse_float(value)
            other_number = parse_float(other) if other else None
        except ValueError:
            return ERR_MUST_BE_NUMBER
        if other_number is not None and not ok(number, other_number):
            return f'Must be {phrase} "{param}"'
        return ""

    validate.__name__ = f"validate_{name}"
    return register(name)(validate)


validate_gtfield = _numeric_comparator("gtfield", operator.gt, "greater than")
validate_gtefield = _numeric_comparator("gtefield", operator.ge, "greater than or equal to")
validate_ltfield = _numeric_comparator("ltfield", operator.lt, "less than")
validate_ltefield = _numeric_comparator("ltefield", operator.le, "less than or equal to")


def _date_comparator(
    name: str, ok: Callable[[str, str], bool], phrase: str
) -> Callable[[str, str, ValidationContext], str]:
    # Lexicographic order equals date order for fixed-width YYYY-MM-DD.
    def validate(value: str, param: str, context: ValidationContext) -> str:
        if not value or not param:
            return ""
        if not DATE_PATTERN.fullmatch(value):
            return ERR_INVALID_DATE
        other = context.get(param)
        if other and DATE_PATTERN.fullmatch(other) and not ok(value, other):
            return f'Must be {phrase} "{param}"'
        return ""

    validate.__name__ = f"validate_{name}"
    return register(name)(validate)


validate_date_after = _date_comparator("date_after", operator.gt, "after")
validate_date_before = _date_comparator("date_before", operator.lt, "before")
