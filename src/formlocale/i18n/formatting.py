"""Locale-aware number, currency, date, and time formatting and parsing.

Date and time patterns use these tokens:

    YYYY  four-digit year        YY   two-digit year
    MMMM  month name             MMM  abbreviated month name
    MM    zero-padded month      M    month
    DD    zero-padded day        D    day
    HH    zero-padded hour       H    hour
    mm    zero-padded minute     m    minute
    ss    zero-padded second     s    second
    AM/PM meridiem               Z    time zone name ("" when naive)

``HH``/``H`` use the 12-hour clock when the pattern contains ``AM/PM``.
Text inside single quotes is copied literally.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal, localcontext

from formlocale.core.types import FormatType, SymbolPosition
from formlocale.i18n.defaults import ENGLISH_MONTH_ABBREVIATIONS, ENGLISH_MONTHS
from formlocale.i18n.models import CurrencyFormat, DateFormat, NumberFormat, TimeFormat

_TOKEN_RE = re.compile(r"'[^']*'|YYYY|YY|MMMM|MMM|MM|M|DD|D|HH|H|mm|m|ss|s|AM/PM|Z")
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_CURRENCY_CODE_RE = re.compile(r"\s*\([A-Z]{3}\)$")
_SPACE_SEPARATORS = (" ", "\u00a0", "\u202f")

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
MONTH = 30 * DAY
YEAR = 365 * DAY


# -- numbers -----------------------------------------------------------------


def group_digits(digits: str, grouping: list[int], separator: str) -> str:
    """Insert ``separator`` between digit groups, widths taken from the right."""
    groups: list[str] = []
    end = len(digits)
    index = 0
    while end > 0:
        width = grouping[min(index, len(grouping) - 1)]
        groups.append(digits[max(0, end - width):end])
        end -= width
        index += 1
    return separator.join(reversed(groups))


def format_number(number: float, fmt: NumberFormat) -> str:
    """Round half away from zero to ``max_fraction_digits`` and localize.

    Trailing fractional zeros are trimmed down to ``min_fraction_digits``.
    """
    if not math.isfinite(number):
        return str(number)

    value = Decimal(repr(float(number)))
    quantum = Decimal(1).scaleb(-fmt.max_fraction_digits)
    # quantize needs room for every integer digit plus the fraction
    with localcontext() as decimal_ctx:
        decimal_ctx.prec = max(value.adjusted(), 0) + fmt.max_fraction_digits + 2
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    negative = rounded < 0

    integer_part, _, fraction = format(abs(rounded), "f").partition(".")
    fraction = fraction.rstrip("0")
    if len(fraction) < fmt.min_fraction_digits:
        fraction = fraction.ljust(fmt.min_fraction_digits, "0")

    result = group_digits(integer_part, fmt.grouping, fmt.thousands_separator)
    if fraction:
        result += fmt.decimal_separator + fraction
    return "-" + result if negative else result


def format_currency(amount: float, fmt: CurrencyFormat, code: str = "") -> str:
    """Format ``amount`` and attach the symbol (or ``code`` when no symbol is set)."""
    body = format_number(amount, fmt.number_format())
    symbol = fmt.symbol or code or "$"
    gap = " " if fmt.space else ""
    if fmt.position == SymbolPosition.BEFORE:
        return f"{symbol}{gap}{body}"
    return f"{body}{gap}{symbol}"


def format_currency_with_code(amount: float, fmt: CurrencyFormat, code: str) -> str:
    return f"{format_currency(amount, fmt, code)} ({code})"


def format_percentage(number: float, fmt: NumberFormat) -> str:
    return format_number(number * 100, fmt) + "%"


def format_scientific(number: float, precision: int, fmt: NumberFormat) -> str:
    formatted = "%.*e" % (precision, number)
    if fmt.decimal_separator != ".":
        formatted = formatted.replace(".", fmt.decimal_separator)
    return formatted


def parse_number(text: str, fmt: NumberFormat) -> float:
    """Inverse of ``format_number``.

    Raises:
        ValueError: If the cleaned text is not a number.
    """
    cleaned = text.strip()
    separator = fmt.thousands_separator
    if separator in _SPACE_SEPARATORS:
        for space in _SPACE_SEPARATORS:
            cleaned = cleaned.replace(space, "")
    elif separator:
        cleaned = cleaned.replace(separator, "")
    if fmt.decimal_separator and fmt.decimal_separator != ".":
        cleaned = cleaned.replace(fmt.decimal_separator, ".")
    if not _NUMBER_RE.fullmatch(cleaned):
        raise ValueError(f"invalid number: {text!r}")
    return float(cleaned)


def parse_currency(text: str, fmt: CurrencyFormat) -> float:
    """Inverse of ``format_currency`` and ``format_currency_with_code``.

    Raises:
        ValueError: If what remains after removing symbol and code is not a number.
    """
    cleaned = _CURRENCY_CODE_RE.sub("", text.strip()).strip()
    if fmt.symbol:
        if cleaned.startswith(fmt.symbol):
            cleaned = cleaned[len(fmt.symbol):]
        elif cleaned.endswith(fmt.symbol):
            cleaned = cleaned[: -len(fmt.symbol)]
    return parse_number(cleaned.strip(), fmt.number_format())


# -- dates and times ---------------------------------------------------------


def resolve_format_type(format_type: str | FormatType | None) -> FormatType:
    """Coerce a selector to a ``FormatType``; unknown values mean medium."""
    try:
        return FormatType(format_type)
    except ValueError:
        return FormatType.MEDIUM


def select_pattern(
    fmt: DateFormat | TimeFormat,
    format_type: str | FormatType | None,
    fallbacks: dict[str, str],
) -> str:
    kind = resolve_format_type(format_type)
    return getattr(fmt, kind.value) or fallbacks[kind.value]


def format_pattern(
    value: date | time | datetime,
    pattern: str,
    month_names: list[str] | None = None,
    month_abbreviations: list[str] | None = None,
) -> str:
    """Render ``value`` with a token pattern (see module docstring)."""
    names = month_names or ENGLISH_MONTHS
    abbreviations = month_abbreviations or ENGLISH_MONTH_ABBREVIATIONS
    twelve_hour = "AM/PM" in pattern

    def render(match: re.Match[str]) -> str:
        token = match.group(0)
        if token.startswith("'"):
            return token[1:-1] if len(token) > 2 else "'"
        if token in ("YYYY", "YY", "MMMM", "MMM", "MM", "M", "DD", "D"):
            return _render_date_token(value, token, names, abbreviations)
        return _render_time_token(value, token, twelve_hour)

    return _TOKEN_RE.sub(render, pattern)


def _render_date_token(
    value: date | time | datetime, token: str, names: list[str], abbreviations: list[str]
) -> str:
    if isinstance(value, time):
        return ""
    if token == "YYYY":
        return f"{value.year:04d}"
    if token == "YY":
        return f"{value.year % 100:02d}"
    if token == "MMMM":
        return names[value.month - 1]
    if token == "MMM":
        return abbreviations[value.month - 1]
    if token == "MM":
        return f"{value.month:02d}"
    if token == "M":
        return str(value.month)
    if token == "DD":
        return f"{value.day:02d}"
    return str(value.day)


def _render_time_token(value: date | time | datetime, token: str, twelve_hour: bool) -> str:
    if not isinstance(value, (time, datetime)):
        return ""
    if token in ("HH", "H"):
        hour = (value.hour % 12 or 12) if twelve_hour else value.hour
        return f"{hour:02d}" if token == "HH" else str(hour)
    if token == "mm":
        return f"{value.minute:02d}"
    if token == "m":
        return str(value.minute)
    if token == "ss":
        return f"{value.second:02d}"
    if token == "s":
        return str(value.second)
    if token == "AM/PM":
        return "AM" if value.hour < 12 else "PM"
    # Z
    return value.tzname() or ""


# -- relative time -----------------------------------------------------------


def relative_unit(seconds: float) -> tuple[str, int]:
    """Pick the largest coarse unit not exceeding ``seconds`` (absolute value)."""
    seconds = abs(seconds)
    if seconds < MINUTE:
        return "second", int(seconds)
    if seconds < HOUR:
        return "minute", int(seconds // MINUTE)
    if seconds < DAY:
        return "hour", int(seconds // HOUR)
    if seconds < WEEK:
        return "day", int(seconds // DAY)
    if seconds < MONTH:
        return "week", int(seconds // WEEK)
    if seconds < YEAR:
        return "month", int(seconds // MONTH)
    return "year", int(seconds // YEAR)


def english_relative_time(seconds: float) -> str:
    """``"3 hours ago"`` for positive (past) deltas, ``"in 3 hours"`` for future."""
    unit, value = relative_unit(seconds)
    label = f"{value} {unit}" if value == 1 else f"{value} {unit}s"
    if seconds < 0:
        return f"in {label}"
    return f"{label} ago"
