"""Request-scoped translator bound to one locale."""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Mapping
from datetime import date, datetime
from datetime import time as dt_time
from typing import TYPE_CHECKING, Any

from formlocale.core.observability import get_i18n_observer
from formlocale.core.types import FormatType, PluralCategory
from formlocale.i18n import formatting
from formlocale.i18n.defaults import FALLBACK_DATE_PATTERNS, FALLBACK_TIME_PATTERNS
from formlocale.i18n.models import CurrencyFormat, DateFormat, Locale, NumberFormat, TimeFormat
from formlocale.i18n.plural import plural_category

if TYPE_CHECKING:
    from formlocale.i18n.store import LocaleStore

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{\{\s*\.(\w+)\s*\}\}")

_DEFAULT_NUMBER_FORMAT = NumberFormat()
_DEFAULT_CURRENCY_FORMAT = CurrencyFormat()
_DEFAULT_DATE_FORMAT = DateFormat()
_DEFAULT_TIME_FORMAT = TimeFormat()


def substitute(message: str, params: Mapping[str, Any] | None) -> str:
    """Replace ``{{.Name}}`` placeholders; unknown names are left as written."""
    if not params:
        return message

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in params:
            return match.group(0)
        value = params[name]
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    return _PLACEHOLDER_RE.sub(replace, message)


def _as_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class Translator:
    """Looks up and formats messages for a single locale.

    Message reads take the store's read lock, so a reload by the watcher is
    seen by the next lookup. A translator never raises for a missing key or
    locale: unknown keys come back unchanged.
    """

    def __init__(self, store: LocaleStore, locale: Locale | None) -> None:
        self._store = store
        self._locale = locale

    @property
    def locale(self) -> Locale | None:
        return self._locale

    @property
    def code(self) -> str:
        return self._locale.code if self._locale is not None else ""

    # -- messages -----------------------------------------------------------

    def t(self, key: str, params: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """Translate ``key`` and substitute ``{{.Name}}`` placeholders.

        When a ``Count`` parameter is given and ``key`` has plural subkeys,
        the subkey for the count's plural category is used (``other`` if the
        exact category is missing).
        """
        merged = {**(params or {}), **kwargs}
        start = time.perf_counter()
        observer = get_i18n_observer()
        if observer is not None:
            observer.on_translation_start(None, self.code, key)

        message = None
        count = _as_count(merged.get("Count")) if "Count" in merged else None
        if count is not None:
            message = self._plural_message(key, count)
        if message is None:
            message = self.message(key)
        result = key if message is None else substitute(message, merged)

        observer = get_i18n_observer()
        if observer is not None:
            observer.on_translation_end(None, self.code, key, time.perf_counter() - start)
        return result

    def tn(
        self,
        singular: str,
        plural: str,
        count: int,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """Pick ``singular`` when ``count == 1`` else ``plural``; ``Count`` is injected."""
        merged = {**(params or {}), "Count": count}
        key = singular if count == 1 else plural
        message = self.message(key)
        return substitute(key if message is None else message, merged)

    def tp(self, key: str, count: int, params: Mapping[str, Any] | None = None) -> str:
        """Translate ``key`` using the locale's plural category subkeys."""
        merged = {**(params or {}), "Count": count}
        message = self._plural_message(key, count)
        if message is None:
            message = self.message(key)
        return substitute(key if message is None else message, merged)

    def plural_category(self, count: int) -> PluralCategory:
        return plural_category(self.code, count)

    def has(self, key: str) -> bool:
        return self.message(key) is not None

    def message(self, key: str) -> str | None:
        """Raw message for ``key``: flat key first, then dotted traversal."""
        if self._locale is None:
            return None
        with self._store.read_lock():
            messages = self._locale.messages
            value = messages.get(key)
            if isinstance(value, str):
                return value
            current: Any = messages
            for part in key.split("."):
                if not isinstance(current, Mapping) or part not in current:
                    return None
                current = current[part]
            return current if isinstance(current, str) else None

    def _plural_message(self, key: str, count: int) -> str | None:
        category = self.plural_category(count)
        message = self.message(f"{key}.{category}")
        if message is None and category != PluralCategory.OTHER:
            message = self.message(f"{key}.{PluralCategory.OTHER}")
        return message

    # -- numbers ------------------------------------------------------------

    @property
    def number_format(self) -> NumberFormat:
        return self._locale.number_format if self._locale is not None else _DEFAULT_NUMBER_FORMAT

    @property
    def currency_format(self) -> CurrencyFormat:
        return (
            self._locale.currency_format if self._locale is not None else _DEFAULT_CURRENCY_FORMAT
        )

    def format_number(self, number: float) -> str:
        return formatting.format_number(number, self.number_format)

    def format_currency(self, amount: float, currency_code: str = "") -> str:
        return formatting.format_currency(amount, self.currency_format, currency_code)

    def format_currency_with_code(self, amount: float, currency_code: str) -> str:
        return formatting.format_currency_with_code(amount, self.currency_format, currency_code)

    def format_percentage(self, number: float) -> str:
        return formatting.format_percentage(number, self.number_format)

    def format_scientific(self, number: float, precision: int = 2) -> str:
        return formatting.format_scientific(number, precision, self.number_format)

    def parse_number(self, text: str) -> float:
        """Raises ``ValueError`` for text that is not a number in this locale."""
        return formatting.parse_number(text, self.number_format)

    def parse_currency(self, text: str) -> float:
        """Raises ``ValueError`` for text that is not an amount in this locale."""
        return formatting.parse_currency(text, self.currency_format)

    # -- dates and times ----------------------------------------------------

    def format_date(self, value: date, format_type: str | FormatType = FormatType.MEDIUM) -> str:
        fmt = self._locale.date_format if self._locale is not None else _DEFAULT_DATE_FORMAT
        pattern = formatting.select_pattern(fmt, format_type, FALLBACK_DATE_PATTERNS)
        return formatting.format_pattern(value, pattern, fmt.month_names, fmt.month_abbreviations)

    def format_time(
        self, value: datetime | dt_time, format_type: str | FormatType = FormatType.MEDIUM
    ) -> str:
        fmt = self._locale.time_format if self._locale is not None else _DEFAULT_TIME_FORMAT
        pattern = formatting.select_pattern(fmt, format_type, FALLBACK_TIME_PATTERNS)
        return formatting.format_pattern(value, pattern)

    def format_datetime(
        self,
        value: datetime,
        date_type: str | FormatType = FormatType.MEDIUM,
        time_type: str | FormatType = FormatType.MEDIUM,
    ) -> str:
        return f"{self.format_date(value, date_type)} {self.format_time(value, time_type)}"

    def format_relative_time(self, target: datetime, now: datetime | None = None) -> str:
        """``"3 hours ago"`` / ``"in 2 days"`` using ``relative_time.*`` messages.

        Falls back to English when the locale has no ``relative_time.past``
        or ``relative_time.future`` message.
        """
        if now is None:
            now = datetime.now(target.tzinfo)
        seconds = (now - target).total_seconds()
        message = self.message("relative_time.future" if seconds < 0 else "relative_time.past")
        if message is None:
            return formatting.english_relative_time(seconds)

        unit, value = formatting.relative_unit(seconds)
        unit_message = self.message(f"relative_time.{unit}.{'one' if value == 1 else 'other'}")
        if unit_message is None:
            unit_message = unit if value == 1 else f"{unit}s"
        return substitute(message, {"Value": value, "Unit": unit_message})
