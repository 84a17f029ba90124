"""CLDR-derived plural category selection for integer counts."""

from __future__ import annotations

from typing import Callable

from formlocale.core.types import PluralCategory
from formlocale.i18n.models import primary_subtag

ZERO = PluralCategory.ZERO
ONE = PluralCategory.ONE
TWO = PluralCategory.TWO
FEW = PluralCategory.FEW
MANY = PluralCategory.MANY
OTHER = PluralCategory.OTHER


def _no_plural(n: int) -> PluralCategory:
    return OTHER


def _english(n: int) -> PluralCategory:
    return ONE if n == 1 else OTHER


def _arabic(n: int) -> PluralCategory:
    if n == 0:
        return ZERO
    if n == 1:
        return ONE
    if n == 2:
        return TWO
    if 3 <= n <= 10:
        return FEW
    if 11 <= n <= 99:
        return MANY
    return OTHER


def _hebrew(n: int) -> PluralCategory:
    if n == 1:
        return ONE
    if n == 2:
        return TWO
    if 3 <= n <= 10:
        return FEW
    return OTHER


def _east_slavic(n: int) -> PluralCategory:
    if n % 10 == 1 and n % 100 != 11:
        return ONE
    if 2 <= n % 10 <= 4 and not 10 <= n % 100 <= 19:
        return FEW
    return OTHER


def _polish(n: int) -> PluralCategory:
    if n == 1:
        return ONE
    if 2 <= n % 10 <= 4 and not 10 <= n % 100 <= 19:
        return FEW
    return OTHER


def _czech(n: int) -> PluralCategory:
    if n == 1:
        return ONE
    if 2 <= n <= 4:
        return FEW
    return OTHER


def _slovenian(n: int) -> PluralCategory:
    if n % 100 == 1:
        return ONE
    if n % 100 == 2:
        return TWO
    if 3 <= n % 100 <= 4:
        return FEW
    return OTHER


def _irish(n: int) -> PluralCategory:
    if n == 1:
        return ONE
    if n == 2:
        return TWO
    if 3 <= n <= 6:
        return FEW
    if 7 <= n <= 10:
        return MANY
    return OTHER


def _maltese(n: int) -> PluralCategory:
    if n == 1:
        return ONE
    if n == 2:
        return TWO
    if n == 0 or 3 <= n % 100 <= 10:
        return FEW
    if 11 <= n % 100 <= 19:
        return MANY
    return OTHER


def _scottish_gaelic(n: int) -> PluralCategory:
    if n in (1, 11):
        return ONE
    if n in (2, 12):
        return TWO
    if 3 <= n <= 10 or 13 <= n <= 19:
        return FEW
    return OTHER


def _welsh(n: int) -> PluralCategory:
    return {0: ZERO, 1: ONE, 2: TWO, 3: FEW, 6: MANY}.get(n, OTHER)


def _breton(n: int) -> PluralCategory:
    mod10, mod100 = n % 10, n % 100
    if mod10 == 1 and mod100 not in (11, 71, 91):
        return ONE
    if mod10 == 2 and mod100 not in (12, 72, 92):
        return TWO
    if mod10 in (3, 4, 9) and not (
        10 <= mod100 <= 19 or 70 <= mod100 <= 79 or 90 <= mod100 <= 99
    ):
        return FEW
    if n != 0 and n % 1_000_000 == 0:
        return MANY
    return OTHER


PLURAL_RULES: dict[str, Callable[[int], PluralCategory]] = {
    **dict.fromkeys(("zh", "ja", "ko", "th", "vi", "id", "ms", "lo", "my", "km"), _no_plural),
    "ar": _arabic,
    "he": _hebrew,
    "iw": _hebrew,
    **dict.fromkeys(("ru", "uk", "be", "sr", "hr", "bs"), _east_slavic),
    "pl": _polish,
    "cs": _czech,
    "sk": _czech,
    "sl": _slovenian,
    "ga": _irish,
    "mt": _maltese,
    "gd": _scottish_gaelic,
    "cy": _welsh,
    "br": _breton,
}


def plural_category(locale_code: str, count: int) -> PluralCategory:
    """Select the plural category for ``count`` in the locale's language.

    Matching uses the primary language subtag (``pt-BR`` -> ``pt``); languages
    without a rule use the English one/other split. Negative counts use their
    absolute value.
    """
    rule = PLURAL_RULES.get(primary_subtag(locale_code), _english)
    return rule(abs(int(count)))
