"""Built-in format tables for en, de, and fr."""

from __future__ import annotations

from formlocale.core.types import SymbolPosition
from formlocale.i18n.models import CurrencyFormat, DateFormat, NumberFormat, TimeFormat

ENGLISH_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
ENGLISH_MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

_GERMAN_MONTHS = [
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
]
_GERMAN_MONTH_ABBREVIATIONS = [
    "Jan", "Feb", "Mär", "Apr", "Mai", "Jun",
    "Jul", "Aug", "Sep", "Okt", "Nov", "Dez",
]
_FRENCH_MONTHS = [
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]
_FRENCH_MONTH_ABBREVIATIONS = [
    "janv.", "févr.", "mars", "avr.", "mai", "juin",
    "juil.", "août", "sept.", "oct.", "nov.", "déc.",
]

FALLBACK_DATE_PATTERNS = {
    "short": "MM/DD/YYYY",
    "medium": "MMM D, YYYY",
    "long": "MMMM D, YYYY",
}
FALLBACK_TIME_PATTERNS = {
    "short": "HH:mm",
    "medium": "HH:mm:ss",
    "long": "H:mm:ss AM/PM",
}

_TWENTY_FOUR_HOUR = TimeFormat(short="HH:mm", medium="HH:mm:ss", long="HH:mm:ss Z")


def _euro_number(thousands: str) -> NumberFormat:
    return NumberFormat(decimal_separator=",", thousands_separator=thousands, grouping=[3])


def _euro_currency(thousands: str) -> CurrencyFormat:
    return CurrencyFormat(
        symbol="€",
        position=SymbolPosition.AFTER,
        space=True,
        decimal_separator=",",
        thousands_separator=thousands,
        grouping=[3],
    )


DEFAULT_NUMBER_FORMATS: dict[str, NumberFormat] = {
    "en": NumberFormat(),
    "de": _euro_number("."),
    "fr": _euro_number(" "),
}

DEFAULT_CURRENCY_FORMATS: dict[str, CurrencyFormat] = {
    "en": CurrencyFormat(),
    "de": _euro_currency("."),
    "fr": _euro_currency(" "),
}

DEFAULT_DATE_FORMATS: dict[str, DateFormat] = {
    "en": DateFormat(short="MM/DD/YYYY", medium="MMM D, YYYY", long="MMMM D, YYYY"),
    "de": DateFormat(
        short="DD.MM.YYYY",
        medium="D. MMM YYYY",
        long="D. MMMM YYYY",
        month_names=_GERMAN_MONTHS,
        month_abbreviations=_GERMAN_MONTH_ABBREVIATIONS,
    ),
    "fr": DateFormat(
        short="DD/MM/YYYY",
        medium="D MMM YYYY",
        long="D MMMM YYYY",
        month_names=_FRENCH_MONTHS,
        month_abbreviations=_FRENCH_MONTH_ABBREVIATIONS,
    ),
}

DEFAULT_TIME_FORMATS: dict[str, TimeFormat] = {
    "en": TimeFormat(short="H:mm AM/PM", medium="H:mm:ss AM/PM", long="H:mm:ss AM/PM Z"),
    "de": _TWENTY_FOUR_HOUR,
    "fr": _TWENTY_FOUR_HOUR,
}
