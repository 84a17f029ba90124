"""Internationalization runtime: locale store, translator, formatting, detection.

Typical use loads a directory of locale files into a ``LocaleStore`` and
installs ``LocaleMiddleware`` so each request carries a ``Translator`` for
the detected locale.
"""

from formlocale.i18n.detection import DetectionResult, LocaleDetector, detect_locale
from formlocale.i18n.editor import TranslationData, create_editor_router
from formlocale.i18n.middleware import (
    LOCALE_KEY,
    TRANSLATOR_KEY,
    LocaleMiddleware,
    get_translator,
    locale_from_request,
    must_translator_from_request,
    translator_from_request,
)
from formlocale.i18n.models import CurrencyFormat, DateFormat, Locale, NumberFormat, TimeFormat
from formlocale.i18n.plural import plural_category
from formlocale.i18n.store import LocaleLoadError, LocaleStore, save_toml
from formlocale.i18n.translator import Translator
from formlocale.i18n.watcher import LocaleWatcher

__all__ = [
    "CurrencyFormat",
    "DateFormat",
    "DetectionResult",
    "LOCALE_KEY",
    "Locale",
    "LocaleDetector",
    "LocaleLoadError",
    "LocaleMiddleware",
    "LocaleStore",
    "LocaleWatcher",
    "NumberFormat",
    "TRANSLATOR_KEY",
    "TimeFormat",
    "TranslationData",
    "Translator",
    "create_editor_router",
    "detect_locale",
    "get_translator",
    "locale_from_request",
    "must_translator_from_request",
    "plural_category",
    "save_toml",
    "translator_from_request",
]
