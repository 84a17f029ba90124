"""Observer spine for form and i18n lifecycle events.

Observers are registered process-wide. The engines look up the registered
observer at each phase and invoke its hooks; with nothing registered every
hook is skipped. ``ctx`` is whatever the host threads through (usually the
current request or ``None``).
"""

from __future__ import annotations

import logging
from typing import Any

from formlocale.core.types import FieldErrors

logger = logging.getLogger(__name__)


class FormObserver:
    """Hooks around form decoding and validation. Override what you need."""

    def on_decode_start(self, ctx: Any, form_name: str) -> None:
        pass

    def on_decode_end(self, ctx: Any, form_name: str, error: BaseException | None) -> None:
        pass

    def on_validation_start(self, ctx: Any, form_name: str) -> None:
        pass

    def on_validation_end(
        self, ctx: Any, form_name: str, errors: FieldErrors, duration: float
    ) -> None:
        pass

    def on_unknown_rule(self, ctx: Any, form_name: str, field: str, rule: str) -> None:
        pass

    def on_internal_error(
        self, ctx: Any, form_name: str, field: str, rule: str, error: BaseException
    ) -> None:
        pass


class I18nObserver:
    """Hooks around translation and locale detection. Override what you need."""

    def on_translation_start(self, ctx: Any, locale: str, key: str) -> None:
        pass

    def on_translation_end(self, ctx: Any, locale: str, key: str, duration: float) -> None:
        pass

    def on_locale_detection(self, ctx: Any, detected_locale: str, fallback_used: bool) -> None:
        pass


class LoggingObserver(FormObserver, I18nObserver):
    """Observer that writes every event to the standard logging system."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def on_decode_start(self, ctx: Any, form_name: str) -> None:
        self._log.debug("Decoding form %s", form_name)

    def on_decode_end(self, ctx: Any, form_name: str, error: BaseException | None) -> None:
        if error is not None:
            self._log.info("Failed to decode form %s: %s", form_name, error)
        else:
            self._log.debug("Decoded form %s", form_name)

    def on_validation_start(self, ctx: Any, form_name: str) -> None:
        self._log.debug("Validating form %s", form_name)

    def on_validation_end(
        self, ctx: Any, form_name: str, errors: FieldErrors, duration: float
    ) -> None:
        error_count = sum(len(msgs) for msgs in errors.values())
        self._log.info(
            "Validated form %s: %d error(s) in %.2fms",
            form_name,
            error_count,
            duration * 1000,
        )
        for field, messages in errors.items():
            for message in messages:
                self._log.debug("Form %s field %s: %s", form_name, field, message)

    def on_unknown_rule(self, ctx: Any, form_name: str, field: str, rule: str) -> None:
        self._log.debug("Unknown rule %r on %s.%s ignored", rule, form_name, field)

    def on_internal_error(
        self, ctx: Any, form_name: str, field: str, rule: str, error: BaseException
    ) -> None:
        self._log.error("Rule %r on %s.%s raised: %s", rule, form_name, field, error)

    def on_translation_start(self, ctx: Any, locale: str, key: str) -> None:
        self._log.debug("Translating %s [%s]", key, locale)

    def on_translation_end(self, ctx: Any, locale: str, key: str, duration: float) -> None:
        self._log.debug("Translated %s [%s] in %.3fms", key, locale, duration * 1000)

    def on_locale_detection(self, ctx: Any, detected_locale: str, fallback_used: bool) -> None:
        self._log.debug("Detected locale %s (fallback=%s)", detected_locale, fallback_used)


_form_observer: FormObserver | None = None
_i18n_observer: I18nObserver | None = None


def register_form_observer(observer: FormObserver | None) -> None:
    """Set (or clear, with ``None``) the global form observer."""
    global _form_observer
    _form_observer = observer


def register_i18n_observer(observer: I18nObserver | None) -> None:
    """Set (or clear, with ``None``) the global i18n observer."""
    global _i18n_observer
    _i18n_observer = observer


def get_form_observer() -> FormObserver | None:
    return _form_observer


def get_i18n_observer() -> I18nObserver | None:
    return _i18n_observer


def enable_logging_observer(log: logging.Logger | None = None) -> LoggingObserver:
    """Register a ``LoggingObserver`` for both forms and i18n."""
    observer = LoggingObserver(log)
    register_form_observer(observer)
    register_i18n_observer(observer)
    return observer
