"""Tests for observer registration and the logging observer."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from formlocale.core.observability import (
    LoggingObserver,
    enable_logging_observer,
    get_form_observer,
    get_i18n_observer,
    register_form_observer,
    register_i18n_observer,
)
from formlocale.forms import FormEngine, FormField, Registry


class NewsletterForm(BaseModel):
    email: str = FormField(validate="required,email")


class TestRegistration:
    def test_enable_and_clear(self):
        observer = enable_logging_observer()
        try:
            assert get_form_observer() is observer
            assert get_i18n_observer() is observer
        finally:
            register_form_observer(None)
            register_i18n_observer(None)
        assert get_form_observer() is None
        assert get_i18n_observer() is None

    def test_no_observer_is_fine(self, store):
        FormEngine(Registry()).decode_and_validate_map({}, NewsletterForm())
        assert store.translator("en").t("greeting") == "Hello"


class TestLoggingObserver:
    def test_validation_summary(self, caplog):
        log = logging.getLogger("formlocale.test")
        register_form_observer(LoggingObserver(log))
        try:
            with caplog.at_level(logging.DEBUG, logger="formlocale.test"):
                FormEngine(Registry()).decode_and_validate_map({"email": "x"}, NewsletterForm())
        finally:
            register_form_observer(None)

        messages = [record.getMessage() for record in caplog.records]
        assert any(m.startswith("Validated form NewsletterForm: 1 error(s)") for m in messages)
        assert "Form NewsletterForm field email: Invalid email format" in messages

    def test_decode_failure_logged(self, caplog):
        observer = LoggingObserver()
        with caplog.at_level(logging.INFO, logger="formlocale"):
            observer.on_decode_end(None, "SomeForm", ValueError("bad body"))
        assert "Failed to decode form SomeForm: bad body" in caplog.text
