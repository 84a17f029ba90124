"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from formlocale.core.observability import (
    FormObserver,
    I18nObserver,
    register_form_observer,
    register_i18n_observer,
)
from formlocale.i18n.store import LocaleStore

EN_TOML = """\
welcome = "Welcome, {{.Name}}!"
farewell = "Goodbye"

[item]
one = "{{.Count}} item"
other = "{{.Count}} items"

[relative_time]
past = "{{.Value}} {{.Unit}} ago"
future = "in {{.Value}} {{.Unit}}"
"""

DE_TOML = """\
welcome = "Willkommen, {{.Name}}!"

[item]
one = "{{.Count}} Artikel"
other = "{{.Count}} Artikel"
"""


class RecordingObserver(FormObserver, I18nObserver):
    """Collects every observer event as a tuple."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_decode_start(self, ctx, form_name):
        self.events.append(("decode_start", form_name))

    def on_decode_end(self, ctx, form_name, error):
        self.events.append(("decode_end", form_name, error))

    def on_validation_start(self, ctx, form_name):
        self.events.append(("validation_start", form_name))

    def on_validation_end(self, ctx, form_name, errors, duration):
        self.events.append(("validation_end", form_name, errors))

    def on_unknown_rule(self, ctx, form_name, field, rule):
        self.events.append(("unknown_rule", form_name, field, rule))

    def on_internal_error(self, ctx, form_name, field, rule, error):
        self.events.append(("internal_error", form_name, field, rule, error))

    def on_translation_start(self, ctx, locale, key):
        self.events.append(("translation_start", locale, key))

    def on_translation_end(self, ctx, locale, key, duration):
        self.events.append(("translation_end", locale, key))

    def on_locale_detection(self, ctx, detected_locale, fallback_used):
        self.events.append(("locale_detection", detected_locale, fallback_used))

    def names(self) -> list[str]:
        return [event[0] for event in self.events]


@pytest.fixture
def observer():
    recorder = RecordingObserver()
    register_form_observer(recorder)
    register_i18n_observer(recorder)
    yield recorder
    register_form_observer(None)
    register_i18n_observer(None)


@pytest.fixture
def locales_dir(tmp_path):
    directory = tmp_path / "locales"
    directory.mkdir()
    (directory / "en.toml").write_text(EN_TOML, encoding="utf-8")
    (directory / "de.toml").write_text(DE_TOML, encoding="utf-8")
    return directory


@pytest.fixture
def store():
    s = LocaleStore(default_locale="en", fallback_locale="en")
    s.add("en", {"greeting": "Hello", "item": {"one": "{{.Count}} item", "other": "{{.Count}} items"}})
    s.add("es", {"greeting": "Hola"})
    s.add("de", {"greeting": "Hallo"})
    s.add("fr", {"greeting": "Bonjour"})
    s.set_default_formats()
    return s
