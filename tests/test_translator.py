"""Tests for message lookup, plurals, and locale-aware formatting."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from formlocale.i18n.store import LocaleStore
from formlocale.i18n.translator import substitute


@pytest.fixture
def loaded(locales_dir):
    store = LocaleStore()
    store.load(locales_dir)
    store.add("ru", {"file": {"one": "{{.Count}} файл", "few": "{{.Count}} файла", "other": "{{.Count}} файлов"}})
    store.set_default_formats()
    return store


class TestMessages:
    def test_english_plural(self, store):
        en = store.translator("en")
        assert en.t("item", Count=1) == "1 item"
        assert en.t("item", Count=5) == "5 items"

    def test_placeholders(self, loaded):
        assert loaded.translator("en").t("welcome", {"Name": "Ann"}) == "Welcome, Ann!"
        assert loaded.translator("de").t("welcome", Name="Ann") == "Willkommen, Ann!"

    def test_missing_placeholder_left_as_written(self, loaded):
        assert loaded.translator("en").t("welcome") == "Welcome, {{.Name}}!"

    def test_missing_key_returns_key(self, loaded):
        assert loaded.translator("en").t("no.such.key") == "no.such.key"
        assert not loaded.translator("en").has("no.such.key")

    def test_fallback_locale(self, loaded):
        assert loaded.translator("ja").t("farewell") == "Goodbye"

    def test_russian_plurals(self, loaded):
        ru = loaded.translator("ru")
        assert [ru.tp("file", n) for n in (1, 3, 11)] == ["1 файл", "3 файла", "11 файлов"]

    def test_plural_falls_back_to_other(self, loaded):
        loaded.add("pl", {"item": {"other": "{{.Count}} rzeczy"}})
        assert loaded.translator("pl").t("item", Count=2) == "2 rzeczy"

    def test_tn(self, store):
        store.add("en", {"apple": "one apple", "apples": "{{.Count}} apples"})
        en = store.translator("en")
        assert en.tn("apple", "apples", 1) == "one apple"
        assert en.tn("apple", "apples", 4) == "4 apples"

    def test_non_numeric_count_is_ignored(self, store):
        assert store.translator("en").t("item", Count="many") == "item"

    def test_substitute(self):
        assert substitute("{{ .A }}/{{.B}}", {"A": 1, "B": False}) == "1/false"
        assert substitute("{{.A}}", None) == "{{.A}}"

    def test_observer_events(self, store, observer):
        store.translator("en").t("greeting")
        assert observer.events == [
            ("translation_start", "en", "greeting"),
            ("translation_end", "en", "greeting"),
        ]


class TestFormatting:
    def test_german_currency(self, store):
        de = store.translator("de")
        assert de.format_number(1234.56) == "1.234,56"
        assert de.format_currency(1234.56) == "1.234,56 €"
        assert de.parse_currency("1.234,56 €") == 1234.56
        assert de.parse_number("1.234,56") == 1234.56

    def test_currency_with_code(self, store):
        assert store.translator("en").format_currency_with_code(5, "USD") == "$5.00 (USD)"

    def test_percentage_and_scientific(self, store):
        assert store.translator("de").format_percentage(0.5) == "50%"
        assert store.translator("en").format_scientific(1500) == "1.50e+03"

    def test_dates(self, store):
        day = date(2024, 3, 5)
        assert store.translator("en").format_date(day, "short") == "03/05/2024"
        assert store.translator("en").format_date(day) == "Mar 5, 2024"
        assert store.translator("de").format_date(day, "long") == "5. März 2024"
        assert store.translator("fr").format_date(day, "medium") == "5 mars 2024"
        assert store.translator("es").format_date(day, "long") == "March 5, 2024"

    def test_times(self, store):
        moment = time(15, 4, 5)
        assert store.translator("en").format_time(moment, "short") == "3:04 PM"
        assert store.translator("de").format_time(moment) == "15:04:05"
        assert store.translator("es").format_time(moment, "unknown") == "15:04:05"

    def test_datetime(self, store):
        value = datetime(2024, 3, 5, 9, 30)
        assert store.translator("de").format_datetime(value, "short", "short") == "05.03.2024 09:30"

    def test_relative_time_with_messages(self, loaded):
        now = datetime(2024, 1, 10, 12, 0)
        en = loaded.translator("en")
        assert en.format_relative_time(now - timedelta(hours=3), now) == "3 hours ago"
        assert en.format_relative_time(now + timedelta(days=2), now) == "in 2 days"

    def test_relative_time_english_fallback(self, loaded):
        now = datetime(2024, 1, 10, 12, 0)
        de = loaded.translator("de")
        assert de.format_relative_time(now - timedelta(minutes=1), now) == "1 minute ago"
