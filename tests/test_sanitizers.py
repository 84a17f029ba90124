"""Tests for built-in sanitizers."""

from __future__ import annotations

import pytest

from formlocale.forms.sanitizers import BUILTIN_SANITIZERS


def run(name: str, value: str) -> str:
    return BUILTIN_SANITIZERS[name](value)


class TestCaseAndWhitespace:
    def test_trim(self):
        assert run("trim", "  hello \t\n") == "hello"

    def test_lower_upper(self):
        assert run("to_lower", "HeLLo") == "hello"
        assert run("to_upper", "HeLLo") == "HELLO"

    def test_normalize_whitespace(self):
        assert run("normalize_whitespace", "a  b\t\tc\n d") == "a b c d"

    def test_title_case(self):
        assert run("title_case", "hELLO   wORLD") == "Hello World"

    def test_title_case_blank_input_unchanged(self):
        assert run("title_case", "   ") == "   "

    def test_camel_case(self):
        assert run("camel_case", "Hello big WORLD") == "helloBigWorld"
        assert run("camel_case", "   ") == ""

    @pytest.mark.parametrize(
        "name,expected",
        [("snake_case", "hello_world_2024"), ("kebab_case", "hello-world-2024")],
    )
    def test_snake_and_kebab(self, name, expected):
        assert run(name, "  Hello, World! 2024 ") == expected


class TestCharacterFilters:
    def test_escape_html(self):
        assert (
            run("escape_html", "<script>alert('xss')</script>")
            == "&lt;script&gt;alert(&#39;xss&#39;)&lt;/script&gt;"
        )
        assert run("escape_html", 'a & "b"') == "a &amp; &#34;b&#34;"

    def test_strip_numeric(self):
        assert run("strip_numeric", "a1b2c3") == "abc"

    def test_strip_alpha(self):
        assert run("strip_alpha", "a1b2c3") == "123"

    def test_remove_special_chars(self):
        assert run("remove_special_chars", "hi!there 42#") == "hi there 42 "

    def test_remove_html_tags(self):
        assert run("remove_html_tags", "<p>Hello <b>there</b></p>") == "Hello there"

    def test_normalize_unicode_drops_lone_surrogates(self):
        assert run("normalize_unicode", "ok\udcffay") == "okay"
        assert run("normalize_unicode", "café") == "café"
