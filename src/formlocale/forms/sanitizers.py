"""Built-in sanitizers: pure string-to-string transforms applied before validation."""

from __future__ import annotations

import re
import unicodedata
from typing import Callable

# Registry of sanitizer functions: name -> callable(value) -> str
BUILTIN_SANITIZERS: dict[str, Callable[[str], str]] = {}

_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_HTML_TAG_RE = re.compile(r"<[^>]*>")

_HTML_ESCAPES = {
    "&": "&amp;",
    "'": "&#39;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&#34;",
}


def register(name: str):
    """Decorator to register a built-in sanitizer."""
    def decorator(fn):
        BUILTIN_SANITIZERS[name] = fn
        return fn
    return decorator


def _is_digit(char: str) -> bool:
    return unicodedata.category(char) == "Nd"


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


@register("trim")
def trim(value: str) -> str:
    return value.strip()


@register("to_lower")
def to_lower(value: str) -> str:
    return value.lower()


@register("to_upper")
def to_upper(value: str) -> str:
    return value.upper()


@register("escape_html")
def escape_html(value: str) -> str:
    return "".join(_HTML_ESCAPES.get(char, char) for char in value)


@register("strip_numeric")
def strip_numeric(value: str) -> str:
    return "".join(char for char in value if not _is_digit(char))


@register("strip_alpha")
def strip_alpha(value: str) -> str:
    return "".join(char for char in value if not char.isalpha())


@register("normalize_whitespace")
def normalize_whitespace(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value)


@register("remove_special_chars")
def remove_special_chars(value: str) -> str:
    """Keep letters, digits and whitespace; other characters become a space."""
    return "".join(
        char if char.isalpha() or _is_digit(char) or char.isspace() else " "
        for char in value
    )


@register("title_case")
def title_case(value: str) -> str:
    words = value.lower().split()
    if not words:
        return value
    return " ".join(_capitalize(word) for word in words)


@register("camel_case")
def camel_case(value: str) -> str:
    words = value.lower().split()
    if not words:
        return ""
    return words[0] + "".join(_capitalize(word) for word in words[1:])


@register("snake_case")
def snake_case(value: str) -> str:
    return _NON_ALNUM_RE.sub("_", value.lower()).strip("_")


@register("kebab_case")
def kebab_case(value: str) -> str:
    return _NON_ALNUM_RE.sub("-", value.lower()).strip("-")


@register("remove_html_tags")
def remove_html_tags(value: str) -> str:
    return _HTML_TAG_RE.sub("", value)


@register("normalize_unicode")
def normalize_unicode(value: str) -> str:
    """Drop code points that cannot be encoded as UTF-8 (lone surrogates)."""
    return value.encode("utf-8", "ignore").decode("utf-8")
