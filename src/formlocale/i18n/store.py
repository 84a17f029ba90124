"""Locale store: loads, holds, and reloads locale message bundles."""

from __future__ import annotations

import json
import logging
import re
import tomllib
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml

from formlocale.core.locks import ReadWriteLock
from formlocale.i18n.defaults import (
    DEFAULT_CURRENCY_FORMATS,
    DEFAULT_DATE_FORMATS,
    DEFAULT_NUMBER_FORMATS,
    DEFAULT_TIME_FORMATS,
)
from formlocale.i18n.models import CurrencyFormat, DateFormat, Locale, NumberFormat, TimeFormat
from formlocale.i18n.translator import Translator
from formlocale.i18n.watcher import LocaleWatcher

logger = logging.getLogger(__name__)

LOCALE_SUFFIXES = (".toml", ".json", ".yaml", ".yml")

_BARE_KEY_RE = re.compile(r"[A-Za-z0-9_-]+")


class LocaleLoadError(Exception):
    """A locale file or directory could not be read or parsed."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to load locale from {source}: {reason}")
        self.source = source
        self.reason = reason


def parse_messages(text: str, suffix: str, source: str = "<string>") -> dict[str, Any]:
    """Parse a locale file body into a nested message tree.

    Raises:
        LocaleLoadError: On syntax errors or when the top level is not a table.
    """
    try:
        if suffix == ".toml":
            data = tomllib.loads(text)
        elif suffix == ".json":
            data = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            raise LocaleLoadError(source, f"unsupported file type {suffix!r}")
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise LocaleLoadError(source, str(exc)) from exc
    if not isinstance(data, dict):
        raise LocaleLoadError(source, "top level must be a table of messages")
    return data


def flatten_messages(tree: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten a nested message tree into dotted keys with string values."""
    flat: dict[str, str] = {}
    for key, value in tree.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_messages(value, full_key))
        elif isinstance(value, bool):
            flat[full_key] = "true" if value else "false"
        else:
            flat[full_key] = str(value)
    return flat


def _toml_key(key: str) -> str:
    if all(_BARE_KEY_RE.fullmatch(part) for part in key.split(".")):
        return key
    return '"' + _escape_toml(key) + '"'


def _escape_toml(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def render_toml(code: str, messages: Mapping[str, str], generated_at: datetime | None = None) -> str:
    """Render flat messages in the editor's TOML layout."""
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    lines = [
        f"# {code} locale file",
        f"# Generated by formlocale i18n editor on {stamp}",
        "",
    ]
    for key in sorted(messages):
        lines.append(f'{_toml_key(key)} = "{_escape_toml(str(messages[key]))}"')
    return "\n".join(lines) + "\n"


def save_toml(path: str | Path, code: str, messages: Mapping[str, str]) -> Path:
    """Write ``messages`` to ``path`` as a locale TOML file."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_toml(code, messages), encoding="utf-8")
    logger.info("Saved %d message(s) for locale %s to %s", len(messages), code, target)
    return target


def _apply_default_formats(locale: Locale) -> None:
    tables = (
        ("number_format", DEFAULT_NUMBER_FORMATS),
        ("currency_format", DEFAULT_CURRENCY_FORMATS),
        ("date_format", DEFAULT_DATE_FORMATS),
        ("time_format", DEFAULT_TIME_FORMATS),
    )
    for attribute, table in tables:
        fmt = table.get(locale.code)
        if fmt is not None:
            setattr(locale, attribute, fmt.model_copy(deep=True))


class LocaleStore:
    """Locale bundles keyed by code, guarded by a reader-writer lock.

    ``get`` falls back to the fallback locale when the requested code is
    unknown and returns ``None`` only when neither is loaded.
    """

    def __init__(
        self,
        default_locale: str = "en",
        fallback_locale: str = "en",
        *,
        default_formats: bool = False,
    ) -> None:
        self._lock = ReadWriteLock()
        self._locales: dict[str, Locale] = {}
        self._default_locale = default_locale
        self._fallback_locale = fallback_locale
        self._default_formats = default_formats
        self._watchers: list[LocaleWatcher] = []

    # -- loading ------------------------------------------------------------

    def load(self, path: str | Path) -> list[str]:
        """Load every locale file in a directory. Returns the loaded codes.

        Raises:
            LocaleLoadError: If the directory or any locale file is unreadable.
        """
        directory = Path(path)
        if not directory.is_dir():
            raise LocaleLoadError(str(directory), "not a directory")
        loaded: list[str] = []
        for file_path in sorted(directory.iterdir()):
            if file_path.is_file() and file_path.suffix in LOCALE_SUFFIXES:
                self.load_single(file_path.stem, file_path)
                loaded.append(file_path.stem)
        logger.info("Loaded %d locale(s) from %s", len(loaded), directory)
        return loaded

    def load_single(self, code: str, path: str | Path) -> None:
        """Load (or reload) one locale file, keeping existing format tables."""
        file_path = Path(path)
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LocaleLoadError(str(file_path), str(exc)) from exc
        self.add(code, parse_messages(text, file_path.suffix, str(file_path)))

    def load_from_fs(self, tree: Traversable, prefix: str | None = None) -> list[str]:
        """Load locale files from package resources or any ``Traversable``.

        ``prefix`` selects a sub-directory (``"locales"`` or ``"data/locales"``).
        """
        root = tree
        if prefix:
            for part in prefix.strip("/").split("/"):
                root = root.joinpath(part)
        if not root.is_dir():
            raise LocaleLoadError(str(root), "not a directory")
        loaded: list[str] = []
        for entry in sorted(root.iterdir(), key=lambda item: item.name):
            suffix = Path(entry.name).suffix
            if not entry.is_file() or suffix not in LOCALE_SUFFIXES:
                continue
            code = Path(entry.name).stem
            try:
                text = entry.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise LocaleLoadError(entry.name, str(exc)) from exc
            self.add(code, parse_messages(text, suffix, entry.name))
            loaded.append(code)
        logger.info("Loaded %d embedded locale(s)", len(loaded))
        return loaded

    def add(self, code: str, messages: Mapping[str, Any]) -> None:
        """Register or replace a locale's messages. Format tables survive."""
        with self._lock.write_lock():
            existing = self._locales.get(code)
            if existing is None:
                locale = Locale(code=code, messages=dict(messages))
                if self._default_formats:
                    _apply_default_formats(locale)
                self._locales[code] = locale
            else:
                existing.messages = dict(messages)
        logger.debug("Locale %s now has %d top-level key(s)", code, len(messages))

    # -- accessors ----------------------------------------------------------

    @property
    def default_locale(self) -> str:
        return self._default_locale

    @property
    def fallback_locale(self) -> str:
        return self._fallback_locale

    def set_default(self, code: str) -> None:
        self._default_locale = code

    def set_fallback(self, code: str) -> None:
        self._fallback_locale = code

    def get(self, code: str) -> Locale | None:
        with self._lock.read_lock():
            locale = self._locales.get(code)
            if locale is None:
                locale = self._locales.get(self._fallback_locale)
            return locale

    def has(self, code: str) -> bool:
        with self._lock.read_lock():
            return code in self._locales

    def available_locales(self) -> list[str]:
        with self._lock.read_lock():
            return sorted(self._locales)

    def translator(self, code: str | None = None) -> Translator:
        """A translator bound to ``code`` (default locale when omitted)."""
        return Translator(self, self.get(code or self._default_locale))

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        with self._lock.read_lock():
            yield

    # -- formats ------------------------------------------------------------

    def set_number_format(self, code: str, fmt: NumberFormat) -> bool:
        return self._set_format(code, "number_format", fmt)

    def set_currency_format(self, code: str, fmt: CurrencyFormat) -> bool:
        return self._set_format(code, "currency_format", fmt)

    def set_date_format(self, code: str, fmt: DateFormat) -> bool:
        return self._set_format(code, "date_format", fmt)

    def set_time_format(self, code: str, fmt: TimeFormat) -> bool:
        return self._set_format(code, "time_format", fmt)

    def set_default_formats(self) -> None:
        """Apply the built-in en/de/fr tables to whichever of them are loaded.

        Locales added afterwards pick up their table when they are created.
        """
        self._default_formats = True
        for code, fmt in DEFAULT_NUMBER_FORMATS.items():
            self.set_number_format(code, fmt)
        for code, fmt in DEFAULT_CURRENCY_FORMATS.items():
            self.set_currency_format(code, fmt)
        for code, fmt in DEFAULT_DATE_FORMATS.items():
            self.set_date_format(code, fmt)
        for code, fmt in DEFAULT_TIME_FORMATS.items():
            self.set_time_format(code, fmt)

    def _set_format(self, code: str, attribute: str, fmt: Any) -> bool:
        """Returns False (and changes nothing) when ``code`` is not loaded."""
        with self._lock.write_lock():
            locale = self._locales.get(code)
            if locale is None:
                logger.debug("Skipping %s for unknown locale %s", attribute, code)
                return False
            setattr(locale, attribute, fmt.model_copy(deep=True))
            return True

    # -- live reload --------------------------------------------------------

    def watch(self, directory: str | Path, interval: float = 1.0) -> LocaleWatcher:
        """Start a background watcher that reloads changed locale files."""
        watcher = LocaleWatcher(self, directory, interval=interval)
        watcher.start()
        self._watchers.append(watcher)
        return watcher

    def stop_watching(self) -> None:
        for watcher in self._watchers:
            watcher.stop()
        self._watchers.clear()
