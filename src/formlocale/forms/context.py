"""Read-only snapshot of sanitized field values for cross-field rules."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


class ValidationContext:
    """Sanitized values keyed by wire key and by lowercased field name.

    Built once per validation pass and never mutated afterwards.
    """

    __slots__ = ("_values", "_cancel_token")

    def __init__(self, values: Mapping[str, str], cancel_token: Any = None) -> None:
        self._values = MappingProxyType(dict(values))
        self._cancel_token = cancel_token

    def get(self, field_name: str) -> str:
        """Look up a field, tolerating case and underscore differences.

        Tries the exact name, the lowercased name, then both with underscores
        removed. Returns ``""`` when nothing matches.
        """
        lowered = field_name.lower()
        for candidate in (
            field_name,
            lowered,
            field_name.replace("_", ""),
            lowered.replace("_", ""),
        ):
            if candidate in self._values:
                return self._values[candidate]
        return ""

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._values

    @property
    def values(self) -> Mapping[str, str]:
        return self._values

    @property
    def cancelled(self) -> bool:
        """True when the host's cancellation token has been set."""
        return self._cancel_token is not None and self._cancel_token.is_set()
