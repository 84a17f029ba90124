"""Typed request-context keys.

Values are stored in the ASGI scope's ``state`` dict keyed by ``ContextKey``
instances. Starlette's ``request.state.<name>`` only ever uses string keys, so
a ``ContextKey`` can never collide with host-application state.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from starlette.requests import HTTPConnection

T = TypeVar("T")


class ContextKey(Generic[T]):
    """A named, identity-compared key for per-request values."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"ContextKey({self.name!r})"

    def set(self, conn: HTTPConnection, value: T) -> None:
        _state(conn)[self] = value

    def get(self, conn: HTTPConnection, default: Any = None) -> T | Any:
        return _state(conn).get(self, default)


def _state(conn: HTTPConnection) -> dict[Any, Any]:
    return conn.scope.setdefault("state", {})
