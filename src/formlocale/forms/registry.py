"""Process-wide registry of validators, context validators, and sanitizers."""

from __future__ import annotations

import logging
import threading
from typing import Callable, NamedTuple

from formlocale.core.types import RuleCategory
from formlocale.forms.context import ValidationContext
from formlocale.forms.sanitizers import BUILTIN_SANITIZERS
from formlocale.forms.validators.common import BUILTIN_VALIDATORS
from formlocale.forms.validators.cross_field import BUILTIN_CONTEXT_VALIDATORS

logger = logging.getLogger(__name__)

# (value, param) -> error message, "" when valid
Validator = Callable[[str, str], str]
# (value, param, context) -> error message, "" when valid
ContextValidator = Callable[[str, str, ValidationContext], str]
# value -> transformed value
Sanitizer = Callable[[str], str]


class RuleHandler(NamedTuple):
    """The registry entry that owns a rule name."""

    category: RuleCategory
    fn: Callable[..., str]

    @property
    def needs_context(self) -> bool:
        return self.category in (RuleCategory.CONTEXT, RuleCategory.BUILTIN_CONTEXT)


class Registry:
    """Named validators and sanitizers.

    User registrations are consulted before the built-in tables, so
    registering a built-in name replaces it. Writes copy the affected dict
    under a lock and swap it in; reads never lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._validators: dict[str, Validator] = {}
        self._context_validators: dict[str, ContextValidator] = {}
        self._sanitizers: dict[str, Sanitizer] = {}

    # -- registration -------------------------------------------------------

    def register_validator(self, name: str, fn: Validator) -> None:
        with self._lock:
            self._validators = {**self._validators, name: fn}
        logger.debug("Registered validator %s", name)

    def register_context_validator(self, name: str, fn: ContextValidator) -> None:
        with self._lock:
            self._context_validators = {**self._context_validators, name: fn}
        logger.debug("Registered context validator %s", name)

    def register_sanitizer(self, name: str, fn: Sanitizer) -> None:
        with self._lock:
            self._sanitizers = {**self._sanitizers, name: fn}
        logger.debug("Registered sanitizer %s", name)

    def validator(self, name: str):
        """Decorator form of ``register_validator``."""
        def decorator(fn):
            self.register_validator(name, fn)
            return fn
        return decorator

    def context_validator(self, name: str):
        """Decorator form of ``register_context_validator``."""
        def decorator(fn):
            self.register_context_validator(name, fn)
            return fn
        return decorator

    def sanitizer(self, name: str):
        """Decorator form of ``register_sanitizer``."""
        def decorator(fn):
            self.register_sanitizer(name, fn)
            return fn
        return decorator

    # -- lookup -------------------------------------------------------------

    def get_validator(self, name: str) -> Validator | None:
        return self._validators.get(name) or BUILTIN_VALIDATORS.get(name)

    def get_context_validator(self, name: str) -> ContextValidator | None:
        return self._context_validators.get(name) or BUILTIN_CONTEXT_VALIDATORS.get(name)

    def get_sanitizer(self, name: str) -> Sanitizer | None:
        return self._sanitizers.get(name) or BUILTIN_SANITIZERS.get(name)

    def lookup(self, name: str) -> RuleHandler | None:
        """Resolve a rule name in engine order.

        Context validators, then simple validators, then built-in simple
        validators, then built-in context validators. ``None`` if unknown.
        """
        fn = self._context_validators.get(name)
        if fn is not None:
            return RuleHandler(RuleCategory.CONTEXT, fn)
        fn = self._validators.get(name)
        if fn is not None:
            return RuleHandler(RuleCategory.SIMPLE, fn)
        fn = BUILTIN_VALIDATORS.get(name)
        if fn is not None:
            return RuleHandler(RuleCategory.BUILTIN_SIMPLE, fn)
        fn = BUILTIN_CONTEXT_VALIDATORS.get(name)
        if fn is not None:
            return RuleHandler(RuleCategory.BUILTIN_CONTEXT, fn)
        return None

    def sanitize(self, value: str, names: tuple[str, ...] | list[str]) -> str:
        """Apply sanitizers in order. Unknown names are skipped."""
        for name in names:
            fn = self.get_sanitizer(name)
            if fn is None:
                logger.debug("Unknown sanitizer %s skipped", name)
                continue
            value = fn(value)
        return value

    def validator_names(self) -> list[str]:
        return sorted(
            set(self._validators)
            | set(self._context_validators)
            | set(BUILTIN_VALIDATORS)
            | set(BUILTIN_CONTEXT_VALIDATORS)
        )

    def sanitizer_names(self) -> list[str]:
        return sorted(set(self._sanitizers) | set(BUILTIN_SANITIZERS))


default_registry = Registry()


def register_validator(name: str, fn: Validator) -> None:
    default_registry.register_validator(name, fn)


def register_context_validator(name: str, fn: ContextValidator) -> None:
    default_registry.register_context_validator(name, fn)


def register_sanitizer(name: str, fn: Sanitizer) -> None:
    default_registry.register_sanitizer(name, fn)


def get_validator(name: str) -> Validator | None:
    return default_registry.get_validator(name)


def get_context_validator(name: str) -> ContextValidator | None:
    return default_registry.get_context_validator(name)


def get_sanitizer(name: str) -> Sanitizer | None:
    return default_registry.get_sanitizer(name)
