"""Tests for the validator/sanitizer registry."""

from __future__ import annotations

from pydantic import BaseModel

from formlocale.core.types import RuleCategory
from formlocale.forms import FormEngine, FormField
from formlocale.forms.registry import Registry
from formlocale.forms.validators.common import validate_email


class TestRegistration:
    def test_register_then_lookup_validator(self):
        registry = Registry()

        def even(value, param):
            return "" if int(value) % 2 == 0 else "Must be even"

        registry.register_validator("even", even)
        assert registry.get_validator("even") is even
        assert registry.lookup("even") == (RuleCategory.SIMPLE, even)

    def test_register_context_validator_and_sanitizer(self):
        registry = Registry()

        @registry.context_validator("same_as_first")
        def same_as_first(value, param, context):
            return ""

        @registry.sanitizer("reverse")
        def reverse(value):
            return value[::-1]

        assert registry.get_context_validator("same_as_first") is same_as_first
        assert registry.get_sanitizer("reverse") is reverse
        assert registry.sanitize("abc", ["reverse", "to_upper"]) == "CBA"

    def test_unknown_names(self):
        registry = Registry()
        assert registry.lookup("does_not_exist") is None
        assert registry.sanitize(" x ", ["nope", "trim"]) == "x"


class TestLookupOrder:
    def test_builtins_are_found(self):
        registry = Registry()
        assert registry.lookup("email") == (RuleCategory.BUILTIN_SIMPLE, validate_email)
        handler = registry.lookup("eqfield")
        assert handler.category == RuleCategory.BUILTIN_CONTEXT
        assert handler.needs_context

    def test_user_validator_shadows_builtin(self):
        registry = Registry()

        def lenient(value, param):
            return ""

        registry.register_validator("email", lenient)
        assert registry.lookup("email") == (RuleCategory.SIMPLE, lenient)

    def test_context_validator_wins_over_simple(self):
        registry = Registry()

        def simple(value, param):
            return "simple"

        def contextual(value, param, context):
            return "context"

        registry.register_validator("check", simple)
        registry.register_context_validator("check", contextual)
        assert registry.lookup("check").category == RuleCategory.CONTEXT

    def test_latest_registration_wins(self):
        registry = Registry()
        registry.register_sanitizer("x", str.upper)
        registry.register_sanitizer("x", str.lower)
        assert registry.get_sanitizer("x") is str.lower

    def test_registries_are_isolated(self):
        first, second = Registry(), Registry()
        first.register_validator("only_here", lambda value, param: "")
        assert second.lookup("only_here") is None
        assert "only_here" in first.validator_names()


class NameForm(BaseModel):
    name: str = FormField(validate="min=1")
    age: int = FormField(0, validate="max=120")


class TestBoundRulesShadowing:
    def test_registered_min_replaces_builtin(self):
        registry = Registry()
        registry.register_validator("min", lambda value, param: "custom min")
        errors = FormEngine(registry).decode_and_validate_map(
            {"name": "abc", "age": "30"}, NameForm()
        )
        assert errors == {"name": ["custom min"]}

    def test_registered_context_max_replaces_builtin(self):
        registry = Registry()

        @registry.context_validator("max")
        def max_from_context(value, param, context):
            return "context max" if context.get("name") == "abc" else ""

        errors = FormEngine(registry).decode_and_validate_map(
            {"name": "abc", "age": "30"}, NameForm()
        )
        assert errors == {"age": ["context max"]}

    def test_builtin_bounds_still_use_value_kind(self):
        errors = FormEngine(Registry()).decode_and_validate_map(
            {"name": "abc", "age": "121"}, NameForm()
        )
        assert list(errors) == ["age"]
