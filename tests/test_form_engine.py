"""Tests for the decode-sanitize-validate orchestrator."""

from __future__ import annotations

import threading
from typing import Optional

import pytest
from pydantic import BaseModel

from formlocale.core.types import ValueKind
from formlocale.forms import FormEngine, FormField, Registry
from formlocale.forms.models import FormDescriptor, coerce


class SignupForm(BaseModel):
    email: str = FormField(validate="required,email")
    password: str = FormField(validate="required,min=8")
    age: int = FormField(0, validate="required,min=18,max=120")
    name: str = FormField(sanitize="trim,to_lower", validate="required")
    bio: str = FormField(sanitize="escape_html")


class PasswordForm(BaseModel):
    password: str = FormField(validate="required")
    confirm_password: str = FormField(form="confirm_password", validate="required,eqfield=password")


class AccountForm(BaseModel):
    account_type: str = FormField(form="account_type")
    company_name: str = FormField(form="company_name", validate="required_if=account_type:business")


class TypedForm(BaseModel):
    count: int = FormField(0, validate="numeric")
    small: int = FormField(0, bits=8)
    ratio: float = FormField(0.0)
    active: bool = FormField(False)
    nickname: Optional[str] = FormField(None)


@pytest.fixture
def engine():
    return FormEngine(Registry())


class TestSeedScenarios:
    def test_valid_signup(self, engine):
        form = SignupForm()
        errors = engine.decode_and_validate_map(
            {
                "email": "test@example.com",
                "password": "password123",
                "age": "25",
                "name": "  JOHN DOE  ",
                "bio": "<script>alert('xss')</script>",
            },
            form,
        )
        assert errors == {}
        assert form.name == "john doe"
        assert form.bio == "&lt;script&gt;alert(&#39;xss&#39;)&lt;/script&gt;"
        assert form.age == 25

    def test_mismatched_password(self, engine):
        errors = engine.decode_and_validate_map(
            {"password": "secret123", "confirm_password": "different123"}, PasswordForm()
        )
        assert errors == {"confirm_password": ['Must match the "password" field']}

    def test_conditional_required(self, engine):
        errors = engine.decode_and_validate_map(
            {"account_type": "business", "company_name": ""}, AccountForm()
        )
        assert errors == {
            "company_name": ["This field is required when account_type is business"]
        }
        assert engine.decode_and_validate_map(
            {"account_type": "personal", "company_name": ""}, AccountForm()
        ) == {}


class TestErrorCollection:
    def test_errors_follow_rule_order(self, engine):
        errors = engine.decode_and_validate_map(
            {"email": "nope", "password": "short", "age": "12", "name": " "}, SignupForm()
        )
        assert errors["email"] == ["Invalid email format"]
        assert errors["password"] == ["Must be at least 8 characters long"]
        assert errors["age"] == ["Must be at least 18"]
        assert errors["name"] == ["This field is required"]
        assert "bio" not in errors

    def test_missing_fields_validate_as_empty(self, engine):
        errors = engine.decode_and_validate_map({}, SignupForm())
        assert set(errors) == {"email", "password", "age", "name"}

    def test_non_numeric_int_keeps_default(self, engine):
        form = TypedForm()
        errors = engine.decode_and_validate_map({"count": "abc"}, form)
        assert errors == {"count": ["Must be a number"]}
        assert form.count == 0


class TestCoercion:
    def test_typed_fields(self, engine):
        form = TypedForm()
        errors = engine.decode_and_validate_map(
            {"count": "7", "small": "-5", "ratio": "2.5", "active": "true", "nickname": "Al"},
            form,
        )
        assert errors == {}
        assert (form.count, form.small, form.ratio, form.active) == (7, -5, 2.5, True)
        assert form.nickname == "Al"

    def test_out_of_range_int_is_left_alone(self, engine):
        form = TypedForm()
        engine.decode_and_validate_map({"small": "300"}, form)
        assert form.small == 0

    def test_coerce_rules(self):
        assert coerce("-128", ValueKind.INT, 8) == -128
        with pytest.raises(ValueError):
            coerce("128", ValueKind.INT, 8)
        with pytest.raises(ValueError):
            coerce("-1", ValueKind.UINT)
        assert coerce("T", ValueKind.BOOL) is True
        assert coerce("0", ValueKind.BOOL) is False
        with pytest.raises(ValueError):
            coerce("yes", ValueKind.BOOL)
        with pytest.raises(ValueError):
            coerce(" 1.5", ValueKind.FLOAT)

    def test_descriptor_reads_field_tags(self):
        descriptor = FormDescriptor.from_model(PasswordForm)
        assert descriptor.name == "PasswordForm"
        assert descriptor.wire_keys() == ["password", "confirm_password"]
        confirm = descriptor.fields[1]
        assert [r.name for r in confirm.rules] == ["required", "eqfield"]
        assert confirm.rules[1].param == "password"

    def test_descriptor_infers_kinds(self):
        kinds = {f.name: f.kind for f in FormDescriptor.from_model(TypedForm).fields}
        assert kinds == {
            "count": ValueKind.INT,
            "small": ValueKind.INT,
            "ratio": ValueKind.FLOAT,
            "active": ValueKind.BOOL,
            "nickname": ValueKind.STRING,
        }


class TestShapeAndDecodeErrors:
    def test_none_target(self, engine):
        assert engine.decode_and_validate_map({}, None) == {
            "_struct": ["Target must be a non-null form model instance"]
        }

    def test_class_target(self, engine):
        errors = engine.decode_and_validate_map({}, SignupForm)
        assert errors == {"_struct": ["Target must be a form model instance, not a class"]}

    def test_plain_object_target(self, engine):
        errors = engine.decode_and_validate_map({}, {"email": "x"})
        assert errors == {"_struct": ["Target must be a form model instance"]}

    def test_shape_checked_before_json_decoding(self, engine):
        errors = engine.decode_and_validate_json(b"not json", None)
        assert list(errors) == ["_struct"]

    @pytest.mark.parametrize("body", [b"", b"{bad", b"[1, 2]", b'"text"'])
    def test_json_errors(self, engine, body):
        errors = engine.decode_and_validate_json(body, SignupForm())
        assert list(errors) == ["_json"]
        assert errors["_json"][0].startswith("Failed to decode JSON")

    def test_json_values_are_stringified(self, engine):
        form = TypedForm()
        errors = engine.decode_and_validate_json(
            b'{"count": 3, "ratio": 0.25, "active": true, "nickname": null}', form
        )
        assert errors == {}
        assert (form.count, form.ratio, form.active, form.nickname) == (3, 0.25, True, "")


class TestRegistryIntegration:
    def test_custom_validator(self):
        registry = Registry()
        registry.register_validator(
            "even", lambda value, param: "" if int(value) % 2 == 0 else "Must be even"
        )

        class EvenForm(BaseModel):
            number: int = FormField(0, validate="even")

        errors = FormEngine(registry).decode_and_validate_map({"number": "3"}, EvenForm())
        assert errors == {"number": ["Must be even"]}

    def test_custom_sanitizer(self):
        registry = Registry()
        registry.register_sanitizer("digits_only", lambda v: "".join(c for c in v if c.isdigit()))

        class PhoneForm(BaseModel):
            phone: str = FormField(sanitize="digits_only", validate="min=10")

        form = PhoneForm()
        errors = FormEngine(registry).decode_and_validate_map({"phone": "(555) 123-4567"}, form)
        assert errors == {}
        assert form.phone == "5551234567"

    def test_unknown_rule_passes(self, engine, observer):
        class OddForm(BaseModel):
            value: str = FormField(validate="no_such_rule")

        assert engine.decode_and_validate_map({"value": "x"}, OddForm()) == {}
        assert ("unknown_rule", "OddForm", "value", "no_such_rule") in observer.events

    def test_validator_exception_is_contained(self, observer):
        registry = Registry()

        def broken(value, param):
            raise RuntimeError("boom")

        registry.register_validator("broken", broken)

        class BrokenForm(BaseModel):
            value: str = FormField(validate="broken,required")

        errors = FormEngine(registry).decode_and_validate_map({"value": ""}, BrokenForm())
        assert errors == {"value": ["This field is required"]}
        assert "internal_error" in observer.names()


class TestCancellationAndObserver:
    def test_cancelled_token(self, engine):
        token = threading.Event()
        token.set()
        errors = engine.decode_and_validate_map(
            {"email": "test@example.com"}, SignupForm(), cancel_token=token
        )
        assert errors == {"_form": ["Request cancelled"]}

    def test_event_sequence(self, engine, observer):
        engine.decode_and_validate_map({"email": "bad"}, SignupForm(), ctx="req-1")
        assert observer.names() == [
            "decode_start",
            "decode_end",
            "validation_start",
            "validation_end",
        ]

    def test_decode_failure_reports_error(self, engine, observer):
        engine.decode_and_validate_json(b"{", SignupForm())
        assert observer.names() == ["decode_start", "decode_end"]
        assert observer.events[-1][2] is not None
