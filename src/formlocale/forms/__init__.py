"""Declarative form decoding, sanitization, and validation.

Forms are pydantic models whose fields are declared with ``FormField``;
``FormEngine`` (or the ``FormValidationMiddleware``) decodes a request into a
model instance and returns a mapping of wire key to error messages.
"""

from formlocale.forms.context import ValidationContext
from formlocale.forms.decoder import DecodeError, decode_json, decode_mapping, decode_request, stringify
from formlocale.forms.engine import (
    FormEngine,
    decode_and_validate,
    decode_and_validate_json,
    decode_and_validate_map,
    default_engine,
)
from formlocale.forms.middleware import (
    ERROR_HANDLERS,
    VALIDATED_FORM_KEY,
    FormValidationMiddleware,
    ValidatedForm,
    default_error_handler,
    html_error_handler,
    json_error_handler,
    must_validated_form,
    validated_form,
)
from formlocale.forms.models import FieldDescriptor, FormDescriptor, FormField, ValidationRule
from formlocale.forms.registry import (
    Registry,
    RuleHandler,
    default_registry,
    get_context_validator,
    get_sanitizer,
    get_validator,
    register_context_validator,
    register_sanitizer,
    register_validator,
)
from formlocale.forms.validation import ValidationEngine

__all__ = [
    "DecodeError",
    "ERROR_HANDLERS",
    "FieldDescriptor",
    "FormDescriptor",
    "FormEngine",
    "FormField",
    "FormValidationMiddleware",
    "Registry",
    "RuleHandler",
    "VALIDATED_FORM_KEY",
    "ValidatedForm",
    "ValidationContext",
    "ValidationEngine",
    "ValidationRule",
    "decode_and_validate",
    "decode_and_validate_json",
    "decode_and_validate_map",
    "decode_json",
    "decode_mapping",
    "decode_request",
    "default_engine",
    "default_error_handler",
    "default_registry",
    "get_context_validator",
    "get_sanitizer",
    "get_validator",
    "html_error_handler",
    "json_error_handler",
    "must_validated_form",
    "register_context_validator",
    "register_sanitizer",
    "register_validator",
    "stringify",
    "validated_form",
]
