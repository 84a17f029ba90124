"""Validation engine: evaluates a field's rule list against its sanitized value."""

from __future__ import annotations

import logging
from typing import Any

from formlocale.core.observability import get_form_observer
from formlocale.core.types import FieldErrors, RuleCategory
from formlocale.forms.context import ValidationContext
from formlocale.forms.models import FieldDescriptor, FormDescriptor
from formlocale.forms.registry import Registry, RuleHandler, default_registry
from formlocale.forms.validators.common import BOUND_VALIDATORS

logger = logging.getLogger(__name__)


def _is_user_handler(handler: RuleHandler | None) -> bool:
    return handler is not None and handler.category in (
        RuleCategory.CONTEXT,
        RuleCategory.SIMPLE,
    )


class ValidationCancelled(Exception):
    """Raised inside a validation pass when the cancellation token is set."""


class ValidationEngine:
    """Registry-based validation engine.

    Rules resolve in registry order (context validators, simple validators,
    built-in simple, built-in context). The built-in ``min``/``max`` check
    bounds that depend on the field's value kind; a registered validator
    with either name replaces them. Unknown rules pass.
    """

    def __init__(self, registry: Registry | None = None) -> None:
        self._registry = registry or default_registry

    @property
    def registry(self) -> Registry:
        return self._registry

    def validate_field(
        self,
        field: FieldDescriptor,
        value: str,
        context: ValidationContext,
        *,
        form_name: str = "",
        ctx: Any = None,
    ) -> list[str]:
        """Validate a single field value. Returns error messages in rule order."""
        errors: list[str] = []

        for rule in field.rules:
            handler = self._registry.lookup(rule.name)
            if not _is_user_handler(handler):
                bound = BOUND_VALIDATORS.get(rule.name)
                if bound is not None:
                    err = bound(value, rule.param, field.kind)
                    if err:
                        errors.append(err)
                    continue

            if handler is None:
                logger.debug("Unknown rule %r on field %s", rule.name, field.wire_key)
                observer = get_form_observer()
                if observer is not None:
                    observer.on_unknown_rule(ctx, form_name, field.wire_key, rule.name)
                continue

            try:
                if handler.needs_context:
                    err = handler.fn(value, rule.param, context)
                else:
                    err = handler.fn(value, rule.param)
            except Exception as exc:
                logger.exception(
                    "Validator %r failed on field %s", rule.name, field.wire_key
                )
                observer = get_form_observer()
                if observer is not None:
                    observer.on_internal_error(
                        ctx, form_name, field.wire_key, rule.name, exc
                    )
                continue
            if err:
                errors.append(err)

        return errors

    def validate_form(
        self,
        descriptor: FormDescriptor,
        context: ValidationContext,
        *,
        ctx: Any = None,
    ) -> FieldErrors:
        """Validate every field in descriptor order against the context snapshot.

        Raises:
            ValidationCancelled: If the context's cancellation token is set.
        """
        all_errors: FieldErrors = {}

        for field in descriptor.fields:
            if context.cancelled:
                raise ValidationCancelled(descriptor.name)
            value = context.values.get(field.wire_key, "")
            field_errors = self.validate_field(
                field, value, context, form_name=descriptor.name, ctx=ctx
            )
            if field_errors:
                all_errors[field.wire_key] = field_errors

        if context.cancelled:
            raise ValidationCancelled(descriptor.name)
        return all_errors
