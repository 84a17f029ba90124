"""Form orchestrator: decode, sanitize, coerce, then validate."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from starlette.requests import Request

from formlocale.core.observability import get_form_observer
from formlocale.core.types import FORM_ERROR_KEY, STRUCT_ERROR_KEY, FieldErrors, ValueKind
from formlocale.forms.context import ValidationContext
from formlocale.forms.decoder import (
    DEFAULT_MAX_MULTIPART_BYTES,
    DecodeError,
    FormValues,
    decode_json,
    decode_mapping,
    decode_request,
)
from formlocale.forms.models import FormDescriptor, coerce
from formlocale.forms.registry import Registry
from formlocale.forms.validation import ValidationCancelled, ValidationEngine

logger = logging.getLogger(__name__)

ERR_CANCELLED = "Request cancelled"


class FormEngine:
    """Drives sanitize-then-validate over a form model instance.

    Every entry point returns a ``FieldErrors`` mapping that is empty on
    success. User input never raises; failures are reported under the
    field's wire key or one of the reserved ``_form``/``_struct``/``_json`` keys.
    """

    def __init__(
        self,
        registry: Registry | None = None,
        *,
        max_multipart_bytes: int = DEFAULT_MAX_MULTIPART_BYTES,
    ) -> None:
        self._validation = ValidationEngine(registry)
        self._max_multipart_bytes = max_multipart_bytes

    @property
    def registry(self) -> Registry:
        return self._validation.registry

    async def decode_and_validate(
        self,
        request: Request,
        target: Any,
        *,
        ctx: Any = None,
        cancel_token: Any = None,
    ) -> FieldErrors:
        """Decode an HTTP form body into ``target`` and validate it."""
        ctx = request if ctx is None else ctx
        start = time.perf_counter()
        form_name = _form_name(target)
        self._notify_decode_start(ctx, form_name)

        shape_errors = self._check_shape(target, ctx, form_name)
        if shape_errors:
            return shape_errors
        try:
            values = await decode_request(request, max_part_size=self._max_multipart_bytes)
        except DecodeError as exc:
            return self._decode_failed(exc, ctx, form_name)
        return self._process(values, target, form_name, ctx, cancel_token, start)

    def decode_and_validate_json(
        self,
        body: bytes | str,
        target: Any,
        *,
        ctx: Any = None,
        cancel_token: Any = None,
    ) -> FieldErrors:
        """Decode a JSON object into ``target`` and validate it."""
        start = time.perf_counter()
        form_name = _form_name(target)
        self._notify_decode_start(ctx, form_name)

        shape_errors = self._check_shape(target, ctx, form_name)
        if shape_errors:
            return shape_errors
        try:
            values = decode_json(body)
        except DecodeError as exc:
            return self._decode_failed(exc, ctx, form_name)
        return self._process(values, target, form_name, ctx, cancel_token, start)

    def decode_and_validate_map(
        self,
        data: Mapping[str, Any],
        target: Any,
        *,
        ctx: Any = None,
        cancel_token: Any = None,
    ) -> FieldErrors:
        """Validate a pre-parsed mapping into ``target``."""
        start = time.perf_counter()
        form_name = _form_name(target)
        self._notify_decode_start(ctx, form_name)

        shape_errors = self._check_shape(target, ctx, form_name)
        if shape_errors:
            return shape_errors
        return self._process(decode_mapping(data), target, form_name, ctx, cancel_token, start)

    # -- internals ----------------------------------------------------------

    def _check_shape(self, target: Any, ctx: Any, form_name: str) -> FieldErrors:
        if target is None:
            message = "Target must be a non-null form model instance"
        elif isinstance(target, type):
            message = "Target must be a form model instance, not a class"
        elif not isinstance(target, BaseModel):
            message = "Target must be a form model instance"
        else:
            return {}
        observer = get_form_observer()
        if observer is not None:
            observer.on_decode_end(ctx, form_name, None)
        return {STRUCT_ERROR_KEY: [message]}

    def _decode_failed(self, exc: DecodeError, ctx: Any, form_name: str) -> FieldErrors:
        logger.debug("Decoding %s failed: %s", form_name, exc.__cause__ or exc)
        observer = get_form_observer()
        if observer is not None:
            observer.on_decode_end(ctx, form_name, exc)
        return {exc.key: [exc.message]}

    def _process(
        self,
        values: FormValues,
        target: BaseModel,
        form_name: str,
        ctx: Any,
        cancel_token: Any,
        start: float,
    ) -> FieldErrors:
        descriptor = FormDescriptor.from_model(type(target))
        collected = self._sanitize_and_coerce(descriptor, values, target)
        context = ValidationContext(collected, cancel_token)

        observer = get_form_observer()
        if observer is not None:
            observer.on_decode_end(ctx, form_name, None)
            observer.on_validation_start(ctx, form_name)

        try:
            errors = self._validation.validate_form(descriptor, context, ctx=ctx)
        except ValidationCancelled:
            logger.info("Validation of %s cancelled", form_name)
            errors = {FORM_ERROR_KEY: [ERR_CANCELLED]}

        observer = get_form_observer()
        if observer is not None:
            observer.on_validation_end(ctx, form_name, errors, time.perf_counter() - start)
        return errors

    def _sanitize_and_coerce(
        self, descriptor: FormDescriptor, values: FormValues, target: BaseModel
    ) -> dict[str, str]:
        registry = self._validation.registry
        by_name: dict[str, str] = {}
        by_wire_key: dict[str, str] = {}

        for field in descriptor.fields:
            raw_values = values.get(field.wire_key) or [""]
            value = registry.sanitize(raw_values[0], field.sanitizers)
            by_wire_key[field.wire_key] = value
            by_name[field.context_key] = value

            if field.kind == ValueKind.OTHER:
                continue
            if value == "" and field.kind != ValueKind.STRING:
                continue
            try:
                setattr(target, field.name, coerce(value, field.kind, field.bits))
            except ValueError:
                # Validation reports the bad value; the attribute keeps its default.
                logger.debug("Could not coerce %s=%r to %s", field.wire_key, value, field.kind)

        # Wire keys win over lowercased attribute names on collision.
        return {**by_name, **by_wire_key}

    @staticmethod
    def _notify_decode_start(ctx: Any, form_name: str) -> None:
        observer = get_form_observer()
        if observer is not None:
            observer.on_decode_start(ctx, form_name)


def _form_name(target: Any) -> str:
    if target is None:
        return ""
    if isinstance(target, type):
        return target.__name__
    return type(target).__name__


default_engine = FormEngine()


async def decode_and_validate(request: Request, target: Any, **kwargs: Any) -> FieldErrors:
    return await default_engine.decode_and_validate(request, target, **kwargs)


def decode_and_validate_json(body: bytes | str, target: Any, **kwargs: Any) -> FieldErrors:
    return default_engine.decode_and_validate_json(body, target, **kwargs)


def decode_and_validate_map(data: Mapping[str, Any], target: Any, **kwargs: Any) -> FieldErrors:
    return default_engine.decode_and_validate_map(data, target, **kwargs)
