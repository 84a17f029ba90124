"""Form descriptor models derived from declarative pydantic forms."""

from __future__ import annotations

import functools
import re
import types
import typing
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from formlocale.core.types import ValueKind

_FORM_KEY = "formlocale"

_INT_RE = re.compile(r"^[+-]?\d+$")
_UINT_RE = re.compile(r"^\+?\d+$")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def FormField(
    default: Any = "",
    *,
    form: str | None = None,
    sanitize: str = "",
    validate: str = "",
    kind: ValueKind | None = None,
    bits: int | None = None,
    **kwargs: Any,
) -> Any:
    """Declare a form field on a pydantic model.

    Args:
        default: Value the attribute holds before decoding.
        form: Wire key. Defaults to the lowercased attribute name.
        sanitize: Comma-separated sanitizer names, applied in order.
        validate: Comma-separated rules (``name`` or ``name=param``).
        kind: Override the value kind inferred from the annotation.
        bits: Integer width for int/uint kinds (default 64).
    """
    extra = {
        _FORM_KEY: {
            "form": form,
            "sanitize": sanitize,
            "validate": validate,
            "kind": kind.value if kind is not None else None,
            "bits": bits,
        }
    }
    return Field(default, json_schema_extra=extra, **kwargs)


class ValidationRule(BaseModel):
    """A single ``name`` or ``name=param`` rule."""

    model_config = ConfigDict(frozen=True)

    name: str
    param: str = ""

    @classmethod
    def parse(cls, raw: str) -> ValidationRule:
        name, _, param = raw.partition("=")
        return cls(name=name.strip(), param=param.strip())


class FieldDescriptor(BaseModel):
    """Everything the orchestrator needs to know about one form field."""

    model_config = ConfigDict(frozen=True)

    name: str
    wire_key: str
    kind: ValueKind = ValueKind.STRING
    bits: int = 64
    sanitizers: tuple[str, ...] = ()
    rules: tuple[ValidationRule, ...] = ()

    @property
    def context_key(self) -> str:
        return self.name.lower()


class FormDescriptor(BaseModel):
    """Ordered field descriptors plus the form's logical name."""

    model_config = ConfigDict(frozen=True)

    name: str
    fields: tuple[FieldDescriptor, ...] = ()

    @classmethod
    def from_model(cls, model_cls: type[BaseModel]) -> FormDescriptor:
        """Derive (and cache) the descriptor for a form model class."""
        return _describe(model_cls)

    def wire_keys(self) -> list[str]:
        return [f.wire_key for f in self.fields]


def split_list(raw: str) -> tuple[str, ...]:
    """Split a comma-separated tag value, dropping empty items."""
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def parse_rules(raw: str) -> tuple[ValidationRule, ...]:
    return tuple(ValidationRule.parse(item) for item in split_list(raw))


def infer_kind(annotation: Any) -> ValueKind:
    """Map a field annotation to a value kind. ``Optional[X]`` counts as ``X``."""
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return infer_kind(args[0])
        return ValueKind.OTHER
    if annotation is str:
        return ValueKind.STRING
    if annotation is bool:
        return ValueKind.BOOL
    if annotation is int:
        return ValueKind.INT
    if annotation is float:
        return ValueKind.FLOAT
    return ValueKind.OTHER


@functools.lru_cache(maxsize=None)
def _describe(model_cls: type[BaseModel]) -> FormDescriptor:
    fields: list[FieldDescriptor] = []
    for name, info in model_cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        tags = extra.get(_FORM_KEY) or {}
        kind = ValueKind(tags["kind"]) if tags.get("kind") else infer_kind(info.annotation)
        fields.append(
            FieldDescriptor(
                name=name,
                wire_key=tags.get("form") or name.lower(),
                kind=kind,
                bits=tags.get("bits") or 64,
                sanitizers=split_list(tags.get("sanitize") or ""),
                rules=parse_rules(tags.get("validate") or ""),
            )
        )
    return FormDescriptor(name=model_cls.__name__, fields=tuple(fields))


def coerce(value: str, kind: ValueKind, bits: int = 64) -> Any:
    """Convert sanitized text into the field's target kind.

    Raises:
        ValueError: If the text does not parse or does not fit ``bits``.
    """
    if kind in (ValueKind.STRING, ValueKind.OTHER):
        return value
    if kind == ValueKind.INT:
        if not _INT_RE.match(value):
            raise ValueError(f"invalid integer: {value!r}")
        number = int(value)
        limit = 1 << (bits - 1)
        if not -limit <= number < limit:
            raise ValueError(f"{value!r} out of range for int{bits}")
        return number
    if kind == ValueKind.UINT:
        if not _UINT_RE.match(value):
            raise ValueError(f"invalid unsigned integer: {value!r}")
        number = int(value)
        if number >= 1 << bits:
            raise ValueError(f"{value!r} out of range for uint{bits}")
        return number
    if kind == ValueKind.FLOAT:
        return parse_float(value)
    if kind == ValueKind.BOOL:
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ValueError(f"invalid boolean: {value!r}")
    raise ValueError(f"unsupported kind: {kind}")


def parse_float(value: str) -> float:
    """Parse a float, rejecting the whitespace and underscores ``float()`` tolerates."""
    if not value or value != value.strip() or "_" in value:
        raise ValueError(f"invalid number: {value!r}")
    return float(value)
