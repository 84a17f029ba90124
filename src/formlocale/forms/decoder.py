"""Decoders that turn a request body, JSON bytes, or a mapping into field values.

Every decoder produces ``wire key -> list of strings``.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect, Request

from formlocale.core.types import FORM_ERROR_KEY, JSON_ERROR_KEY

DEFAULT_MAX_MULTIPART_BYTES = 32 << 20

FormValues = dict[str, list[str]]


class DecodeError(Exception):
    """A request body could not be turned into field values.

    ``key`` is the reserved error key the failure is reported under.
    """

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key
        self.message = message


def media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


async def decode_request(
    request: Request, *, max_part_size: int = DEFAULT_MAX_MULTIPART_BYTES
) -> FormValues:
    """Collect form values from an HTTP request.

    URL-encoded bodies are merged with the query string (body values first).
    Multipart bodies contribute their text parts only; file parts are skipped.
    Any other content type contributes the query string alone.

    Raises:
        DecodeError: Under ``_form`` when the body cannot be parsed.
    """
    content_type = media_type(request)
    values: FormValues = {}

    if content_type.startswith("multipart/form-data"):
        try:
            # body() caches the payload so the endpoint can read it again
            await request.body()
            form = await request.form(max_part_size=max_part_size)
        except (MultiPartException, HTTPException, ClientDisconnect, ValueError) as exc:
            raise DecodeError(FORM_ERROR_KEY, "Failed to parse multipart form data") from exc
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                continue
            values.setdefault(key, []).append(value)
        return values

    if content_type == "application/x-www-form-urlencoded":
        try:
            await request.body()
            form = await request.form()
        except (HTTPException, ClientDisconnect, UnicodeDecodeError) as exc:
            raise DecodeError(FORM_ERROR_KEY, "Failed to parse form data") from exc
        for key, value in form.multi_items():
            values.setdefault(key, []).append(str(value))

    for key, value in request.query_params.multi_items():
        values.setdefault(key, []).append(value)
    return values


def decode_json(body: bytes | str) -> FormValues:
    """Decode a single top-level JSON object into stringified field values.

    Raises:
        DecodeError: Under ``_json`` for empty, malformed, or non-object input.
    """
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(JSON_ERROR_KEY, f"Failed to decode JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise DecodeError(
            JSON_ERROR_KEY,
            f"Failed to decode JSON: expected an object, got {type(data).__name__}",
        )
    return decode_mapping(data)


def decode_mapping(data: Mapping[str, Any]) -> FormValues:
    """Stringify every value of a pre-parsed mapping."""
    return {str(key): [stringify(value)] for key, value in data.items()}


def stringify(value: Any) -> str:
    """Render a JSON-like value the way it would arrive in a form body."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"), sort_keys=True, default=str)
    return str(value)


def _format_float(value: float) -> str:
    if not math.isfinite(value):
        return repr(value)
    if value.is_integer():
        return "%.0f" % value
    return shortest_g(value)


def shortest_g(value: float) -> str:
    """Shortest round-trip digits, in exponent form when exp < -4 or exp >= 6."""
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    mantissa = "".join(str(d) for d in digits)
    exp = len(mantissa) + exponent - 1
    prefix = "-" if sign else ""

    if exp < -4 or exp >= 6:
        head, tail = mantissa[0], mantissa[1:]
        body = f"{head}.{tail}" if tail else head
        return f"{prefix}{body}e{'-' if exp < 0 else '+'}{abs(exp):02d}"

    point = exp + 1
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{mantissa}"
    if point >= len(mantissa):
        return f"{prefix}{mantissa}{'0' * (point - len(mantissa))}"
    return f"{prefix}{mantissa[:point]}.{mantissa[point:]}"
