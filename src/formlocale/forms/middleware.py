"""Form validation middleware, error handlers, and request accessors."""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Literal, TypeVar, Union

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.types import ASGIApp

from formlocale.core.context import ContextKey
from formlocale.core.types import FieldErrors
from formlocale.forms.decoder import media_type
from formlocale.forms.engine import FormEngine, default_engine
from formlocale.forms.sanitizers import escape_html

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

ErrorHandler = Callable[[Request, FieldErrors], Union[Response, Awaitable[Response]]]

VALIDATED_FORM_KEY: ContextKey[BaseModel] = ContextKey("formlocale.validated_form")

_HTML_HEAD = """<!DOCTYPE html>
<html>
<head>
    <title>Validation Error</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 40px; }
        .error { color: #d32f2f; background: #ffebee; padding: 10px; border-radius: 4px; margin: 10px 0; }
        .field { font-weight: bold; }
    </style>
</head>
<body>
    <h1>Validation Error</h1>
    <p>The following errors occurred:</p>"""

_HTML_TAIL = """
    <p><a href="javascript:history.back()">Go Back</a></p>
</body>
</html>"""


def default_error_handler(request: Request, errors: FieldErrors) -> Response:
    """JSON 400 with the error map under ``details``."""
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": errors},
    )


def json_error_handler(request: Request, errors: FieldErrors) -> Response:
    """JSON 422 with one ``{field, error}`` entry per message."""
    flattened = [
        {"field": field, "error": message}
        for field, messages in errors.items()
        for message in messages
    ]
    return JSONResponse(
        status_code=422,
        content={"status": "error", "message": "Validation failed", "errors": flattened},
    )


def html_error_handler(request: Request, errors: FieldErrors) -> Response:
    """Self-contained HTML 400 page listing each field and message."""
    parts = [_HTML_HEAD]
    for field, messages in errors.items():
        for message in messages:
            parts.append(
                '\n    <div class="error">\n'
                f'        <span class="field">{escape_html(field)}:</span> {escape_html(message)}\n'
                "    </div>"
            )
    parts.append(_HTML_TAIL)
    return HTMLResponse("".join(parts), status_code=400)


ERROR_HANDLERS: dict[str, ErrorHandler] = {
    "default": default_error_handler,
    "json": json_error_handler,
    "html": html_error_handler,
}


class FormValidationMiddleware(BaseHTTPMiddleware):
    """Validate every request against a form model before the endpoint runs.

    On failure the error handler's response is returned and the endpoint is
    never called. On success a fresh, populated instance of ``form`` is
    stored on the request (see ``validated_form``).
    """

    def __init__(
        self,
        app: ASGIApp,
        form: type[BaseModel],
        error_handler: ErrorHandler | None = None,
        source: Literal["auto", "form", "json"] = "auto",
        engine: FormEngine | None = None,
    ) -> None:
        super().__init__(app)
        self.form = form
        self.error_handler = error_handler
        self.source = source
        self.engine = engine

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        target = self.form.model_construct()
        engine = self.engine or getattr(request.app.state, "form_engine", default_engine)

        if self._use_json(request):
            body = await request.body()
            errors = engine.decode_and_validate_json(body, target, ctx=request)
        else:
            errors = await engine.decode_and_validate(request, target)

        if errors:
            logger.debug("Rejected %s %s: %s", request.method, request.url.path, errors)
            handler = self.error_handler or getattr(
                request.app.state, "form_error_handler", default_error_handler
            )
            response = handler(request, errors)
            if inspect.isawaitable(response):
                response = await response
            return response

        VALIDATED_FORM_KEY.set(request, target)
        return await call_next(request)

    def _use_json(self, request: Request) -> bool:
        if self.source == "json":
            return True
        if self.source == "form":
            return False
        return media_type(request) == "application/json"


def validated_form(request: Request) -> BaseModel | None:
    """The form stored by ``FormValidationMiddleware``, or ``None``."""
    return VALIDATED_FORM_KEY.get(request)


def must_validated_form(request: Request) -> BaseModel:
    """Like ``validated_form`` but raises when no form was stored.

    Raises:
        RuntimeError: If the middleware did not run for this request.
    """
    form = VALIDATED_FORM_KEY.get(request)
    if form is None:
        raise RuntimeError("No validated form on request; is FormValidationMiddleware installed?")
    return form


def ValidatedForm(form_cls: type[M] | None = None) -> Any:
    """FastAPI dependency that yields the validated form.

    Responds 500 when the middleware is missing or stored a different model.
    """

    def dependency(request: Request) -> BaseModel:
        form = validated_form(request)
        if form is None or (form_cls is not None and not isinstance(form, form_cls)):
            raise HTTPException(status_code=500, detail="Validated form not available")
        return form

    return Depends(dependency)
