"""Locale detection middleware and translator accessors."""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import HTTPConnection
from starlette.responses import Response
from starlette.types import ASGIApp

from formlocale.core.context import ContextKey
from formlocale.i18n.detection import LOCALE_COOKIE, LocaleDetector
from formlocale.i18n.store import LocaleStore
from formlocale.i18n.translator import Translator

logger = logging.getLogger(__name__)

TRANSLATOR_KEY: ContextKey[Translator] = ContextKey("formlocale.translator")
LOCALE_KEY: ContextKey[str] = ContextKey("formlocale.locale")

ONE_YEAR_SECONDS = 365 * 24 * 60 * 60


class LocaleMiddleware(BaseHTTPMiddleware):
    """Detects the request locale and stores a ``Translator`` for it.

    ``fallback_locale`` is used when detection resolves to no loaded locale.
    With ``set_cookie`` the resolved code is written back as a script-readable
    cookie so the choice sticks across requests.
    """

    def __init__(
        self,
        app: ASGIApp,
        store: LocaleStore,
        fallback_locale: str | None = None,
        set_cookie: bool = False,
        cookie_name: str = LOCALE_COOKIE,
        cookie_max_age: int = ONE_YEAR_SECONDS,
    ) -> None:
        super().__init__(app)
        self.store = store
        self.fallback_locale = fallback_locale
        self.set_cookie = set_cookie
        self.cookie_name = cookie_name or LOCALE_COOKIE
        self.cookie_max_age = cookie_max_age or ONE_YEAR_SECONDS
        self.detector = LocaleDetector(store, cookie_name=self.cookie_name)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        result = self.detector.detect(request)
        locale = result.locale
        if locale is None and self.fallback_locale:
            locale = self.store.get(self.fallback_locale)

        translator = Translator(self.store, locale)
        code = translator.code or result.code
        TRANSLATOR_KEY.set(request, translator)
        LOCALE_KEY.set(request, code)

        response = await call_next(request)

        if self.set_cookie and locale is not None:
            response.set_cookie(
                self.cookie_name,
                locale.code,
                max_age=self.cookie_max_age,
                path="/",
                httponly=False,
            )
        return response


def translator_from_request(conn: HTTPConnection) -> Translator | None:
    return TRANSLATOR_KEY.get(conn)


def locale_from_request(conn: HTTPConnection) -> str:
    return LOCALE_KEY.get(conn, "")


def must_translator_from_request(conn: HTTPConnection) -> Translator:
    """Raises ``RuntimeError`` when ``LocaleMiddleware`` did not run."""
    translator = TRANSLATOR_KEY.get(conn)
    if translator is None:
        raise RuntimeError("Translator not found on request; is LocaleMiddleware installed?")
    return translator


def _translator_dependency(request: Request) -> Translator:
    translator = translator_from_request(request)
    if translator is None:
        raise HTTPException(status_code=500, detail="Translator not available")
    return translator


get_translator = Depends(_translator_dependency)
