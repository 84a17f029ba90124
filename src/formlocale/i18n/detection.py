"""Locale detection from query string, cookie, and Accept-Language."""

from __future__ import annotations

import logging
from typing import NamedTuple

from starlette.requests import HTTPConnection

from formlocale.core.observability import get_i18n_observer
from formlocale.i18n.models import Locale
from formlocale.i18n.store import LocaleStore

logger = logging.getLogger(__name__)

LOCALE_PARAM = "locale"
LOCALE_COOKIE = "locale"


class DetectionResult(NamedTuple):
    code: str
    locale: Locale | None
    fallback_used: bool


class LocaleDetector:
    """Picks a locale for a request.

    Precedence: ``?locale=``, then the ``locale`` cookie, then the first
    ``Accept-Language`` item whose tag (or primary subtag) is loaded, then
    the store's default. Quality values are ignored; header order wins.
    """

    def __init__(
        self,
        store: LocaleStore,
        *,
        query_param: str = LOCALE_PARAM,
        cookie_name: str = LOCALE_COOKIE,
    ) -> None:
        self._store = store
        self._query_param = query_param
        self._cookie_name = cookie_name

    def detect(self, conn: HTTPConnection) -> DetectionResult:
        result = self.resolve(
            query=conn.query_params.get(self._query_param),
            cookie=conn.cookies.get(self._cookie_name),
            accept_language=conn.headers.get("accept-language"),
        )
        observer = get_i18n_observer()
        if observer is not None:
            observer.on_locale_detection(conn, result.code, result.fallback_used)
        return result

    def resolve(
        self,
        query: str | None = None,
        cookie: str | None = None,
        accept_language: str | None = None,
    ) -> DetectionResult:
        """Apply the detection precedence to raw inputs."""
        for candidate in (query, cookie):
            if candidate and self._store.has(candidate):
                return DetectionResult(candidate, self._store.get(candidate), False)

        if accept_language:
            code = self._match_accept_language(accept_language)
            if code is not None:
                return DetectionResult(code, self._store.get(code), False)

        default = self._store.default_locale
        logger.debug("No locale matched; using default %s", default)
        return DetectionResult(default, self._store.get(default), True)

    def _match_accept_language(self, header: str) -> str | None:
        for tag in parse_accept_language(header):
            if self._store.has(tag):
                return tag
            primary = tag.split("-", 1)[0]
            if primary != tag and self._store.has(primary):
                return primary
        return None


def detect_locale(store: LocaleStore, conn: HTTPConnection) -> DetectionResult:
    return LocaleDetector(store).detect(conn)


def parse_accept_language(header: str) -> list[str]:
    """Language tags from an Accept-Language header, in header order."""
    tags: list[str] = []
    for item in header.split(","):
        tag = item.split(";", 1)[0].strip()
        if tag and tag != "*":
            tags.append(tag)
    return tags
