"""Wiring helpers that install formlocale into a FastAPI application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from formlocale.core.config import I18nConfig, Settings
from formlocale.forms.engine import FormEngine
from formlocale.forms.middleware import ERROR_HANDLERS, ErrorHandler, default_error_handler
from formlocale.i18n.editor import create_editor_router
from formlocale.i18n.middleware import LocaleMiddleware
from formlocale.i18n.store import LocaleStore

logger = logging.getLogger(__name__)


def build_locale_store(config: I18nConfig | None = None) -> LocaleStore:
    """Create a store from settings, loading ``locales_dir`` when it exists.

    Raises:
        LocaleLoadError: If a locale file in ``locales_dir`` is invalid.
    """
    if config is None:
        config = I18nConfig()

    store = LocaleStore(
        default_locale=config.default_locale,
        fallback_locale=config.fallback_locale,
        default_formats=config.default_formats,
    )
    if config.locales_dir:
        directory = Path(config.locales_dir)
        if directory.is_dir():
            store.load(directory)
        else:
            logger.warning("Locales directory %s does not exist; store is empty", directory)
    return store


def error_handler_for(settings: Settings) -> ErrorHandler:
    """The form error handler named by ``settings.forms.error_format``."""
    handler = ERROR_HANDLERS.get(settings.forms.error_format)
    if handler is None:
        logger.warning(
            "Unknown form error format %r; using default", settings.forms.error_format
        )
        return default_error_handler
    return handler


def configure_app(
    app: FastAPI,
    settings: Settings | None = None,
    store: LocaleStore | None = None,
) -> LocaleStore:
    """Install locale detection, the form engine, and (optionally) the editor.

    Stores ``settings``, ``locale_store``, ``form_engine`` and
    ``form_error_handler`` on ``app.state``. Returns the locale store.
    """
    if settings is None:
        settings = Settings()
    logging.getLogger("formlocale").setLevel(settings.log_level.upper())

    i18n = settings.i18n
    if store is None:
        store = build_locale_store(i18n)

    app.state.settings = settings
    app.state.locale_store = store
    app.state.form_engine = FormEngine(max_multipart_bytes=settings.forms.max_multipart_bytes)
    app.state.form_error_handler = error_handler_for(settings)

    app.add_middleware(
        LocaleMiddleware,
        store=store,
        fallback_locale=i18n.fallback_locale,
        set_cookie=i18n.set_cookie,
        cookie_name=i18n.cookie_name,
        cookie_max_age=i18n.cookie_max_age,
    )

    if i18n.editor_enabled and i18n.locales_dir:
        app.include_router(
            create_editor_router(i18n.locales_dir, store=store),
            prefix=i18n.editor_path.rstrip("/"),
        )
        logger.info("Translation editor mounted at %s", i18n.editor_path)

    if i18n.watch and i18n.locales_dir and Path(i18n.locales_dir).is_dir():
        store.watch(i18n.locales_dir, interval=i18n.watch_interval_seconds)

    return store


def create_app(settings: Settings | None = None, store: LocaleStore | None = None) -> FastAPI:
    """Create a FastAPI application with formlocale configured.

    Uses the factory pattern so tests can create isolated app instances.
    Locale watchers are stopped when the application shuts down.
    """
    if settings is None:
        settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.locale_store.stop_watching()

    app = FastAPI(title="formlocale", lifespan=lifespan, debug=settings.debug)
    configure_app(app, settings, store)
    return app
