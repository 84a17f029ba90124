"""Translation editor: a thin CRUD surface over a directory of locale files."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field, ValidationError

from formlocale.i18n.store import (
    LOCALE_SUFFIXES,
    LocaleLoadError,
    LocaleStore,
    flatten_messages,
    parse_messages,
    save_toml,
)

logger = logging.getLogger(__name__)

_LOCALE_CODE_RE = re.compile(r"[A-Za-z0-9_-]+")

_EDITOR_HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Translation Editor</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 24px; }
        table { border-collapse: collapse; width: 100%; }
        th, td { border: 1px solid #ddd; padding: 6px; vertical-align: top; }
        th { background: #f5f5f5; text-align: left; }
        textarea { width: 100%; min-height: 2.5em; box-sizing: border-box; }
        #status { margin-left: 12px; color: #2e7d32; }
    </style>
</head>
<body>
    <h1>Translation Editor</h1>
    <p><button id="save">Save</button><span id="status"></span></p>
    <table id="grid"></table>
    <script>
    let data = null;
    const base = window.location.pathname.replace(/\\/$/, "");

    async function load() {
        const response = await fetch(base + "/api/translations");
        data = await response.json();
        const grid = document.getElementById("grid");
        grid.innerHTML = "";
        const head = grid.insertRow();
        head.innerHTML = "<th>Key</th>" + data.locales.map(l => "<th></th>").join("");
        data.locales.forEach((l, i) => { head.cells[i + 1].textContent = l; });
        for (const key of data.keys) {
            const row = grid.insertRow();
            row.insertCell().textContent = key;
            for (const locale of data.locales) {
                const area = document.createElement("textarea");
                area.value = (data.messages[locale] || {})[key] || "";
                area.oninput = () => {
                    data.messages[locale] = data.messages[locale] || {};
                    data.messages[locale][key] = area.value;
                };
                row.insertCell().appendChild(area);
            }
        }
    }

    document.getElementById("save").onclick = async () => {
        const response = await fetch(base + "/api/save", {
            method: "POST",
            headers: {"Content-Type": "application/json"},
            body: JSON.stringify(data),
        });
        document.getElementById("status").textContent = response.ok ? "Saved" : "Save failed";
    };

    load();
    </script>
</body>
</html>
"""


class TranslationData(BaseModel):
    """Payload of ``GET /api/translations`` and ``POST /api/save``."""

    keys: list[str] = Field(default_factory=list)
    messages: dict[str, dict[str, str]] = Field(default_factory=dict)
    locales: list[str] = Field(default_factory=list)


def list_locale_codes(locales_dir: Path) -> list[str]:
    """Sorted codes of every locale file in ``locales_dir``."""
    return sorted(
        {
            path.stem
            for path in locales_dir.iterdir()
            if path.is_file() and path.suffix in LOCALE_SUFFIXES
        }
    )


def read_translations(locales_dir: Path) -> TranslationData:
    """Collect every TOML locale as flat dotted keys. Unreadable files are skipped."""
    messages: dict[str, dict[str, str]] = {}
    all_keys: set[str] = set()
    for path in sorted(locales_dir.glob("*.toml")):
        try:
            tree = parse_messages(path.read_text(encoding="utf-8"), ".toml", str(path))
        except (OSError, UnicodeDecodeError, LocaleLoadError) as exc:
            logger.warning("Skipping unreadable locale file %s: %s", path.name, exc)
            continue
        flat = flatten_messages(tree)
        messages[path.stem] = flat
        all_keys.update(flat)
    return TranslationData(
        keys=sorted(all_keys),
        messages=messages,
        locales=sorted(messages),
    )


def create_editor_router(locales_dir: str | Path, store: LocaleStore | None = None) -> APIRouter:
    """Build the editor's routes. Mount with ``app.include_router(router, prefix=...)``.

    When ``store`` is given, saved locales are reloaded into it immediately.
    """
    directory = Path(locales_dir)
    router = APIRouter()

    @router.get("/", response_class=HTMLResponse)
    async def editor_ui() -> HTMLResponse:
        return HTMLResponse(_EDITOR_HTML)

    @router.get("/api/locales")
    async def list_locales() -> Response:
        try:
            codes = list_locale_codes(directory)
        except OSError as exc:
            logger.error("Failed to read locales dir %s: %s", directory, exc)
            return PlainTextResponse("Failed to read locales dir", status_code=500)
        return JSONResponse(codes)

    @router.get("/api/translations")
    async def get_translations() -> Response:
        if not directory.is_dir():
            return PlainTextResponse("Failed to read locales dir", status_code=500)
        return JSONResponse(read_translations(directory).model_dump())

    @router.post("/api/save")
    async def save_translations(request: Request) -> Response:
        try:
            payload: Any = json.loads(await request.body())
            data = TranslationData.model_validate(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError):
            return PlainTextResponse("Invalid JSON data", status_code=400)

        for locale in data.locales:
            if not _LOCALE_CODE_RE.fullmatch(locale):
                return PlainTextResponse(f"Invalid locale code: {locale}", status_code=400)

        for locale in data.locales:
            messages = data.messages.get(locale)
            if messages is None:
                continue
            path = directory / f"{locale}.toml"
            try:
                save_toml(path, locale, messages)
            except OSError as exc:
                logger.error("Failed to save locale %s: %s", locale, exc)
                return PlainTextResponse(f"Failed to save {locale}: {exc}", status_code=500)
            if store is not None:
                try:
                    store.load_single(locale, path)
                except LocaleLoadError as exc:
                    logger.error("Saved locale %s but reload failed: %s", locale, exc)

        return JSONResponse({"status": "saved"})

    return router
