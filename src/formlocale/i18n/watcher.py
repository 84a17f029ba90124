"""Polling watcher that hot-reloads locale files when they change."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from formlocale.i18n.store import LocaleStore

logger = logging.getLogger(__name__)

_SUFFIXES = (".toml", ".json", ".yaml", ".yml")


class LocaleWatcher:
    """Reloads created or modified locale files into a store.

    Files present when the watcher starts count as already loaded; only
    later creations and modifications (by mtime and size) trigger a reload.
    Reload errors are logged and never stop the watcher.
    """

    def __init__(self, store: LocaleStore, directory: str | Path, interval: float = 1.0) -> None:
        self._store = store
        self._directory = Path(directory)
        self._interval = interval
        self._snapshot: dict[Path, tuple[int, int]] = {}
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self.reload_count = 0
        self.error_count = 0

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._snapshot = self._scan()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop, name="formlocale-locale-watcher", daemon=True
        )
        self._thread.start()
        logger.info("Watching %s for locale changes", self._directory)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("Stopped watching %s", self._directory)

    def poll(self) -> list[str]:
        """Check once for changes and reload them. Returns reloaded codes."""
        current = self._scan()
        reloaded: list[str] = []
        for path, signature in sorted(current.items()):
            if self._snapshot.get(path) == signature:
                continue
            code = path.stem
            logger.info("Reloading locale %s from %s", code, path.name)
            try:
                self._store.load_single(code, path)
            except Exception:
                self.error_count += 1
                logger.exception("Failed to reload locale %s", code)
                # Keep the old signature so the next poll retries.
                current[path] = self._snapshot.get(path, (-1, -1))
                continue
            self.reload_count += 1
            reloaded.append(code)
        self._snapshot = current
        return reloaded

    def _scan(self) -> dict[Path, tuple[int, int]]:
        signatures: dict[Path, tuple[int, int]] = {}
        try:
            entries = list(self._directory.iterdir())
        except OSError as exc:
            logger.warning("Cannot scan %s: %s", self._directory, exc)
            return dict(self._snapshot)
        for path in entries:
            if path.suffix not in _SUFFIXES:
                continue
            try:
                stat = path.stat()
            except OSError:
                continue
            if path.is_file():
                signatures[path] = (stat.st_mtime_ns, stat.st_size)
        return signatures

    def _run_loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            self.poll()
