from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from .config import AutosaveConfig
from .models import ExportedFile, SaveResult
from .paths import export_directory
from .scheduler import ScheduledTask, Scheduler, ThreadScheduler
from .store import DOCUMENT_CONTENT_KEY, PersistenceStore

logger = logging.getLogger(__name__)

CONTENT_EVENT = "content"
SAVING_EVENT = "saving"
HISTORY_EVENT = "history"

COMPOSE_FALLBACK_TEXT = "start with one sentence"
EXPORT_PREFIX = "freewrite"

Listener = Callable[[str], None]
ErrorCallback = Callable[[Exception], None]


class DocumentModel:
    """The live document, its debounced autosave and the entry history.

    Every edit replaces the pending autosave. When the quiet period elapses the
    content at that moment is written to the store and ``is_saving`` stays
    raised for at least ``saving_indicator_seconds``. A save that is already in
    flight always runs to completion; only the pending one can be cancelled.

    History lives in memory only. Persisted content survives restarts, history
    does not.
    """

    def __init__(
        self,
        store: PersistenceStore,
        scheduler: Scheduler | None = None,
        config: AutosaveConfig | None = None,
        on_error: ErrorCallback | None = None,
    ):
        self._store = store
        self._scheduler = scheduler or ThreadScheduler()
        self._config = config or AutosaveConfig.from_store(store)
        self._on_error = on_error
        self._lock = threading.RLock()
        self._write_lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._content = ""
        self._is_saving = False
        self._history: list[str] = []
        self._pending: ScheduledTask | None = None
        self._generation = 0
        self._queued: tuple[str, int] | None = None
        self._written_generation = 0
        self._last_save: SaveResult | None = None
        self._last_error: Exception | None = None
        self._load()

    @property
    def content(self) -> str:
        return self._content

    @content.setter
    def content(self, text: str) -> None:
        self.set_content(text)

    @property
    def is_saving(self) -> bool:
        return self._is_saving

    @property
    def history(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._history)

    @property
    def has_pending_save(self) -> bool:
        return self._pending is not None

    @property
    def last_save(self) -> SaveResult | None:
        return self._last_save

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def config(self) -> AutosaveConfig:
        return self._config

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _load(self) -> None:
        try:
            saved = self._store.get(DOCUMENT_CONTENT_KEY)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not read saved document: %s", exc)
            with self._lock:
                self._last_error = exc
            self._report(exc)
            saved = None
        with self._lock:
            self._content = saved if saved else ""
        logger.debug("Loaded document (%d characters)", len(self._content))

    def set_content(self, text: str) -> None:
        with self._lock:
            self._content = text
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            self._pending = self._scheduler.call_later(
                self._config.autosave_delay_seconds,
                lambda: self._autosave(generation),
            )
        self._emit(CONTENT_EVENT)

    def create_new_entry(self) -> None:
        with self._lock:
            content = self._content
            added = bool(content.strip())
            if added:
                self._history.insert(0, content)
        if added:
            self._emit(HISTORY_EVENT)
        self.set_content("")

    def select_history(self, index: int) -> None:
        with self._lock:
            if not 0 <= index < len(self._history):
                raise IndexError(f"history index out of range: {index}")
            entry = self._history[index]
        self.set_content(entry)

    def compose_text(self) -> str:
        return self._content or COMPOSE_FALLBACK_TEXT

    def prepare_export(self, now: float | None = None) -> ExportedFile:
        """Name and bytes for an export, without touching the filesystem."""
        stamp = int(time.time() if now is None else now)
        return ExportedFile(
            name=f"{EXPORT_PREFIX}-{stamp}.txt",
            path=None,
            data=self._content.encode("utf-8"),
        )

    def export_current_content(
        self,
        directory: Path | None = None,
        now: float | None = None,
    ) -> ExportedFile:
        target_dir = Path(directory) if directory is not None else export_directory()
        target_dir.mkdir(parents=True, exist_ok=True)
        prepared = self.prepare_export(now)
        name = prepared.name
        stem = name[: -len(".txt")]
        suffix = 0
        while (target_dir / name).exists():
            suffix += 1
            name = f"{stem}-{suffix}.txt"

        path = target_dir / name
        path.write_bytes(prepared.data)
        logger.info("Exported document to %s", path)
        return ExportedFile(name=name, path=path, data=prepared.data)

    def flush(self) -> bool:
        """Write pending content now. Returns False when nothing was pending."""
        with self._lock:
            if self._pending is None and self._queued is None:
                return False
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            self._generation += 1
            generation = self._generation
            self._queued = None
            snapshot = self._content
        self._write(snapshot, generation)
        return True

    def _autosave(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._pending = None
            snapshot = self._content
            if self._is_saving:
                self._queued = (snapshot, generation)
                return
            self._is_saving = True
        self._emit(SAVING_EVENT)
        self._write(snapshot, generation)
        self._scheduler.call_later(self._config.saving_indicator_seconds, self._finish_save)

    def _finish_save(self) -> None:
        with self._lock:
            queued = self._queued
            self._queued = None
            if queued is None:
                self._is_saving = False
        if queued is not None:
            self._write(*queued)
            self._scheduler.call_later(self._config.saving_indicator_seconds, self._finish_save)
            return
        self._emit(SAVING_EVENT)

    def _write(self, snapshot: str, generation: int) -> None:
        with self._write_lock:
            # A newer snapshot already reached the store.
            if generation < self._written_generation:
                logger.debug("Skipped stale autosave (generation %d)", generation)
                return
            try:
                self._store.set(DOCUMENT_CONTENT_KEY, snapshot)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Autosave failed: %s", exc)
                result = SaveResult(content=snapshot, ok=False, error=exc)
            else:
                logger.debug("Autosaved %d characters", len(snapshot))
                result = SaveResult(content=snapshot, ok=True)
                self._written_generation = generation
        with self._lock:
            self._last_save = result
            self._last_error = result.error
        if result.error is not None:
            self._report(result.error)

    def _report(self, error: Exception) -> None:
        callback = self._on_error
        if callback is not None:
            callback(error)

    def _emit(self, event: str) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("Listener failed on %r event", event)
