"""Debounced live preview.

While a record is being edited the preview is regenerated at most once per
quiet period: :class:`Debouncer` cancels a pending run whenever a new one is
scheduled, so only the most recent edit is rendered.

Rendered PDFs are published through :class:`PreviewSlot`.  Each preview is a
temporary file (the handle a viewer displays); the slot deletes the previous
file before it publishes a new one and when it is closed, so repeated edits do
not accumulate files.
"""

from __future__ import annotations

import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .config import ConfigModel, load_config
from .io import export_record
from .model.record import ReportRecord
from .storage import DraftStore
from .utils.errors import AARBuilderError, ResourceError
from .utils.logging import get_logger

__all__ = ["Debouncer", "PreviewSlot", "LivePreview"]

log = get_logger(__name__)


class Debouncer:
    """Run ``func`` once, ``delay`` seconds after the last :meth:`trigger`."""

    def __init__(self, delay: float, func: Callable[..., Any]) -> None:
        self.delay = delay
        self.func = func
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: tuple[tuple[Any, ...], dict[str, Any]] | None = None

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        """Schedule a run with these arguments, replacing any pending run."""

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _take(self) -> tuple[tuple[Any, ...], dict[str, Any]] | None:
        with self._lock:
            pending = self._pending
            self._pending = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            return pending

    def _fire(self) -> None:
        pending = self._take()
        if pending is not None:
            args, kwargs = pending
            self.func(*args, **kwargs)

    def flush(self) -> bool:
        """Run the pending call now; return ``False`` when nothing was pending."""

        pending = self._take()
        if pending is None:
            return False
        args, kwargs = pending
        self.func(*args, **kwargs)
        return True

    def cancel(self) -> None:
        self._take()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None


class PreviewSlot:
    """Holds at most one published preview file."""

    def __init__(self, directory: str | os.PathLike[str] | None = None, suffix: str = ".pdf") -> None:
        self.directory = Path(directory) if directory is not None else None
        self.suffix = suffix
        self._current: Path | None = None

    @property
    def current(self) -> Path | None:
        return self._current

    def publish(self, data: bytes) -> Path:
        """Store ``data`` as the new preview, then release the previous one.

        When writing fails the previous preview stays published.
        """

        fd, name = tempfile.mkstemp(prefix="aar-preview-", suffix=self.suffix, dir=self.directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError:
            Path(name).unlink(missing_ok=True)
            raise
        self.release()
        self._current = Path(name)
        return self._current

    def release(self) -> None:
        if self._current is not None:
            self._current.unlink(missing_ok=True)
            self._current = None

    def __enter__(self) -> "PreviewSlot":
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()


class LivePreview:
    """Regenerate a PDF preview after edits settle.

    :meth:`update` is called on every edit.  The render runs on the debouncer
    thread; a failed render is logged and the previous preview stays
    published.  When ``store`` is given, each rendered record is also saved
    under ``draft_key``.
    """

    def __init__(
        self,
        cfg: ConfigModel | None = None,
        *,
        slot: PreviewSlot | None = None,
        store: DraftStore | None = None,
        draft_key: str = "current",
        on_update: Callable[[Path], None] | None = None,
    ) -> None:
        self.cfg = cfg if cfg is not None else load_config()
        self.slot = slot if slot is not None else PreviewSlot()
        self.store = store
        self.draft_key = draft_key
        self.on_update = on_update
        self.last_error: Exception | None = None
        self.closed = False
        self._lock = threading.Lock()
        self.debouncer = Debouncer(self.cfg.preview.debounce_seconds, self.render)

    def update(self, record: ReportRecord) -> None:
        self.debouncer.trigger(record)

    def render(self, record: ReportRecord) -> Path | None:
        """Render ``record`` immediately and publish it."""

        try:
            artifact = export_record(record, "pdf", self.cfg, force=True)
        except AARBuilderError as exc:
            log.error("preview generation failed: %s", exc)
            self.last_error = exc
            return None
        with self._lock:
            if self.closed:
                log.debug("preview closed; dropping rendered artifact")
                return None
            try:
                path = self.slot.publish(artifact.data)
            except OSError as exc:
                log.error("could not publish preview: %s", exc)
                self.last_error = ResourceError(f"could not publish preview: {exc}")
                return None
        self.last_error = None
        if self.store is not None:
            self.store.save(self.draft_key, record)
        if self.on_update is not None:
            self.on_update(path)
        return path

    def close(self) -> None:
        """Drop any pending render and release the published preview.

        A render already in progress finishes without publishing.
        """

        with self._lock:
            self.closed = True
            self.debouncer.cancel()
            self.slot.release()
