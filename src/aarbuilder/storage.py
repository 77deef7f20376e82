"""JSON draft store.

A small key-value store that checkpoints records between sessions.  Each key
maps to one ``<key>.json`` file inside the store directory.  Keys are limited
to letters, digits, ``-``, ``_`` and ``.`` so they cannot escape the
directory.  The document pipeline never reads the store; callers load a
record and hand it over.
"""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

from .model.record import ReportRecord
from .utils.logging import get_logger

__all__ = ["DraftStore"]

log = get_logger(__name__)

_RX_KEY = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class DraftStore:
    """Save, load and remove JSON payloads by string key."""

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _RX_KEY.fullmatch(key):
            raise ValueError(f"invalid draft key: {key!r}")
        return self.directory / f"{key}.json"

    def save(self, key: str, payload: Any) -> Path:
        """Serialize ``payload`` under ``key``; records are dumped by field name."""

        if isinstance(payload, ReportRecord):
            payload = payload.model_dump(mode="json")
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        log.debug("saved draft %s", path)
        return path

    def load(self, key: str, default: Any = None) -> Any:
        """Return the payload stored under ``key`` or ``default``.

        Unreadable or corrupt entries are logged and treated as missing.
        """

        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("could not read draft %s: %s", path, exc)
            return default

    def load_record(self, key: str) -> ReportRecord | None:
        data = self.load(key)
        if data is None:
            return None
        return ReportRecord.model_validate(data)

    def remove(self, key: str) -> bool:
        """Delete ``key``; return ``True`` when something was removed."""

        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def keys(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))
