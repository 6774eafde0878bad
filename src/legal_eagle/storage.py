"""Persistence adapter for the dashboard's named collections.

Each collection is stored as one JSON value under a key.  Reads never raise:
a missing key and a malformed payload both come back as ``None`` so callers
can fall back to seed data.  Writes never raise either, but every failure is
logged with its traceback and reported through the return value.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .errors import PersistenceError

logger = logging.getLogger(__name__)

DOCUMENTS_KEY = "documents"
DEADLINES_KEY = "manual_deadlines"
ACTIVITY_KEY = "activity_feed"
LAYOUT_KEY = "dashboard_layout"


class KeyValueStore(ABC):
    """Durable string storage keyed by collection name."""

    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the raw payload for ``key`` or ``None`` if absent."""

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        """Store ``payload`` under ``key``, replacing any previous value."""

    def load(self, key: str) -> Any | None:
        try:
            raw = self.read(key)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %r, treating as absent: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            error = PersistenceError(key, f"malformed payload ({exc})")
            logger.warning("Ignoring stored state: %s", error)
            return None

    def save(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False, indent=2)
        except (TypeError, ValueError):
            logger.exception("Failed to serialize %r; keeping previous stored value", key)
            return False
        try:
            self.write(key, payload)
        except OSError:
            logger.exception("Failed to save %r", key)
            return False
        logger.debug("Saved %r (%d bytes)", key, len(payload))
        return True


class JsonFileStore(KeyValueStore):
    """Stores each key as ``<data_dir>/<key>.json``."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, payload: str) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(path)


class MemoryStore(KeyValueStore):
    """In-process store holding serialized payloads, mainly for tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.payloads: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.payloads.get(key)

    def write(self, key: str, payload: str) -> None:
        self.payloads[key] = payload
