"""File-backed read-through cache with a time-to-live check."""

from __future__ import annotations

import json
import os
import tempfile
import time
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Optional

from .logging import get_logger

DEFAULT_TTL = timedelta(days=7)

_logger = get_logger("cache")


class CacheStore:
    """Stores one JSON document per key; the file mtime is the write timestamp."""

    def __init__(self, directory: Path, clock: Callable[[], float] = time.time) -> None:
        self._directory = directory
        self._clock = clock

    def path_for(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get_if_fresh(self, key: str, ttl: timedelta = DEFAULT_TTL) -> Optional[Any]:
        """Return the cached payload, or ``None`` when it is missing, unreadable or stale."""
        path = self.path_for(key)
        try:
            written_at = path.stat().st_mtime
        except OSError:
            _logger.debug("Cache miss for %s", key)
            return None

        age = self._clock() - written_at
        if age >= ttl.total_seconds():
            _logger.debug("Cache entry %s is stale (%.0fs old)", key, age)
            return None

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _logger.debug("Cache entry %s is unreadable", key)
            return None

        _logger.info("Using cached %s (%.1f hours old)", key, age / 3600)
        return payload

    def put(self, key: str, payload: Any) -> Path:
        path = self.path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        handle, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as stream:
                json.dump(payload, stream, indent=2, sort_keys=True)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        # the TTL is measured against our clock, so stamp the entry with it
        now = self._clock()
        os.utime(path, (now, now))
        _logger.debug("Wrote cache entry %s", key)
        return path
