"""
Small key-value cache with per-entry time-to-live.

Holds the session pointer between invocations. Losing the cache only
forces a re-prompt, so unreadable cache files are treated as empty.
"""

import json
import logging
import time
from pathlib import Path
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class KeyValueCache(Protocol):
    """get/put with expiry."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str, ttl_seconds: int) -> None: ...


class MemoryCache:
    """In-process cache; entries expire against an injectable clock."""

    def __init__(self, clock: Clock = time.time):
        self.clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        self._entries[key] = (value, self.clock() + ttl_seconds)

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)


class JsonFileCache:
    """
    Cache persisted as a JSON file.

    File format: {"<key>": {"value": "<str>", "expires_at": <epoch seconds>}}
    """

    def __init__(self, path: str | Path, clock: Clock = time.time):
        """
        Initialize the cache.

        Args:
            path: Path to the JSON file (created on first put)
            clock: Returns the current time in epoch seconds
        """
        self.path = Path(path)
        self.clock = clock

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable cache file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def _expires_at(entry: object) -> float | None:
        # None for entries that are not dicts or carry an unparseable expiry
        if not isinstance(entry, dict):
            return None
        try:
            return float(entry.get("expires_at", 0) or 0)
        except (TypeError, ValueError):
            return None

    def get(self, key: str) -> str | None:
        """
        Read a value.

        Returns:
            The cached string, or None when absent or expired
        """
        entry = self._load().get(key)
        expires_at = self._expires_at(entry)
        if expires_at is None or self.clock() >= expires_at:
            return None
        value = entry.get("value")
        return str(value) if value is not None else None

    def put(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store *value* under *key* for *ttl_seconds*."""
        data = self._load()
        now = self.clock()
        # Drop expired and malformed entries while rewriting
        data = {
            k: v
            for k, v in data.items()
            if (self._expires_at(v) or 0) > now
        }
        data[key] = {"value": value, "expires_at": now + ttl_seconds}
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
