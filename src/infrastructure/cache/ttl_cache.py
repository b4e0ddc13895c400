"""In-memory TTL cache for normalized profiles and avatars.

Each worker process has its own cache; with several uvicorn workers a profile
may be fetched once per worker.
"""

import time
from collections.abc import Callable
from typing import Any


class TTLCache:
    """Key -> value store where every entry carries its own expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, max_entries: int = 1024) -> None:
        self._clock = clock
        self._max_entries = max_entries
        self._store: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() < expires_at:
            return value
        del self._store[key]
        return None

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            self._store.pop(key, None)
            return
        if key not in self._store and len(self._store) >= self._max_entries:
            self.purge_expired()
            if len(self._store) >= self._max_entries:
                # Oldest insertion goes first
                self._store.pop(next(iter(self._store)))
        self._store[key] = (self._clock() + ttl_seconds, value)

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._store.items() if expires_at <= now]
        for key in expired:
            del self._store[key]
        return len(expired)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
