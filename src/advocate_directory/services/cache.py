"""Time-bounded cache for search results."""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from threading import Lock
from typing import Any


@dataclass
class _Entry:
    value: Any
    expires_at: float


class QueryCache:
    """Thread-safe LRU cache whose entries expire after ``ttl_seconds``.

    Instances are constructed by the application and handed to the query
    service; there is no module-level cache.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 512,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[Hashable, _Entry] = OrderedDict()
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value for ``key`` or None if absent or expired."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.expires_at <= now:
                if entry is not None:
                    del self._entries[key]
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    def set(self, key: Hashable, value: Any, ttl_seconds: float | None = None) -> None:
        """Store ``value`` under ``key``, evicting the least recently used entry if full."""
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            self._entries[key] = _Entry(value, self._clock() + ttl)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop every entry and reset the hit counters."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict[str, Any]:
        """Return entry count and hit/miss counters."""
        with self._lock:
            now = self._clock()
            expired = sum(1 for entry in self._entries.values() if entry.expires_at <= now)
            lookups = self.hits + self.misses
            return {
                "entries": len(self._entries),
                "expiredEntries": expired,
                "hits": self.hits,
                "misses": self.misses,
                "hitRate": round(self.hits / lookups * 100, 1) if lookups else 0.0,
            }
