"""In-process search analytics.

Receives one event per completed search and answers aggregate questions about
them (popular terms, suggestions, response times). Purely observational: the
query service never reads from it.
"""

from __future__ import annotations

import logging
import math
from collections import Counter, deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)

SUGGESTION_MIN_PREFIX = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SearchEvent:
    """One completed search."""

    query: str
    filters: dict[str, Any]
    result_count: int
    response_time_ms: float
    timestamp: datetime
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "filters": self.filters,
            "resultCount": self.result_count,
            "responseTimeMs": round(self.response_time_ms, 2),
            "timestamp": self.timestamp.isoformat(),
            "source": self.source,
        }


@dataclass
class PopularSearch:
    query: str
    count: int = 0
    last_searched: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "count": self.count,
            "lastSearched": self.last_searched.isoformat(),
        }


class SearchAnalytics:
    """Bounded history of search events with popularity tracking."""

    def __init__(
        self,
        max_events: int = 10_000,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._events: deque[SearchEvent] = deque(maxlen=max_events)
        self._popular: dict[str, PopularSearch] = {}
        self._now = now
        self._lock = Lock()

    def record(
        self,
        query: str,
        filters: dict[str, Any],
        result_count: int,
        response_time_ms: float,
        source: str | None = None,
    ) -> SearchEvent:
        """Append a search event and bump the popularity of its query text."""
        event = SearchEvent(
            query=query,
            filters=dict(filters),
            result_count=result_count,
            response_time_ms=response_time_ms,
            timestamp=self._now(),
            source=source,
        )
        normalized = query.strip().lower()
        with self._lock:
            self._events.append(event)
            if normalized:
                popular = self._popular.get(normalized)
                if popular is None:
                    popular = self._popular[normalized] = PopularSearch(normalized)
                popular.count += 1
                popular.last_searched = event.timestamp
        logger.debug(
            "[search] %r -> %d results (%.1fms)", query, result_count, response_time_ms
        )
        return event

    def recent(self, limit: int = 100) -> list[SearchEvent]:
        """Return the newest ``limit`` events, oldest first."""
        with self._lock:
            events = list(self._events)
        return events[-limit:] if limit > 0 else []

    def popular(self, limit: int = 20) -> list[PopularSearch]:
        """Return the most frequent query texts."""
        with self._lock:
            ranked = sorted(self._popular.values(), key=lambda item: item.count, reverse=True)
        return ranked[:limit]

    def suggestions(self, prefix: str, limit: int = 10) -> list[dict[str, Any]]:
        """Return past queries containing ``prefix``, scored by frequency and recency."""
        needle = prefix.strip().lower()
        if len(needle) < SUGGESTION_MIN_PREFIX:
            return []
        now = self._now()
        with self._lock:
            candidates = [item for item in self._popular.values() if needle in item.query]
        scored = []
        for item in candidates:
            hours = (now - item.last_searched).total_seconds() / 3600
            # Recency weight decays over roughly a day and never drops below 0.1.
            score = item.count * max(0.1, math.exp(-hours / 24))
            scored.append({"query": item.query, "count": item.count, "score": round(score, 4)})
        scored.sort(key=lambda entry: entry["score"], reverse=True)
        return scored[:limit]

    def stats(self, hours: float | None = None) -> dict[str, Any]:
        """Summarize events, optionally restricted to the last ``hours`` hours."""
        with self._lock:
            events = list(self._events)
        if hours is not None:
            cutoff = self._now() - timedelta(hours=hours)
            events = [event for event in events if event.timestamp >= cutoff]

        total = len(events)
        if not total:
            return {
                "totalSearches": 0,
                "uniqueQueries": 0,
                "averageResponseTime": 0,
                "averageResultCount": 0.0,
                "zeroResultRate": 0.0,
                "topFilters": [],
            }

        filter_usage: Counter[str] = Counter()
        for event in events:
            filter_usage.update(name for name, value in event.filters.items() if value is not None)

        return {
            "totalSearches": total,
            "uniqueQueries": len({event.query.strip().lower() for event in events}),
            "averageResponseTime": round(sum(e.response_time_ms for e in events) / total),
            "averageResultCount": round(sum(e.result_count for e in events) / total, 1),
            "zeroResultRate": round(
                sum(1 for e in events if e.result_count == 0) / total * 100, 1
            ),
            "topFilters": [
                {"filter": name, "count": count} for name, count in filter_usage.most_common(5)
            ],
        }

    def clear(self) -> None:
        """Forget every recorded event."""
        with self._lock:
            self._events.clear()
            self._popular.clear()
