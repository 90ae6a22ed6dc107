"""Bounded in-process log of relational store queries."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)

STATEMENT_PREVIEW = 100


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class QueryLogEntry:
    """One executed (or failed) statement."""

    operation: str
    statement: str
    duration_ms: float
    timestamp: datetime
    success: bool
    row_count: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "operation": self.operation,
            "query": self.statement,
            "durationMs": round(self.duration_ms, 2),
            "timestamp": self.timestamp.isoformat(),
            "success": self.success,
        }
        if self.row_count is not None:
            body["rowCount"] = self.row_count
        if self.error is not None:
            body["error"] = self.error
        return body


class QueryLog:
    """Keep the newest ``max_entries`` statements with their timings.

    Statements slower than ``slow_query_ms`` are also logged at WARNING.
    """

    def __init__(
        self,
        max_entries: int = 1000,
        slow_query_ms: float = 1000.0,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.slow_query_ms = slow_query_ms
        self._entries: deque[QueryLogEntry] = deque(maxlen=max_entries)
        self._now = now
        self._lock = Lock()

    def record(
        self,
        operation: str,
        statement: str,
        duration_ms: float,
        *,
        row_count: int | None = None,
        error: str | None = None,
    ) -> QueryLogEntry:
        entry = QueryLogEntry(
            operation=operation,
            statement=statement,
            duration_ms=duration_ms,
            timestamp=self._now(),
            success=error is None,
            row_count=row_count,
            error=error,
        )
        with self._lock:
            self._entries.append(entry)
        if error is not None:
            logger.debug("[db] %s failed after %.1fms: %s", operation, duration_ms, error)
        elif duration_ms > self.slow_query_ms:
            logger.warning(
                "[db] slow %s (%.1fms): %s",
                operation,
                duration_ms,
                statement[:STATEMENT_PREVIEW],
            )
        return entry

    def recent(self, limit: int = 50) -> list[QueryLogEntry]:
        """Return the newest ``limit`` entries, oldest first."""
        with self._lock:
            entries = list(self._entries)
        return entries[-limit:] if limit > 0 else []

    def slow(self, threshold_ms: float | None = None) -> list[QueryLogEntry]:
        """Return entries that took longer than ``threshold_ms``."""
        threshold = self.slow_query_ms if threshold_ms is None else threshold_ms
        with self._lock:
            return [entry for entry in self._entries if entry.duration_ms > threshold]

    def errors(self) -> list[QueryLogEntry]:
        with self._lock:
            return [entry for entry in self._entries if not entry.success]

    def stats(self) -> dict[str, Any]:
        with self._lock:
            entries = list(self._entries)
        total = len(entries)
        successful = sum(1 for entry in entries if entry.success)
        return {
            "total": total,
            "successful": successful,
            "failed": total - successful,
            "successRate": round(successful / total * 100, 1) if total else 0.0,
            "averageQueryTime": (
                round(sum(entry.duration_ms for entry in entries) / total, 2) if total else 0.0
            ),
            "slowQueries": sum(1 for entry in entries if entry.duration_ms > self.slow_query_ms),
        }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
