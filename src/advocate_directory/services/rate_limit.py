"""Fixed-window request throttling keyed by client identity."""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from advocate_directory.core.errors import RateLimitError


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    limit: int
    reset_after: float

    @property
    def retry_after(self) -> int:
        return max(1, math.ceil(self.reset_after))


@dataclass
class _Window:
    count: int
    resets_at: float


class RateLimiter:
    """Allow at most ``max_requests`` per client in each ``window_seconds`` window."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = Lock()

    def check(self, client_id: str) -> RateLimitDecision:
        """Count one request for ``client_id`` and report whether it is allowed."""
        now = self._clock()
        with self._lock:
            window = self._windows.get(client_id)
            if window is None or now >= window.resets_at:
                window = self._windows[client_id] = _Window(0, now + self.window_seconds)
            if window.count >= self.max_requests:
                return RateLimitDecision(False, 0, self.max_requests, window.resets_at - now)
            window.count += 1
            return RateLimitDecision(
                True,
                self.max_requests - window.count,
                self.max_requests,
                window.resets_at - now,
            )

    def enforce(self, client_id: str) -> RateLimitDecision:
        """Like :meth:`check` but raise :class:`RateLimitError` when over the limit."""
        decision = self.check(client_id)
        if not decision.allowed:
            raise RateLimitError(decision.retry_after)
        return decision

    def cleanup(self) -> int:
        """Drop expired windows; return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, window in self._windows.items() if now >= window.resets_at]
            for key in expired:
                del self._windows[key]
        return len(expired)

    @property
    def tracked_clients(self) -> int:
        return len(self._windows)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
