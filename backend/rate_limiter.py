"""Per-client sliding-window request limiter, owned by the HTTP app."""

import os
import threading
import time
from collections import defaultdict, deque
from typing import Callable

RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "10"))
RATE_LIMIT_WINDOW_SECONDS = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "3600"))


class SlidingWindowRateLimiter:
    """Allows at most ``limit`` hits per client within the trailing ``window_seconds``."""

    def __init__(
        self,
        limit: int = RATE_LIMIT_REQUESTS,
        window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque] = defaultdict(deque)
        self._lock = threading.Lock()

    def allow(self, client_id: str) -> bool:
        """Record a hit for ``client_id`` unless it is over the limit."""
        now = self._clock()
        with self._lock:
            self._prune(now)
            hits = self._hits[client_id]
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True

    def _prune(self, now: float) -> None:
        """Drop expired hits and forget clients left with none."""
        for client_id in list(self._hits):
            hits = self._hits[client_id]
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()
            if not hits:
                del self._hits[client_id]

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
