from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable


class RateLimiter:
    """In-memory sliding window rate limiter keyed by an arbitrary string."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._buckets: dict[str, deque[float]] = defaultdict(deque)

    def _prune(self, bucket: deque[float], now: float, window_seconds: float) -> None:
        while bucket and now - bucket[0] >= window_seconds:
            bucket.popleft()

    def allow(self, key: str, limit: int, window_seconds: float) -> bool:
        now = self._clock()
        bucket = self._buckets[key]
        self._prune(bucket, now, window_seconds)
        if len(bucket) >= limit:
            return False
        bucket.append(now)
        return True

    def retry_after(self, key: str, window_seconds: float) -> int:
        """Whole seconds until the oldest hit in ``key`` leaves the window."""

        bucket = self._buckets.get(key)
        if not bucket:
            return 0
        remaining = window_seconds - (self._clock() - bucket[0])
        return max(1, int(remaining + 0.999))


__all__ = ["RateLimiter"]
