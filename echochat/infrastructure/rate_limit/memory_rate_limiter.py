import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

from ...application.ports.rate_limiter import RateLimiter


class InMemoryRateLimiter(RateLimiter):
    """Sliding window per key. Process-local: each worker counts on its own."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._clock = clock

    def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        now = self._clock()
        hits = self._hits[key]
        while hits and hits[0] <= now - window_seconds:
            hits.popleft()
        if len(hits) >= limit:
            return False
        hits.append(now)
        return True
