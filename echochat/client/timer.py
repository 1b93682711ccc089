import asyncio
import math
import time
from typing import Callable, Optional


class CountdownTimer:
    """Cancellable countdown measured against a monotonic clock.

    ``remaining`` is derived from the deadline on every read, so nothing has
    to tick in the background; ``wait()`` is available for callers that want
    to sleep until the countdown ends.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._deadline: Optional[float] = None
        self._cancelled: Optional[asyncio.Event] = None

    def start(self, seconds: float) -> None:
        self.cancel()
        self._deadline = self._clock() + seconds

    def cancel(self) -> None:
        self._deadline = None
        if self._cancelled is not None:
            self._cancelled.set()
            self._cancelled = None

    @property
    def running(self) -> bool:
        return self.remaining > 0

    @property
    def expired(self) -> bool:
        return not self.running

    @property
    def remaining(self) -> int:
        """Whole seconds left, rounded up; 0 when idle or elapsed."""
        if self._deadline is None:
            return 0
        left = self._deadline - self._clock()
        return max(0, math.ceil(left))

    async def wait(self) -> bool:
        """Sleep until the countdown ends. Returns False if cancelled first."""
        if self._deadline is None:
            return True
        cancelled = self._cancelled = asyncio.Event()
        left = self._deadline - self._clock()
        if left <= 0:
            return True
        try:
            await asyncio.wait_for(cancelled.wait(), timeout=left)
        except asyncio.TimeoutError:
            return True
        return False
