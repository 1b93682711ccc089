from typing import Protocol


class RateLimiter(Protocol):
    def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        """Count one hit for ``key``; False once ``limit`` hits fall inside the window."""
        ...
