import redis

from ...application.ports.rate_limiter import RateLimiter


class RedisRateLimiter(RateLimiter):
    """Fixed-window counter shared by every worker pointing at the same Redis."""

    def __init__(self, url: str, prefix: str = "echochat:rl:", client: "redis.Redis" = None) -> None:
        self.client = client or redis.Redis.from_url(url)
        self.prefix = prefix

    def allow(self, key: str, limit: int, window_seconds: int) -> bool:
        counter = f"{self.prefix}{key}:{window_seconds}"
        pipe = self.client.pipeline()
        pipe.incr(counter, 1)
        pipe.expire(counter, window_seconds)
        hits, _ = pipe.execute()
        return int(hits) <= limit
