"""
Name: Redis Rate Limit Storage

Responsibilities:
  - Shared fixed-window counters for multi-process deployments
  - Atomic INCR with an expiry matching the remaining window

Collaborators:
  - redis-py
  - crosscutting/rate_limit.FixedWindowRateLimiter (consumer)
"""

from __future__ import annotations

import redis

from ..crosscutting.logger import logger


class RedisRateLimitStorage:
    def __init__(self, client: "redis.Redis", *, prefix: str = "user-service") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisRateLimitStorage":
        if not redis_url:
            raise ValueError("redis_url is required")
        return cls(redis.from_url(redis_url, decode_responses=True))

    def _k(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def hit(self, key: str, *, ttl_seconds: int) -> int:
        # R: INCR and EXPIRE NX in one round trip; the first hit sets the TTL.
        pipe = self._client.pipeline(transaction=True)
        pipe.incr(self._k(key))
        pipe.expire(self._k(key), ttl_seconds, nx=True)
        count, _ = pipe.execute()
        return int(count)

    def clear(self) -> None:
        keys = list(self._client.scan_iter(match=self._k("ratelimit:*")))
        if keys:
            self._client.delete(*keys)
        logger.info("Rate limit counters cleared", extra={"keys": len(keys)})
