"""
Name: Fixed Window Rate Limiter

Responsibilities:
  - Count attempts per (client key, bucket) inside a fixed time window
  - Reject immediately with a retry-after once a bucket limit is exceeded
  - Log rate limit events

Collaborators:
  - RateLimitStorage: atomic counter store (in-memory here, Redis in
    infrastructure/rate_limit_storage.py)
  - api/dependencies.py: applies the limiter to routes
  - crosscutting/config.py: window length and per-bucket limits

Constraints:
  - No queuing or delaying: a request is either allowed or rejected
  - Counters are keyed by network origin only, never by account

Notes:
  - Windows are aligned to multiples of window_seconds since the epoch
  - Rejected attempts still count inside their window
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Protocol

from ..domain.clock import Clock, utc_now
from .logger import logger


class RateLimitBucket(str, Enum):
    REQUEST_RESET = "request-reset"
    CONFIRM_RESET = "confirm-reset"


DEFAULT_LIMITS: Mapping[RateLimitBucket, int] = {
    RateLimitBucket.REQUEST_RESET: 5,
    RateLimitBucket.CONFIRM_RESET: 3,
}
DEFAULT_WINDOW_SECONDS = 600


class RateLimitStorage(Protocol):
    """Port for counter persistence. `hit` must be atomic per key."""

    def hit(self, key: str, *, ttl_seconds: int) -> int:
        """Increment the counter for key and return the new value."""
        ...

    def clear(self) -> None: ...


@dataclass(frozen=True)
class RateLimitResult:
    """
    Attributes:
        allowed: True if the request may proceed
        limit: bucket limit for the window
        remaining: attempts left in the current window
        retry_after_seconds: seconds until the window resets (0 if allowed)
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int = 0


class InMemoryRateLimitStorage:
    """
    R: Process-local counters guarded by a lock.

    Not shared between worker processes; use Redis for that.
    """

    def __init__(self, *, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: dict[str, tuple[int, float]] = {}

    def hit(self, key: str, *, ttl_seconds: int) -> int:
        with self._lock:
            now = self._clock().timestamp()
            self._evict_expired(now)
            count, expires_at = self._counters.get(key, (0, now + ttl_seconds))
            count += 1
            self._counters[key] = (count, expires_at)
            return count

    def clear(self) -> None:
        """R: Clear all counters (for testing)."""
        with self._lock:
            self._counters.clear()

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, (_, exp) in self._counters.items() if exp <= now]
        for key in expired:
            del self._counters[key]


class FixedWindowRateLimiter:
    """
    R: Fixed window counter.

    Usage:
        limiter = FixedWindowRateLimiter(storage)
        result = limiter.check("ip:10.0.0.1", RateLimitBucket.REQUEST_RESET)
        if not result.allowed:
            raise rate_limited(result.retry_after_seconds)
    """

    def __init__(
        self,
        storage: RateLimitStorage,
        *,
        limits: Mapping[RateLimitBucket, int] | None = None,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        clock: Clock = utc_now,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._storage = storage
        self._limits = dict(limits or DEFAULT_LIMITS)
        for bucket, limit in self._limits.items():
            if limit <= 0:
                raise ValueError(f"limit for {bucket.value} must be positive")
        self._window_seconds = window_seconds
        self._clock = clock

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def limit_for(self, bucket: RateLimitBucket) -> int:
        limit = self._limits.get(bucket)
        if limit is None:
            raise ValueError(f"Unknown rate limit bucket: {bucket}")
        return limit

    def check(self, client_key: str, bucket: RateLimitBucket) -> RateLimitResult:
        """Count this attempt and decide whether it is allowed."""
        limit = self.limit_for(bucket)
        now = self._clock().timestamp()
        window_start = math.floor(now / self._window_seconds) * self._window_seconds
        window_end = window_start + self._window_seconds

        key = f"ratelimit:{bucket.value}:{client_key}:{int(window_start)}"
        ttl = max(1, math.ceil(window_end - now))
        count = self._storage.hit(key, ttl_seconds=ttl)

        if count > limit:
            retry_after = max(1, math.ceil(window_end - now))
            logger.warning(
                "Rate limit exceeded",
                extra={
                    "client_id": client_key,
                    "bucket": bucket.value,
                    "limit": limit,
                    "retry_after": retry_after,
                },
            )
            return RateLimitResult(
                allowed=False,
                limit=limit,
                remaining=0,
                retry_after_seconds=retry_after,
            )

        return RateLimitResult(allowed=True, limit=limit, remaining=limit - count)


def get_client_identifier(request, *, trust_forwarded_for: bool = False) -> str:
    """
    R: Identify the caller's network origin.

    Priority:
      1. X-Forwarded-For header, only when trust_forwarded_for is set; the
         last entry is the one appended by the trusted reverse proxy, earlier
         entries are whatever the client sent
      2. Client IP address
    """
    forwarded_for = (
        request.headers.get("X-Forwarded-For") if trust_forwarded_for else None
    )
    if forwarded_for:
        ip = forwarded_for.split(",")[-1].strip()
        if ip:
            return f"ip:{ip}"

    client = request.client
    if client:
        return f"ip:{client.host}"

    return "ip:unknown"
