"""
Name: HTTP Dependencies

Responsibilities:
  - rate_limit(bucket): per-client fixed-window gate for the reset endpoints

Notes:
  - Runs before the body fields are validated, so an over-limit caller
    sending any well-formed JSON gets 429 whatever the fields contain
  - A body that is not JSON at all is rejected by FastAPI with 400 before
    any dependency runs; such a request is not counted
  - Clients are keyed by socket peer unless RATE_LIMIT_TRUST_FORWARDED_FOR
    is set
"""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from ..container import get_rate_limiter
from ..crosscutting.config import Settings, get_settings
from ..crosscutting.error_responses import rate_limited
from ..crosscutting.rate_limit import (
    FixedWindowRateLimiter,
    RateLimitBucket,
    get_client_identifier,
)


def rate_limit(bucket: RateLimitBucket) -> Callable:
    def dependency(
        request: Request,
        limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
        settings: Settings = Depends(get_settings),
    ) -> None:
        client_key = get_client_identifier(
            request, trust_forwarded_for=settings.rate_limit_trust_forwarded_for
        )
        result = limiter.check(client_key, bucket)
        if not result.allowed:
            raise rate_limited(result.retry_after_seconds)

    return dependency
