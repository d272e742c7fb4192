"""
Name: HTTP Middleware

Responsibilities:
  - Generate (or accept) and propagate request_id
  - Set request context for logging
  - Add X-Request-Id response header
  - Log one line per completed request with latency

Collaborators:
  - context.py: ContextVars for request-scoped data
  - crosscutting/logger.py: Structured logging

Constraints:
  - Must wrap every other middleware (added last)
  - Must clear context after response
"""

from __future__ import annotations

import re
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, http_method_var, http_path_var, request_id_var
from .logger import logger

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{8,128}$")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """R: Establishes request context and logs request completion."""

    _QUIET_PATHS = {"/healthz", "/"}

    @staticmethod
    def _is_valid_request_id(value: str) -> bool:
        return bool(value) and bool(_REQUEST_ID_PATTERN.match(value))

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get("x-request-id") or "").strip()
        request_id = (
            incoming if self._is_valid_request_id(incoming) else str(uuid.uuid4())
        )

        request_id_var.set(request_id)
        http_method_var.set(request.method)
        http_path_var.set(request.url.path)

        # R: Also store in request.state for handlers that need it
        request.state.request_id = request_id

        start = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers["X-Request-Id"] = request_id

            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completed",
                    extra={
                        "status_code": response.status_code,
                        "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                    },
                )
            return response
        except Exception:
            logger.exception(
                "request failed",
                extra={
                    "status_code": 500,
                    "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            raise
        finally:
            clear_context()
