"""
Name: Structured JSON Logger

Responsibilities:
  - Format log records as one JSON object per line
  - Enrich records with request context (request_id, method, path)
  - Redact sensitive fields passed through `extra=` and cap their size

Collaborators:
  - context.py: ContextVars for request correlation
  - crosscutting/config.py: log_level / log_json

Notes:
  - A single module-level `logger` is imported everywhere
  - Passwords and tokens must never reach the log stream
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

# R: LogRecord attributes that are not user-supplied "extra" fields.
_INTERNAL_LOGRECORD_KEYS: frozenset[str] = frozenset(
    vars(logging.makeLogRecord({}))
) | {"message", "asctime", "taskName"}

REDACTED = "***REDACTED***"


def mask_email(email: str) -> str:
    local, sep, domain = email.partition("@")
    if not sep:
        return REDACTED
    return f"{local[:1]}***@{domain}"


class _Redactor:
    """R: Masks sensitive keys, truncates huge strings, keeps values JSON-safe."""

    SENSITIVE_KEYS = {
        "password",
        "new_password",
        "passwd",
        "password_hash",
        "secret",
        "jwt_secret",
        "token",
        "reset_token",
        "authorization",
        "cookie",
        "access_token",
        "smtp_password",
    }

    def __init__(self, max_str: int = 8_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    # Account addresses are logged masked: "a***@example.com"
    EMAIL_KEYS = {"email", "recipient"}

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        if key and key.lower() in self.SENSITIVE_KEYS:
            return REDACTED

        if key and key.lower() in self.EMAIL_KEYS and isinstance(value, str):
            return mask_email(value)

        if depth > self._max_depth:
            return "***TRUNCATED***"

        if isinstance(value, str):
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "...(truncated)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple)):
            return [self.sanitize(v, depth=depth + 1, key=key) for v in value]

        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            return str(value)


class JSONFormatter(logging.Formatter):
    """R: LogRecord -> JSON line, enriched with request context."""

    def __init__(self):
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        from ..context import get_context_dict

        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _INTERNAL_LOGRECORD_KEYS:
                continue
            payload[k] = self._redactor.sanitize(v, key=k)

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_msg = str(record.exc_info[1]) if record.exc_info[1] else None
            payload["exception"] = {
                "type": exc_type,
                "message": exc_msg,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def setup_logger(name: str = "user-service") -> logging.Logger:
    """
    Create and configure the service logger.

    - Avoids duplicate handlers on re-import
    - Honors LOG_LEVEL / LOG_JSON from the environment
    """
    log = logging.getLogger(name)

    level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    use_json = os.getenv("LOG_JSON", "true").strip().lower() not in {"0", "false", "no"}

    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(message)s")
        )
        log.addHandler(handler)

    return log


# Module-level instance (import-friendly)
logger = setup_logger()
