"""
Name: Typed Service Exceptions

Responsibilities:
  - Standardize internal failures that are later mapped to HTTP
  - Carry a stable error_code and an error_id for log correlation

Collaborators:
  - api/exception_handlers.py: maps these to RFC 7807 responses
  - identity/tokens.py: raises TokenInvalidError / TokenExpiredError
  - infrastructure/repositories: raise DatabaseError / DuplicateIdentityError
  - infrastructure/notifications: raise NotificationError

Notes:
  - Messages are human readable and never include secrets
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4


@dataclass(frozen=True)
class ErrorResponse:
    """Minimal error shape for logs and non-HTTP callers."""

    error_code: str
    message: str
    error_id: str

    def to_dict(self) -> dict:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "error_id": self.error_id,
        }


class ServiceError(Exception):
    """R: Base for internal errors (error_code + error_id + message)."""

    error_code: str = "SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            error_code=self.error_code, message=self.message, error_id=self.error_id
        )


class DatabaseError(ServiceError):
    """Persistence failures (connection, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class DuplicateIdentityError(ServiceError):
    """The unique email index rejected a write."""

    error_code: str = "DUPLICATE_IDENTITY"


class NotificationError(ServiceError):
    """The reset notification could not be dispatched."""

    error_code: str = "NOTIFICATION_ERROR"


class TokenError(ServiceError):
    """Base for token verification failures."""

    error_code: str = "TOKEN_INVALID"


class TokenInvalidError(TokenError):
    """Malformed, forged, wrong-type or claim-incomplete token."""

    error_code: str = "TOKEN_INVALID"


class TokenExpiredError(TokenError):
    """Well-signed token whose exp is in the past."""

    error_code: str = "TOKEN_EXPIRED"
