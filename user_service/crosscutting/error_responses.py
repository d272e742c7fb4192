"""
Standardized error response catalog for API consistency.
All HTTP error responses follow the RFC 7807 Problem Details format and
also carry a flat `message` field for simple clients.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Application error codes for client-side handling."""

    # 4xx Client Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_IDENTITY = "DUPLICATE_IDENTITY"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    TOKEN_MISSING = "TOKEN_MISSING"
    TOKEN_INVALID = "TOKEN_INVALID"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    RATE_LIMITED = "RATE_LIMITED"

    # 5xx Server Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorDetail(BaseModel):
    """RFC 7807 Problem Details response."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    message: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"


class AppHTTPException(HTTPException):
    """Application-specific HTTP exception with error code."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# Pre-defined error factories
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors)


def duplicate_identity(detail: str = "User already exists") -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.DUPLICATE_IDENTITY, detail)


def invalid_credentials(detail: str = "Invalid credentials") -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.INVALID_CREDENTIALS, detail)


def not_found(detail: str = "User not found") -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def unauthorized(detail: str = "Not authorized") -> AppHTTPException:
    return AppHTTPException(401, ErrorCode.UNAUTHORIZED, detail)


def forbidden(detail: str = "Access denied") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def token_missing(detail: str = "Token not provided") -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.TOKEN_MISSING, detail)


def token_invalid(detail: str = "Invalid or expired token") -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.TOKEN_INVALID, detail)


def account_locked(detail: str) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.ACCOUNT_LOCKED, detail)


def rate_limited(retry_after: int = 60) -> AppHTTPException:
    exc = AppHTTPException(
        429, ErrorCode.RATE_LIMITED, f"Too many requests. Retry after {retry_after}s"
    )
    exc.headers = {"Retry-After": str(retry_after)}
    return exc


def internal_error(detail: str = "Server error") -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def _problem_response(
    request: Request,
    *,
    status: int,
    code: ErrorCode,
    detail: str,
    errors: list[dict[str, Any]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    error = ErrorDetail(
        type=f"https://api.user-service.local/errors/{code.value.lower()}",
        title=code.value.replace("_", " ").title(),
        status=status,
        detail=detail,
        message=detail,
        code=code,
        instance=str(request.url),
        errors=errors,
    )
    return JSONResponse(
        status_code=status,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


# Exception handlers for FastAPI
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Handler for AppHTTPException."""
    return _problem_response(
        request,
        status=exc.status_code,
        code=exc.code,
        detail=str(exc.detail),
        errors=exc.errors,
        headers=getattr(exc, "headers", None),
    )

