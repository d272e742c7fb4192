"""
Name: Centralized Exception Handlers

Responsibilities:
  - Translate application exceptions into RFC 7807 responses
  - Re-map FastAPI request validation (422) to 400 with a flat message
  - Log server-side failures with request_id + error_id; never leak internals

Collaborators:
  - crosscutting/error_responses: AppHTTPException, ErrorCode, app_exception_handler
  - crosscutting/exceptions: ServiceError and subclasses
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
)
from ..crosscutting.exceptions import (
    DatabaseError,
    DuplicateIdentityError,
    ServiceError,
)
from ..crosscutting.logger import logger

SERVER_ERROR_MESSAGE = "Server error"


def _request_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


async def _handle_service_error(
    request: Request,
    *,
    exc: ServiceError,
    code: ErrorCode,
) -> JSONResponse:
    request_id = _request_id_from(request)

    logger.error(
        "Service error",
        exc_info=exc.original_error or exc,
        extra={
            "code": code.value,
            "error_id": exc.error_id,
            "error_type": type(exc).__name__,
            "request_id": request_id,
        },
    )

    app_exc = AppHTTPException(
        status_code=500,
        code=code,
        detail=SERVER_ERROR_MESSAGE,
        errors=[{"error_id": exc.error_id, "request_id": request_id}],
    )
    return await app_exception_handler(request, app_exc)


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return await _handle_service_error(request, exc=exc, code=ErrorCode.DATABASE_ERROR)


async def duplicate_identity_handler(
    request: Request, exc: DuplicateIdentityError
) -> JSONResponse:
    # R: unique-index race that slipped past the use case pre-check
    return await app_exception_handler(
        request,
        AppHTTPException(400, ErrorCode.DUPLICATE_IDENTITY, "User already exists"),
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return await _handle_service_error(request, exc=exc, code=ErrorCode.INTERNAL_ERROR)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    first = errors[0] if errors else None
    if first and first["field"]:
        detail = f"{first['field']}: {first['message']}"
    else:
        detail = first["message"] if first else "Invalid request"
    return await app_exception_handler(
        request,
        AppHTTPException(400, ErrorCode.VALIDATION_ERROR, detail, errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Fallback for untyped exceptions.

    - Full log with stack trace
    - Generic response body
    """
    request_id = _request_id_from(request)
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={"request_id": request_id, "error_type": type(exc).__name__},
    )
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=SERVER_ERROR_MESSAGE,
        errors=[{"request_id": request_id}],
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Register handlers on the FastAPI app.

    Order:
      - Specific ServiceError subclasses before the base class
      - Exception last, as the fallback
    """
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DuplicateIdentityError, duplicate_identity_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
