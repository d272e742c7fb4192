"""
Name: Use Case Error -> HTTP mapping

Responsibilities:
  - Translate AccountErrorCode into AppHTTPException (RFC 7807)
  - Keep routers free of status-code decisions

Notes:
  - Every account failure is a 4xx; infrastructure failures arrive as
    ServiceError and are handled in exception_handlers
"""

from __future__ import annotations

from typing import NoReturn

from ..application.usecases import AccountError, AccountErrorCode
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    account_locked,
    duplicate_identity,
    invalid_credentials,
    not_found,
    token_invalid,
    token_missing,
    validation_error,
)


def raise_account_error(error: AccountError) -> NoReturn:
    code = error.code
    if code == AccountErrorCode.VALIDATION_ERROR:
        raise validation_error(error.message)
    if code == AccountErrorCode.DUPLICATE_IDENTITY:
        raise duplicate_identity(error.message)
    if code == AccountErrorCode.INVALID_CREDENTIALS:
        raise invalid_credentials(error.message)
    if code == AccountErrorCode.NOT_FOUND:
        raise not_found(error.message)
    if code == AccountErrorCode.TOKEN_MISSING:
        raise token_missing(error.message)
    if code == AccountErrorCode.INVALID_OR_EXPIRED_TOKEN:
        raise token_invalid(error.message)
    if code == AccountErrorCode.ACCOUNT_LOCKED:
        raise account_locked(error.message)
    # Unknown codes still surface as a client error
    raise AppHTTPException(400, ErrorCode.VALIDATION_ERROR, error.message)
