"""
Name: Account Use Case Results

Responsibilities:
  - Shared result and error models for account use cases
  - A small, stable set of error codes the HTTP layer maps to status codes

Notes:
  - Use cases return results for expected business outcomes instead of
    raising; infrastructure failures still propagate as ServiceError
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ....domain.entities import User


class AccountErrorCode(str, Enum):
    """
    Codes:
      - VALIDATION_ERROR: malformed or incomplete input
      - DUPLICATE_IDENTITY: email already registered
      - INVALID_CREDENTIALS: unknown email or wrong password on login
      - NOT_FOUND: user does not exist
      - TOKEN_MISSING: reset confirmation without a token
      - INVALID_OR_EXPIRED_TOKEN: forged, expired, revoked or mismatched token
      - ACCOUNT_LOCKED: reset confirmations suspended for this account
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_IDENTITY = "DUPLICATE_IDENTITY"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    NOT_FOUND = "NOT_FOUND"
    TOKEN_MISSING = "TOKEN_MISSING"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"


@dataclass(frozen=True)
class AccountError:
    code: AccountErrorCode
    message: str


@dataclass
class AccountResult:
    """
    Contract:
      - error is None => success (user may be None for commands without output)
      - error is not None => failure
    """

    user: User | None = None
    error: AccountError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class LoginResult:
    token: str | None = None
    expires_in: int = 0
    user: User | None = None
    error: AccountError | None = None


@dataclass
class UserListResult:
    users: List[User] = field(default_factory=list)
    error: AccountError | None = None


@dataclass(frozen=True)
class BulkRegistrationItem:
    email: str
    status: str
    message: str


@dataclass
class BulkRegistrationResult:
    results: List[BulkRegistrationItem] = field(default_factory=list)

    @property
    def created(self) -> int:
        return sum(1 for item in self.results if item.status == "success")


def failure(code: AccountErrorCode, message: str) -> AccountResult:
    return AccountResult(error=AccountError(code=code, message=message))
