"""
Name: Boundary Validation

Responsibilities:
  - Email format and password strength checks as pure functions
  - Compose checks into a pre-check pipeline (first failure wins)

Notes:
  - Each check returns an error message, or None when the value is acceptable
  - Independent from the reset state machine; called before any state read
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional

Check = Callable[[], Optional[str]]

# R: Pragmatic shape check (local@domain.tld); deliverability is not verified.
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

MAX_EMAIL_LENGTH = 320
MAX_PASSWORD_LENGTH = 512


def normalize_email(email: str | None) -> str:
    """R: Trim surrounding whitespace; case is preserved as stored."""
    return (email or "").strip()


def check_email(email: str | None) -> str | None:
    value = normalize_email(email)
    if not value:
        return "Email is required"
    if len(value) > MAX_EMAIL_LENGTH:
        return "Email is too long"
    if not _EMAIL_PATTERN.match(value):
        return "Email is not valid"
    return None


def check_password(password: str | None, *, min_length: int = 8) -> str | None:
    if not password:
        return "Password is required"
    if len(password) < min_length:
        return f"Password must be at least {min_length} characters long"
    if len(password) > MAX_PASSWORD_LENGTH:
        return "Password is too long"
    if password.strip() != password or not password.strip():
        return "Password must not start or end with whitespace"
    return None


def check_required(value: str | None, field: str) -> str | None:
    if value is None or not str(value).strip():
        return f"{field} is required"
    return None


def first_error(checks: Iterable[Check]) -> str | None:
    """R: Run checks in order and stop at the first failure."""
    for check in checks:
        error = check()
        if error:
            return error
    return None
