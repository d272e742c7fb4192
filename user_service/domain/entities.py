"""
Name: Account Entities

Responsibilities:
  - Define the user role enum
  - Define the User record, including the embedded reset sub-state

Notes:
  - User is immutable; repositories return new instances after writes
  - password_hash is an encoded Argon2 hash (salt embedded), never plaintext
  - reset_token and reset_token_expiry are written together or cleared together
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """R: Supported user roles."""

    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class User:
    """R: User record used by authentication and reset flows."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    password_hash: str
    dob: date
    role: UserRole = UserRole.USER
    created_at: datetime | None = None
    updated_at: datetime | None = None
    reset_token: str | None = None
    reset_token_expiry: datetime | None = None
    failed_reset_attempts: int = 0
    lock_until: datetime | None = None
