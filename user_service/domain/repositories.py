"""
Name: Repository Interfaces (Ports)

Responsibilities:
  - Define the persistence contract for User records
  - Express the reset-state writes as conditional, single-record updates

Collaborators:
  - infrastructure/repositories/in_memory/user.py
  - infrastructure/repositories/postgres/user.py

Constraints:
  - Every write touches exactly one record atomically
  - "Not found" is a None return, not an exception
  - create_user raises DuplicateIdentityError when the email is taken
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from .entities import User


class UserRepository(Protocol):
    """
    R: Persistence contract for users.

    The reset-related writes are compare-and-swap style so that concurrent
    confirmations against the same pending token cannot both succeed.
    """

    def create_user(self, user: User) -> User:
        """Insert a new user. Raises DuplicateIdentityError on email clash."""
        ...

    def get_user_by_email(self, email: str) -> User | None: ...

    def get_user_by_id(self, user_id: UUID) -> User | None: ...

    def list_users(self) -> list[User]: ...

    def update_profile(
        self,
        user_id: UUID,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        dob: date | None = None,
        updated_at: datetime,
    ) -> User | None:
        """Update only the given profile fields. Never touches the password."""
        ...

    def update_password(
        self, user_id: UUID, password_hash: str, *, updated_at: datetime
    ) -> User | None: ...

    def delete_user(self, user_id: UUID) -> bool: ...

    def store_reset_token(
        self,
        user_id: UUID,
        *,
        token: str,
        expiry: datetime,
        updated_at: datetime,
    ) -> User | None:
        """Overwrite any pending token and reset the failed-attempt counter."""
        ...

    def complete_password_reset(
        self,
        user_id: UUID,
        *,
        expected_token: str,
        password_hash: str,
        now: datetime,
    ) -> User | None:
        """
        Conditional write: only when the stored token equals expected_token,
        it has not expired and the account is not locked at `now`.

        On success the reset sub-state is cleared and the password replaced.
        Returns None when the condition did not hold (lost race, revoked).
        """
        ...

    def record_failed_reset_attempt(
        self,
        user_id: UUID,
        *,
        max_attempts: int,
        lock_until: datetime,
        now: datetime,
    ) -> User | None:
        """
        Atomic increment of failed_reset_attempts (capped at max_attempts).
        When the new value reaches max_attempts, lock_until is set.
        """
        ...

    def ping(self) -> bool: ...
