"""
Name: In-Memory User Repository

Responsibilities:
  - Store users in memory (tests / local dev)
  - Enforce email uniqueness like the Postgres unique index
  - Apply the conditional reset writes atomically under one lock

Collaborators:
  - domain.entities.User
  - domain.repositories.UserRepository (contract)

Notes:
  - Thread-safe: every read-modify-write runs under the same Lock
  - Ordering aligned with Postgres: created_at DESC, id DESC
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from threading import Lock
from typing import Dict, List, Optional
from uuid import UUID

from ....crosscutting.exceptions import DuplicateIdentityError
from ....domain.entities import User


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._lock = Lock()
        self._users: Dict[UUID, User] = {}

    def _email_taken(self, email: str, *, exclude: UUID | None = None) -> bool:
        return any(
            u.email == email and u.id != exclude for u in self._users.values()
        )

    def create_user(self, user: User) -> User:
        with self._lock:
            if self._email_taken(user.email):
                raise DuplicateIdentityError("User already exists")
            self._users[user.id] = user
            return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user
            return None

    def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def list_users(self) -> List[User]:
        with self._lock:
            oldest = datetime.min.replace(tzinfo=timezone.utc)
            return sorted(
                self._users.values(),
                key=lambda u: (u.created_at or oldest, str(u.id)),
                reverse=True,
            )

    def update_profile(
        self,
        user_id: UUID,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        dob: date | None = None,
        updated_at: datetime,
    ) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            if email is not None and self._email_taken(email, exclude=user_id):
                raise DuplicateIdentityError("User already exists")
            updated = replace(
                current,
                first_name=first_name if first_name is not None else current.first_name,
                last_name=last_name if last_name is not None else current.last_name,
                email=email if email is not None else current.email,
                dob=dob if dob is not None else current.dob,
                updated_at=updated_at,
            )
            self._users[user_id] = updated
            return updated

    def update_password(
        self, user_id: UUID, password_hash: str, *, updated_at: datetime
    ) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            updated = replace(
                current, password_hash=password_hash, updated_at=updated_at
            )
            self._users[user_id] = updated
            return updated

    def delete_user(self, user_id: UUID) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def store_reset_token(
        self,
        user_id: UUID,
        *,
        token: str,
        expiry: datetime,
        updated_at: datetime,
    ) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            updated = replace(
                current,
                reset_token=token,
                reset_token_expiry=expiry,
                failed_reset_attempts=0,
                updated_at=updated_at,
            )
            self._users[user_id] = updated
            return updated

    def complete_password_reset(
        self,
        user_id: UUID,
        *,
        expected_token: str,
        password_hash: str,
        now: datetime,
    ) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            if current.reset_token is None or current.reset_token != expected_token:
                return None
            if current.reset_token_expiry is None or current.reset_token_expiry <= now:
                return None
            if current.lock_until is not None and current.lock_until > now:
                return None
            updated = replace(
                current,
                password_hash=password_hash,
                reset_token=None,
                reset_token_expiry=None,
                failed_reset_attempts=0,
                lock_until=None,
                updated_at=now,
            )
            self._users[user_id] = updated
            return updated

    def record_failed_reset_attempt(
        self,
        user_id: UUID,
        *,
        max_attempts: int,
        lock_until: datetime,
        now: datetime,
    ) -> Optional[User]:
        with self._lock:
            current = self._users.get(user_id)
            if current is None:
                return None
            attempts = min(current.failed_reset_attempts + 1, max_attempts)
            updated = replace(
                current,
                failed_reset_attempts=attempts,
                lock_until=lock_until if attempts >= max_attempts else current.lock_until,
                updated_at=now,
            )
            self._users[user_id] = updated
            return updated

    def ping(self) -> bool:
        return True
