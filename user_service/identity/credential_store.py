"""
Name: Credential Store

Responsibilities:
  - Create users with a hashed password (DuplicateIdentity on email clash)
  - Look users up by email / id
  - Verify and replace passwords

Collaborators:
  - domain/repositories.UserRepository: persistence
  - identity/passwords.PasswordHasher: Argon2 hashing

Notes:
  - Hashing happens only on create/set_password; profile edits never rehash
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID, uuid4

from ..crosscutting.exceptions import DuplicateIdentityError
from ..domain.clock import Clock, utc_now
from ..domain.entities import User, UserRole
from ..domain.repositories import UserRepository
from .passwords import PasswordHasher


@dataclass(frozen=True)
class NewUser:
    """Registration candidate (plaintext password, never persisted as is)."""

    first_name: str
    last_name: str
    email: str
    password: str
    dob: date
    role: UserRole = UserRole.USER


class CredentialStore:
    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._users = repository
        self._hasher = hasher
        self._clock = clock

    @property
    def repository(self) -> UserRepository:
        return self._users

    def create(self, candidate: NewUser) -> User:
        """Raises DuplicateIdentityError when the email is already registered."""
        if self._users.get_user_by_email(candidate.email) is not None:
            raise DuplicateIdentityError("User already exists")

        now = self._clock()
        user = User(
            id=uuid4(),
            first_name=candidate.first_name,
            last_name=candidate.last_name,
            email=candidate.email,
            password_hash=self._hasher.hash(candidate.password),
            dob=candidate.dob,
            role=candidate.role,
            created_at=now,
            updated_at=now,
        )
        # R: the unique index still guards the check-then-insert race
        return self._users.create_user(user)

    def find_by_email(self, email: str) -> User | None:
        return self._users.get_user_by_email(email)

    def find_by_id(self, user_id: UUID) -> User | None:
        return self._users.get_user_by_id(user_id)

    def verify_password(self, user: User, plaintext: str) -> bool:
        return self._hasher.verify(plaintext, user.password_hash)

    def hash_password(self, plaintext: str) -> str:
        return self._hasher.hash(plaintext)

    def set_password(self, user: User, plaintext: str) -> User | None:
        return self._users.update_password(
            user.id, self._hasher.hash(plaintext), updated_at=self._clock()
        )
