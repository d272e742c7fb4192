"""
Name: Password Hashing (Argon2)

Responsibilities:
  - Hash passwords with a fresh random salt per hash
  - Verify a plaintext against a stored encoded hash

Notes:
  - The encoded Argon2 string embeds algorithm, cost, salt and digest
  - Cost factors are tunable from settings (tests use low values)
"""

from __future__ import annotations

from argon2 import PasswordHasher as _Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


class PasswordHasher:
    """R: Thin wrapper so callers never touch argon2 exceptions."""

    def __init__(self, *, time_cost: int = 3, memory_cost: int = 64 * 1024) -> None:
        self._hasher = _Argon2Hasher(time_cost=time_cost, memory_cost=memory_cost)

    def hash(self, password: str) -> str:
        """Hash a password using Argon2."""
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify password against stored hash."""
        try:
            return self._hasher.verify(password_hash, password)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False
