"""
Name: Token Service (JWT)

Responsibilities:
  - Issue signed, expiring tokens for sessions and password resets
  - Verify signature, type and expiry against an injectable clock
  - Read the subject of a token without trusting it (lockout keying)

Collaborators:
  - PyJWT: HS256 signing
  - domain/clock.py: time source
  - crosscutting/exceptions.py: TokenInvalidError / TokenExpiredError

Notes:
  - Claims: sub, role, typ, jti, iat, exp
  - Expiry is checked here against the clock, not by PyJWT, so TTL
    boundaries are deterministic under a fake clock
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from uuid import uuid4

import jwt

from ..crosscutting.exceptions import TokenExpiredError, TokenInvalidError
from ..domain.clock import Clock, utc_now
from ..domain.entities import UserRole

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_ROLE: str = "role"
CLAIM_TYP: str = "typ"
CLAIM_JTI: str = "jti"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"


class TokenType(str, Enum):
    ACCESS = "access"
    RESET = "reset"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Verified identity carried by a token."""

    subject_id: str
    role: UserRole
    token_type: TokenType
    expires_at: datetime


class TokenService:
    """R: Stateless issue/verify. Reset tokens are additionally checked by callers."""

    def __init__(self, secret: str, *, clock: Clock = utc_now) -> None:
        if not secret:
            raise ValueError("secret is required")
        self._secret = secret
        self._clock = clock

    def issue(
        self,
        subject_id: str,
        role: UserRole,
        ttl: timedelta,
        token_type: TokenType = TokenType.ACCESS,
    ) -> str:
        """Create a signed token valid for `ttl` from now."""
        now = self._clock()
        payload: dict[str, object] = {
            CLAIM_SUB: str(subject_id),
            CLAIM_ROLE: UserRole(role).value,
            CLAIM_TYP: token_type.value,
            CLAIM_JTI: uuid4().hex,
            CLAIM_IAT: int(now.timestamp()),
            CLAIM_EXP: int((now + ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(
        self, token: str, token_type: TokenType = TokenType.ACCESS
    ) -> TokenClaims:
        """
        Decode and validate a token.

        Raises:
            TokenInvalidError: bad signature, malformed, missing claims, wrong type
            TokenExpiredError: valid signature but exp <= now
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": [CLAIM_SUB, CLAIM_ROLE, CLAIM_EXP],
                },
            )
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError("Invalid token.", original_error=exc) from exc

        subject_id = payload.get(CLAIM_SUB)
        role_value = payload.get(CLAIM_ROLE)
        exp = payload.get(CLAIM_EXP)
        if not subject_id or not role_value or not isinstance(exp, (int, float)):
            raise TokenInvalidError("Invalid token.")

        if payload.get(CLAIM_TYP, TokenType.ACCESS.value) != token_type.value:
            raise TokenInvalidError("Invalid token type.")

        try:
            role = UserRole(str(role_value))
        except ValueError as exc:
            raise TokenInvalidError("Invalid token.") from exc

        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        if expires_at <= self._clock():
            raise TokenExpiredError("Token expired.")

        return TokenClaims(
            subject_id=str(subject_id),
            role=role,
            token_type=token_type,
            expires_at=expires_at,
        )

    @staticmethod
    def peek_subject(token: str) -> str | None:
        """R: Unverified `sub` claim, or None when the token cannot be parsed."""
        try:
            payload = jwt.decode(
                token,
                options={"verify_signature": False, "verify_exp": False},
                algorithms=[JWT_ALGORITHM],
            )
        except jwt.InvalidTokenError:
            return None
        subject = payload.get(CLAIM_SUB)
        return str(subject) if subject else None
