"""
Name: Confirm Password Reset Use Case

Responsibilities:
  - Resolve the account a reset token claims to belong to
  - Drive the reset state machine: NoResetPending / ResetPending / Locked
  - Replace the password on a valid token; count and lock on invalid ones

Collaborators:
  - identity/tokens.TokenService: signature, type and expiry
  - identity/credential_store.CredentialStore: lookup + hashing
  - domain/reset_state: state derivation and lockout policy
  - domain/repositories.UserRepository: conditional writes

Constraints:
  - Validation (token presence, password strength) runs before any state read
  - Locked rejects every confirmation, even with the correct token
  - A valid token is single-use: the write is conditional on the stored token,
    so two concurrent confirmations cannot both succeed
  - A token whose subject cannot be resolved never mutates any record
  - Failed attempts only count against an account with a pending token

Error Mapping:
  - TOKEN_MISSING: no token supplied
  - VALIDATION_ERROR: weak password
  - INVALID_OR_EXPIRED_TOKEN: forged, wrong type, expired, superseded, no
    pending reset, unknown subject, lost race
  - ACCOUNT_LOCKED: locked before the attempt, or this attempt reached the
    threshold
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from ....crosscutting.exceptions import TokenError
from ....crosscutting.logger import logger
from ....domain.clock import Clock, utc_now
from ....domain.entities import User
from ....domain.reset_state import Locked, NoResetPending, reset_state_of
from ....domain.validation import check_password
from ....identity.credential_store import CredentialStore
from ....identity.tokens import TokenService, TokenType
from .account_results import AccountErrorCode, AccountResult, failure
from .request_password_reset import ResetPolicy

TOKEN_MISSING_MESSAGE = "Token not provided"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"
ACCOUNT_LOCKED_MESSAGE = "Too many failed attempts. Try again later."


@dataclass(frozen=True)
class ConfirmPasswordResetInput:
    token: str | None
    new_password: str | None


class ConfirmPasswordResetUseCase:
    def __init__(
        self,
        credentials: CredentialStore,
        tokens: TokenService,
        *,
        policy: ResetPolicy = ResetPolicy(),
        password_min_length: int = 8,
        clock: Clock = utc_now,
    ) -> None:
        self._credentials = credentials
        self._tokens = tokens
        self._policy = policy
        self._password_min_length = password_min_length
        self._clock = clock

    def execute(self, input_data: ConfirmPasswordResetInput) -> AccountResult:
        # ---------------------------------------------------------------------
        # 1) Boundary validation (no state is read before this passes).
        # ---------------------------------------------------------------------
        token = (input_data.token or "").strip()
        if not token:
            return failure(AccountErrorCode.TOKEN_MISSING, TOKEN_MISSING_MESSAGE)

        error = check_password(
            input_data.new_password, min_length=self._password_min_length
        )
        if error:
            return failure(AccountErrorCode.VALIDATION_ERROR, error)

        # ---------------------------------------------------------------------
        # 2) Resolve the claimed account without trusting the token yet.
        # ---------------------------------------------------------------------
        user = self._resolve_subject(token)
        if user is None:
            return failure(
                AccountErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_TOKEN_MESSAGE
            )

        # ---------------------------------------------------------------------
        # 3) State machine.
        # ---------------------------------------------------------------------
        now = self._clock()
        state = reset_state_of(user, now)
        if isinstance(state, Locked):
            logger.info(
                "password reset refused, account locked",
                extra={"user_id": str(user.id)},
            )
            return failure(AccountErrorCode.ACCOUNT_LOCKED, ACCOUNT_LOCKED_MESSAGE)

        if isinstance(state, NoResetPending):
            return failure(
                AccountErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_TOKEN_MESSAGE
            )

        if self._is_valid_for(token, user) and not state.is_expired(now):
            return self._complete(user, token, input_data.new_password or "")

        return self._record_failure(user)

    def _resolve_subject(self, token: str) -> User | None:
        subject = self._tokens.peek_subject(token)
        if subject is None:
            return None
        try:
            user_id = UUID(subject)
        except ValueError:
            return None
        return self._credentials.find_by_id(user_id)

    def _is_valid_for(self, token: str, user: User) -> bool:
        try:
            claims = self._tokens.verify(token, TokenType.RESET)
        except TokenError:
            return False
        # R: only the most recently issued token is honored
        return claims.subject_id == str(user.id) and token == user.reset_token

    def _complete(self, user: User, token: str, new_password: str) -> AccountResult:
        updated = self._credentials.repository.complete_password_reset(
            user.id,
            expected_token=token,
            password_hash=self._credentials.hash_password(new_password),
            now=self._clock(),
        )
        if updated is None:
            # R: a concurrent confirmation or request won the write
            return failure(
                AccountErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_TOKEN_MESSAGE
            )
        logger.info("password reset completed", extra={"user_id": str(user.id)})
        return AccountResult(user=updated)

    def _record_failure(self, user: User) -> AccountResult:
        lockout = self._policy.lockout
        now = self._clock()
        updated = self._credentials.repository.record_failed_reset_attempt(
            user.id,
            max_attempts=lockout.max_failed_attempts,
            lock_until=lockout.lock_until(now),
            now=now,
        )
        attempts = updated.failed_reset_attempts if updated is not None else 0
        if updated is not None and lockout.reaches_threshold(attempts):
            logger.warning(
                "password reset locked",
                extra={"user_id": str(user.id), "failed_attempts": attempts},
            )
            return failure(AccountErrorCode.ACCOUNT_LOCKED, ACCOUNT_LOCKED_MESSAGE)

        logger.info(
            "password reset rejected",
            extra={"user_id": str(user.id), "failed_attempts": attempts},
        )
        return failure(AccountErrorCode.INVALID_OR_EXPIRED_TOKEN, INVALID_TOKEN_MESSAGE)
