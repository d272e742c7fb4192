"""
Name: Request Password Reset Use Case

Responsibilities:
  - Issue a short-lived reset token for an existing account
  - Store it as the account's single pending token (overwrites any prior one)
  - Dispatch the reset link through the notifier

Collaborators:
  - identity/credential_store.CredentialStore: lookup by email
  - identity/tokens.TokenService: RESET-typed tokens
  - infrastructure/notifications: PasswordResetNotifier port

Constraints:
  - Storing a new token resets the failed-attempt counter; an active lock
    is left untouched, so confirmations stay refused until it elapses
  - The token value never reaches the logs

Error Mapping:
  - VALIDATION_ERROR: malformed email
  - NOT_FOUND: no account with that email
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from urllib.parse import urlencode

from ....crosscutting.logger import logger
from ....domain.clock import Clock, utc_now
from ....domain.reset_state import LockoutPolicy
from ....domain.validation import check_email, normalize_email
from ....identity.credential_store import CredentialStore
from ....identity.tokens import TokenService, TokenType
from ....infrastructure.notifications.base import PasswordResetNotifier
from .account_results import AccountErrorCode, AccountResult, failure

USER_NOT_FOUND_MESSAGE = "User not found"


@dataclass(frozen=True)
class ResetPolicy:
    """R: Reset token lifetime and failed-confirmation lockout."""

    token_ttl: timedelta = timedelta(minutes=10)
    lockout: LockoutPolicy = LockoutPolicy()


class RequestPasswordResetUseCase:
    def __init__(
        self,
        credentials: CredentialStore,
        tokens: TokenService,
        notifier: PasswordResetNotifier,
        *,
        reset_url_base: str,
        policy: ResetPolicy = ResetPolicy(),
        clock: Clock = utc_now,
    ) -> None:
        self._credentials = credentials
        self._tokens = tokens
        self._notifier = notifier
        self._reset_url_base = reset_url_base
        self._policy = policy
        self._clock = clock

    def execute(self, email: str) -> AccountResult:
        error = check_email(email)
        if error:
            return failure(AccountErrorCode.VALIDATION_ERROR, error)

        user = self._credentials.find_by_email(normalize_email(email))
        if user is None:
            return failure(AccountErrorCode.NOT_FOUND, USER_NOT_FOUND_MESSAGE)

        now = self._clock()
        token = self._tokens.issue(
            str(user.id), user.role, self._policy.token_ttl, TokenType.RESET
        )
        updated = self._credentials.repository.store_reset_token(
            user.id,
            token=token,
            expiry=now + self._policy.token_ttl,
            updated_at=now,
        )
        if updated is None:
            # R: deleted between lookup and write
            return failure(AccountErrorCode.NOT_FOUND, USER_NOT_FOUND_MESSAGE)

        # R: NotificationError propagates; the stored token stays pending
        self._notifier.send_reset_link(updated.email, self._reset_url(token))
        logger.info("password reset requested", extra={"user_id": str(user.id)})
        return AccountResult(user=updated)

    def _reset_url(self, token: str) -> str:
        separator = "&" if "?" in self._reset_url_base else "?"
        return f"{self._reset_url_base}{separator}{urlencode({'token': token})}"
