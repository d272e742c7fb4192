"""
Name: Login User Use Case

Responsibilities:
  - Verify email + password against the stored Argon2 hash
  - Issue an access token carrying the user's id and role

Collaborators:
  - identity/credential_store.CredentialStore
  - identity/tokens.TokenService

Constraints:
  - Unknown email and wrong password yield the same INVALID_CREDENTIALS
    outcome (no account enumeration through login)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ....crosscutting.logger import logger
from ....domain.validation import check_email, check_required, first_error, normalize_email
from ....identity.credential_store import CredentialStore
from ....identity.tokens import TokenService, TokenType
from .account_results import AccountError, AccountErrorCode, LoginResult

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


@dataclass(frozen=True)
class LoginUserInput:
    email: str
    password: str


class LoginUserUseCase:
    def __init__(
        self,
        credentials: CredentialStore,
        tokens: TokenService,
        *,
        access_ttl: timedelta = timedelta(hours=24),
    ) -> None:
        self._credentials = credentials
        self._tokens = tokens
        self._access_ttl = access_ttl

    def execute(self, input_data: LoginUserInput) -> LoginResult:
        error = first_error(
            [
                lambda: check_email(input_data.email),
                lambda: check_required(input_data.password, "Password"),
            ]
        )
        if error:
            return LoginResult(
                error=AccountError(AccountErrorCode.VALIDATION_ERROR, error)
            )

        user = self._credentials.find_by_email(normalize_email(input_data.email))
        if user is None or not self._credentials.verify_password(
            user, input_data.password
        ):
            logger.info("login rejected")
            return LoginResult(
                error=AccountError(
                    AccountErrorCode.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE
                )
            )

        token = self._tokens.issue(
            str(user.id), user.role, self._access_ttl, TokenType.ACCESS
        )
        logger.info("user logged in", extra={"user_id": str(user.id)})
        return LoginResult(
            token=token,
            expires_in=int(self._access_ttl.total_seconds()),
            user=user,
        )
