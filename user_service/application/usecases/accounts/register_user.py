"""
Name: Register User Use Case

Responsibilities:
  - Validate registration input (required names, email shape, password length)
  - Create the user through the credential store (hash + uniqueness)
  - Return a typed result instead of raising for expected outcomes

Collaborators:
  - identity/credential_store.CredentialStore
  - domain/validation: boundary checks

Error Mapping:
  - VALIDATION_ERROR: missing fields, malformed email, weak password
  - DUPLICATE_IDENTITY: email already registered (pre-check or unique index)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ....crosscutting.exceptions import DuplicateIdentityError
from ....crosscutting.logger import logger
from ....domain.entities import UserRole
from ....domain.validation import (
    check_email,
    check_password,
    check_required,
    first_error,
    normalize_email,
)
from ....identity.credential_store import CredentialStore, NewUser
from .account_results import AccountErrorCode, AccountResult, failure


@dataclass(frozen=True)
class RegisterUserInput:
    first_name: str
    last_name: str
    email: str
    password: str
    dob: date | None
    role: UserRole = UserRole.USER


class RegisterUserUseCase:
    def __init__(
        self, credentials: CredentialStore, *, password_min_length: int = 8
    ) -> None:
        self._credentials = credentials
        self._password_min_length = password_min_length

    def execute(self, input_data: RegisterUserInput) -> AccountResult:
        error = first_error(
            [
                lambda: check_required(input_data.first_name, "First name"),
                lambda: check_required(input_data.last_name, "Last name"),
                lambda: check_email(input_data.email),
                lambda: check_password(
                    input_data.password, min_length=self._password_min_length
                ),
                lambda: None if input_data.dob else "Date of birth is required",
            ]
        )
        if error:
            return failure(AccountErrorCode.VALIDATION_ERROR, error)

        candidate = NewUser(
            first_name=input_data.first_name.strip(),
            last_name=input_data.last_name.strip(),
            email=normalize_email(input_data.email),
            password=input_data.password,
            dob=input_data.dob,
            role=input_data.role,
        )
        try:
            user = self._credentials.create(candidate)
        except DuplicateIdentityError:
            return failure(AccountErrorCode.DUPLICATE_IDENTITY, "User already exists")

        logger.info(
            "user registered",
            extra={"user_id": str(user.id), "role": user.role.value},
        )
        return AccountResult(user=user)
