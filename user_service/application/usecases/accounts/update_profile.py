"""
Name: Update Profile Use Case

Responsibilities:
  - Apply partial self-service edits (first/last name, email, dob)
  - Keep email unique across accounts

Constraints:
  - Never touches the password or the reset sub-state (no rehash on edits)
  - Fields left as None are kept as stored

Error Mapping:
  - VALIDATION_ERROR: malformed email or blank names
  - DUPLICATE_IDENTITY: new email already registered
  - NOT_FOUND: account deleted while the session is still valid
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from ....crosscutting.exceptions import DuplicateIdentityError
from ....crosscutting.logger import logger
from ....domain.clock import Clock, utc_now
from ....domain.repositories import UserRepository
from ....domain.validation import check_email, check_required, first_error, normalize_email
from .account_results import AccountErrorCode, AccountResult, failure


@dataclass(frozen=True)
class UpdateProfileInput:
    user_id: UUID
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    dob: date | None = None


class UpdateProfileUseCase:
    def __init__(self, repository: UserRepository, *, clock: Clock = utc_now) -> None:
        self._users = repository
        self._clock = clock

    def execute(self, input_data: UpdateProfileInput) -> AccountResult:
        checks = []
        if input_data.first_name is not None:
            checks.append(lambda: check_required(input_data.first_name, "First name"))
        if input_data.last_name is not None:
            checks.append(lambda: check_required(input_data.last_name, "Last name"))
        if input_data.email is not None:
            checks.append(lambda: check_email(input_data.email))
        error = first_error(checks)
        if error:
            return failure(AccountErrorCode.VALIDATION_ERROR, error)

        try:
            updated = self._users.update_profile(
                input_data.user_id,
                first_name=_strip(input_data.first_name),
                last_name=_strip(input_data.last_name),
                email=(
                    normalize_email(input_data.email)
                    if input_data.email is not None
                    else None
                ),
                dob=input_data.dob,
                updated_at=self._clock(),
            )
        except DuplicateIdentityError:
            return failure(AccountErrorCode.DUPLICATE_IDENTITY, "User already exists")

        if updated is None:
            return failure(AccountErrorCode.NOT_FOUND, "User not found")

        logger.info("profile updated", extra={"user_id": str(updated.id)})
        return AccountResult(user=updated)


def _strip(value: str | None) -> str | None:
    return value.strip() if value is not None else None
