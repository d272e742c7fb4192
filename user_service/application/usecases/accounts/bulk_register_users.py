"""
Name: Bulk Register Users Use Case

Responsibilities:
  - Register a batch of accounts, one outcome record per submitted email
  - Isolate failures per item: one bad item never aborts the batch

Collaborators:
  - register_user.RegisterUserUseCase: same rules as self-registration

Notes:
  - Items that could not be parsed at the boundary arrive as
    InvalidRegistration and are reported as failed without a store call
  - Persistence failures (ServiceError) are reported as "Server error" for
    that item and logged with the item's position, not its payload
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

from ....crosscutting.exceptions import ServiceError
from ....crosscutting.logger import logger
from .account_results import BulkRegistrationItem, BulkRegistrationResult
from .register_user import RegisterUserInput, RegisterUserUseCase

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class InvalidRegistration:
    """A batch entry rejected before validation of its values could run."""

    email: str
    message: str


BulkRegistrationEntry = Union[RegisterUserInput, InvalidRegistration]


class BulkRegisterUsersUseCase:
    def __init__(self, register: RegisterUserUseCase) -> None:
        self._register = register

    def execute(self, items: Iterable[BulkRegistrationEntry]) -> BulkRegistrationResult:
        result = BulkRegistrationResult()
        for index, item in enumerate(items):
            result.results.append(self._register_one(index, item))

        logger.info(
            "bulk registration complete",
            extra={"total": len(result.results), "created_count": result.created},
        )
        return result

    def _register_one(self, index: int, item: BulkRegistrationEntry) -> BulkRegistrationItem:
        if isinstance(item, InvalidRegistration):
            return BulkRegistrationItem(item.email, STATUS_FAILED, item.message)

        try:
            outcome = self._register.execute(item)
        except ServiceError as exc:
            logger.error(
                "bulk registration item failed",
                extra={"index": index, "error_id": exc.error_id},
                exc_info=True,
            )
            return BulkRegistrationItem(item.email, STATUS_FAILED, "Server error")

        if outcome.error is not None:
            return BulkRegistrationItem(item.email, STATUS_FAILED, outcome.error.message)
        return BulkRegistrationItem(item.email, STATUS_SUCCESS, "User created successfully")
