"""
Name: User Administration Use Cases

Responsibilities:
  - List every account (admin view)
  - Delete an account by id

Notes:
  - Role enforcement happens in the HTTP gate (require_role); these use cases
    assume an authorized caller
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.logger import logger
from ....domain.repositories import UserRepository
from .account_results import AccountErrorCode, AccountResult, UserListResult, failure


class ListUsersUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self) -> UserListResult:
        return UserListResult(users=self._users.list_users())


class DeleteUserUseCase:
    def __init__(self, repository: UserRepository) -> None:
        self._users = repository

    def execute(self, user_id: UUID) -> AccountResult:
        if not self._users.delete_user(user_id):
            return failure(AccountErrorCode.NOT_FOUND, "User not found")
        logger.info("user deleted", extra={"user_id": str(user_id)})
        return AccountResult()
