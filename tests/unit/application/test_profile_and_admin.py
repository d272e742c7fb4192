"""
Name: Profile / Administration Use Case Tests
"""

from datetime import date, timedelta
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from user_service.application.usecases import (
    AccountErrorCode,
    BulkRegisterUsersUseCase,
    DeleteUserUseCase,
    InvalidRegistration,
    ListUsersUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from user_service.crosscutting.exceptions import DatabaseError
from user_service.identity.credential_store import NewUser

pytestmark = pytest.mark.unit


def _candidate(email: str, password: str = "pw123456") -> RegisterUserInput:
    return RegisterUserInput(
        first_name="Grace",
        last_name="Hopper",
        email=email,
        password=password,
        dob=date(1906, 12, 9),
    )


class TestUpdateProfile:
    def test_updates_only_supplied_fields(self, repository, clock, registered_user):
        clock.advance(minutes=5)
        use_case = UpdateProfileUseCase(repository, clock=clock)

        result = use_case.execute(
            UpdateProfileInput(user_id=registered_user.id, first_name="  Augusta ")
        )

        assert result.ok
        assert result.user.first_name == "Augusta"
        assert result.user.last_name == "Lovelace"
        assert result.user.email == "a@x.com"
        assert result.user.password_hash == registered_user.password_hash
        assert result.user.updated_at == registered_user.updated_at + timedelta(minutes=5)

    def test_blank_name_rejected(self, repository, clock, registered_user):
        result = UpdateProfileUseCase(repository, clock=clock).execute(
            UpdateProfileInput(user_id=registered_user.id, last_name="  ")
        )
        assert result.error.code == AccountErrorCode.VALIDATION_ERROR

    def test_email_taken_by_another_account(
        self, repository, clock, credentials, registered_user
    ):
        credentials.create(
            NewUser("Grace", "Hopper", "g@x.com", "pw123456", date(1906, 12, 9))
        )

        result = UpdateProfileUseCase(repository, clock=clock).execute(
            UpdateProfileInput(user_id=registered_user.id, email="g@x.com")
        )

        assert result.error.code == AccountErrorCode.DUPLICATE_IDENTITY

    def test_unknown_user(self, repository, clock):
        result = UpdateProfileUseCase(repository, clock=clock).execute(
            UpdateProfileInput(user_id=uuid4(), first_name="Nobody")
        )
        assert result.error.code == AccountErrorCode.NOT_FOUND


class TestManageUsers:
    def test_list_users(self, repository, registered_user):
        result = ListUsersUseCase(repository).execute()
        assert [user.id for user in result.users] == [registered_user.id]

    def test_delete_user(self, repository, registered_user):
        assert DeleteUserUseCase(repository).execute(registered_user.id).ok
        assert repository.get_user_by_id(registered_user.id) is None

    def test_delete_unknown_user(self, repository):
        result = DeleteUserUseCase(repository).execute(uuid4())
        assert result.error.code == AccountErrorCode.NOT_FOUND


class TestBulkRegister:
    def test_each_item_is_isolated(self, credentials, registered_user):
        use_case = BulkRegisterUsersUseCase(RegisterUserUseCase(credentials))

        result = use_case.execute(
            [
                _candidate("g@x.com"),
                _candidate("a@x.com"),
                _candidate("bad-email"),
                _candidate("h@x.com", password="short"),
                _candidate("k@x.com"),
            ]
        )

        assert [(item.email, item.status) for item in result.results] == [
            ("g@x.com", "success"),
            ("a@x.com", "failed"),
            ("bad-email", "failed"),
            ("h@x.com", "failed"),
            ("k@x.com", "success"),
        ]
        assert result.results[0].message == "User created successfully"
        assert result.results[1].message == "User already exists"
        assert result.created == 2

    def test_server_error_reported_per_item(self):
        register = MagicMock()
        ok = MagicMock(error=None)
        register.execute.side_effect = [DatabaseError("connection lost"), ok]

        result = BulkRegisterUsersUseCase(register).execute(
            [_candidate("g@x.com"), _candidate("k@x.com")]
        )

        assert result.results[0].status == "failed"
        assert result.results[0].message == "Server error"
        assert result.results[1].status == "success"
        assert result.created == 1

    def test_empty_batch(self, credentials):
        result = BulkRegisterUsersUseCase(RegisterUserUseCase(credentials)).execute([])
        assert result.results == []
        assert result.created == 0

    def test_invalid_entry_fails_without_touching_the_store(self):
        register = MagicMock()
        register.execute.return_value = MagicMock(error=None)

        result = BulkRegisterUsersUseCase(register).execute(
            [
                _candidate("g@x.com"),
                InvalidRegistration(email="bad@x.com", message="dob: Input should be a valid date"),
                _candidate("k@x.com"),
            ]
        )

        assert [(item.email, item.status) for item in result.results] == [
            ("g@x.com", "success"),
            ("bad@x.com", "failed"),
            ("k@x.com", "success"),
        ]
        assert result.results[1].message == "dob: Input should be a valid date"
        assert register.execute.call_count == 2
        assert result.created == 2

    def test_summary_is_logged(self, credentials, caplog):
        use_case = BulkRegisterUsersUseCase(RegisterUserUseCase(credentials))

        with caplog.at_level("INFO", logger="user-service"):
            use_case.execute([_candidate("g@x.com"), _candidate("bad-email")])

        summary = [r for r in caplog.records if r.getMessage() == "bulk registration complete"]
        assert len(summary) == 1
        assert summary[0].total == 2
        assert summary[0].created_count == 1
