"""
Name: API Test Fixtures

Notes:
  - Use case factories are overridden with fixture-built instances so the
    whole app shares one in-memory repository and the fake clock
  - TestClient is used without a context manager: no lifespan, no DB pool
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from user_service import container
from user_service.api.main import create_app
from user_service.application.usecases import (
    BulkRegisterUsersUseCase,
    ConfirmPasswordResetUseCase,
    DeleteUserUseCase,
    ListUsersUseCase,
    LoginUserUseCase,
    RegisterUserUseCase,
    RequestPasswordResetUseCase,
    UpdateProfileUseCase,
)


@pytest.fixture
def app(credentials, repository, tokens, notifier, limiter, clock):
    application = create_app()
    register = RegisterUserUseCase(credentials)
    overrides = {
        container.get_token_service: lambda: tokens,
        container.get_rate_limiter: lambda: limiter,
        container.get_register_user_use_case: lambda: register,
        container.get_login_user_use_case: lambda: LoginUserUseCase(
            credentials, tokens, access_ttl=timedelta(hours=24)
        ),
        container.get_request_password_reset_use_case: lambda: RequestPasswordResetUseCase(
            credentials,
            tokens,
            notifier,
            reset_url_base="http://localhost:5000/reset-password",
            clock=clock,
        ),
        container.get_confirm_password_reset_use_case: lambda: ConfirmPasswordResetUseCase(
            credentials, tokens, clock=clock
        ),
        container.get_update_profile_use_case: lambda: UpdateProfileUseCase(
            repository, clock=clock
        ),
        container.get_list_users_use_case: lambda: ListUsersUseCase(repository),
        container.get_delete_user_use_case: lambda: DeleteUserUseCase(repository),
        container.get_bulk_register_users_use_case: lambda: BulkRegisterUsersUseCase(
            register
        ),
    }
    application.dependency_overrides.update(overrides)
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)

