from .account_results import (
    AccountError,
    AccountErrorCode,
    AccountResult,
    BulkRegistrationItem,
    BulkRegistrationResult,
    LoginResult,
    UserListResult,
)
from .bulk_register_users import BulkRegisterUsersUseCase, InvalidRegistration
from .confirm_password_reset import ConfirmPasswordResetInput, ConfirmPasswordResetUseCase
from .login_user import LoginUserInput, LoginUserUseCase
from .manage_users import DeleteUserUseCase, ListUsersUseCase
from .register_user import RegisterUserInput, RegisterUserUseCase
from .request_password_reset import RequestPasswordResetUseCase, ResetPolicy
from .update_profile import UpdateProfileInput, UpdateProfileUseCase

__all__ = [
    "AccountError",
    "AccountErrorCode",
    "AccountResult",
    "BulkRegistrationItem",
    "BulkRegistrationResult",
    "LoginResult",
    "UserListResult",
    "BulkRegisterUsersUseCase",
    "InvalidRegistration",
    "ConfirmPasswordResetInput",
    "ConfirmPasswordResetUseCase",
    "LoginUserInput",
    "LoginUserUseCase",
    "DeleteUserUseCase",
    "ListUsersUseCase",
    "RegisterUserInput",
    "RegisterUserUseCase",
    "RequestPasswordResetUseCase",
    "ResetPolicy",
    "UpdateProfileInput",
    "UpdateProfileUseCase",
]
