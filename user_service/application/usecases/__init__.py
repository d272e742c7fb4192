from .accounts import (
    AccountError,
    AccountErrorCode,
    AccountResult,
    BulkRegisterUsersUseCase,
    BulkRegistrationItem,
    BulkRegistrationResult,
    ConfirmPasswordResetInput,
    ConfirmPasswordResetUseCase,
    DeleteUserUseCase,
    InvalidRegistration,
    ListUsersUseCase,
    LoginResult,
    LoginUserInput,
    LoginUserUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    RequestPasswordResetUseCase,
    ResetPolicy,
    UpdateProfileInput,
    UpdateProfileUseCase,
    UserListResult,
)

__all__ = [
    "AccountError",
    "AccountErrorCode",
    "AccountResult",
    "BulkRegisterUsersUseCase",
    "BulkRegistrationItem",
    "BulkRegistrationResult",
    "ConfirmPasswordResetInput",
    "ConfirmPasswordResetUseCase",
    "DeleteUserUseCase",
    "InvalidRegistration",
    "ListUsersUseCase",
    "LoginResult",
    "LoginUserInput",
    "LoginUserUseCase",
    "RegisterUserInput",
    "RegisterUserUseCase",
    "RequestPasswordResetUseCase",
    "ResetPolicy",
    "UpdateProfileInput",
    "UpdateProfileUseCase",
    "UserListResult",
]
