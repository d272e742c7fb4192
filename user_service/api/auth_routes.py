"""
Name: Auth Routes

Responsibilities:
  - register / login / logout
  - Password reset: request a link, confirm with the emailed token
  - Manage the httpOnly session cookie

Collaborators:
  - container: use case factories
  - api/dependencies.rate_limit: per-client gate on both reset endpoints
  - api/error_mapping.raise_account_error: typed result -> HTTP

Notes:
  - Handlers are plain `def`; FastAPI runs them in its threadpool
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from ..application.usecases import (
    ConfirmPasswordResetInput,
    ConfirmPasswordResetUseCase,
    LoginUserInput,
    LoginUserUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    RequestPasswordResetUseCase,
)
from ..container import (
    get_confirm_password_reset_use_case,
    get_login_user_use_case,
    get_register_user_use_case,
    get_request_password_reset_use_case,
)
from ..crosscutting.config import get_settings
from ..crosscutting.rate_limit import RateLimitBucket
from ..identity.auth_users import session_cookie_name
from .dependencies import rate_limit
from .error_mapping import raise_account_error
from .schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RequestResetRequest,
    ResetPasswordRequest,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


# -----------------------------------------------------------------------------
# Cookie helpers
# -----------------------------------------------------------------------------


def _set_session_cookie(response: Response, token: str, max_age: int) -> None:
    response.set_cookie(
        key=session_cookie_name(),
        value=token,
        httponly=True,
        secure=get_settings().cookie_secure(),
        samesite="strict",
        max_age=max_age,
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=session_cookie_name(),
        path="/",
        httponly=True,
        secure=get_settings().cookie_secure(),
        samesite="strict",
    )


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    req: RegisterRequest,
    use_case: RegisterUserUseCase = Depends(get_register_user_use_case),
):
    result = use_case.execute(
        RegisterUserInput(
            first_name=req.first_name,
            last_name=req.last_name,
            email=req.email,
            password=req.password,
            dob=req.dob,
            role=req.role,
        )
    )
    if result.error is not None:
        raise_account_error(result.error)
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=LoginResponse)
def login(
    req: LoginRequest,
    response: Response,
    use_case: LoginUserUseCase = Depends(get_login_user_use_case),
):
    """Verify credentials, set the session cookie and return the token."""
    result = use_case.execute(LoginUserInput(email=req.email, password=req.password))
    if result.error is not None:
        raise_account_error(result.error)

    _set_session_cookie(response, result.token, result.expires_in)
    return LoginResponse(
        message="Logged in successfully",
        access_token=result.token,
        expires_in=result.expires_in,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    """Always clears the cookie; idempotent and unauthenticated."""
    _clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/request-reset",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit(RateLimitBucket.REQUEST_RESET))],
)
def request_reset(
    req: RequestResetRequest,
    use_case: RequestPasswordResetUseCase = Depends(
        get_request_password_reset_use_case
    ),
):
    result = use_case.execute(req.email)
    if result.error is not None:
        raise_account_error(result.error)
    return MessageResponse(message="Password reset link sent to your email")


@router.put(
    "/reset-password",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit(RateLimitBucket.CONFIRM_RESET))],
)
def reset_password(
    req: ResetPasswordRequest,
    token: str | None = Query(default=None),
    use_case: ConfirmPasswordResetUseCase = Depends(
        get_confirm_password_reset_use_case
    ),
):
    result = use_case.execute(
        ConfirmPasswordResetInput(token=token, new_password=req.password)
    )
    if result.error is not None:
        raise_account_error(result.error)
    return MessageResponse(message="Password successfully updated")
