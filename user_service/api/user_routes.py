"""
Name: User Routes

Responsibilities:
  - Self-service profile (read from the session, partial update)
  - Admin-only administration: list, delete, bulk register

Collaborators:
  - identity/auth_users: protect / require_role gates
  - container: use case factories
"""

from __future__ import annotations

from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from ..application.usecases import (
    BulkRegisterUsersUseCase,
    DeleteUserUseCase,
    InvalidRegistration,
    ListUsersUseCase,
    RegisterUserInput,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from ..container import (
    get_bulk_register_users_use_case,
    get_delete_user_use_case,
    get_list_users_use_case,
    get_update_profile_use_case,
)
from ..crosscutting.error_responses import not_found
from ..domain.entities import UserRole
from ..identity.auth_users import protect, require_role
from ..identity.tokens import TokenClaims
from .error_mapping import raise_account_error
from .schemas import (
    BulkRegistrationItemResponse,
    BulkRegistrationResponse,
    MessageResponse,
    ProfileResponse,
    ProfileUpdateResponse,
    RegisterRequest,
    UpdateProfileRequest,
    UserResponse,
)

router = APIRouter(prefix="/api/users", tags=["users"])

_require_admin = require_role([UserRole.ADMIN])


def _principal_id(principal: TokenClaims) -> UUID:
    try:
        return UUID(principal.subject_id)
    except ValueError:
        # R: a signed token naming no valid account
        raise not_found("User not found")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(principal: TokenClaims = Depends(protect())):
    return ProfileResponse(
        id=principal.subject_id,
        role=principal.role,
        message="This is your profile",
    )


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(
    req: UpdateProfileRequest,
    principal: TokenClaims = Depends(protect()),
    use_case: UpdateProfileUseCase = Depends(get_update_profile_use_case),
):
    result = use_case.execute(
        UpdateProfileInput(
            user_id=_principal_id(principal),
            first_name=req.first_name,
            last_name=req.last_name,
            email=req.email,
            dob=req.dob,
        )
    )
    if result.error is not None:
        raise_account_error(result.error)
    return ProfileUpdateResponse(
        message="Profile updated", user=UserResponse.from_user(result.user)
    )


@router.get(
    "",
    response_model=List[UserResponse],
    dependencies=[Depends(_require_admin)],
)
def list_users(use_case: ListUsersUseCase = Depends(get_list_users_use_case)):
    result = use_case.execute()
    return [UserResponse.from_user(user) for user in result.users]


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(_require_admin)],
)
def delete_user(
    user_id: UUID,
    use_case: DeleteUserUseCase = Depends(get_delete_user_use_case),
):
    result = use_case.execute(user_id)
    if result.error is not None:
        raise_account_error(result.error)
    return MessageResponse(message="User removed successfully")


def _parse_bulk_item(raw: Any) -> RegisterUserInput | InvalidRegistration:
    """R: One malformed entry becomes a failed result, never a 400 for the batch."""
    email = raw.get("email") if isinstance(raw, dict) else None
    email = email if isinstance(email, str) else ""
    try:
        item = RegisterRequest.model_validate(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{field}: {first['msg']}" if field else first["msg"]
        return InvalidRegistration(email=email, message=message)

    return RegisterUserInput(
        first_name=item.first_name,
        last_name=item.last_name,
        email=item.email,
        password=item.password,
        dob=item.dob,
        role=item.role,
    )


@router.post(
    "/bulk-register",
    response_model=BulkRegistrationResponse,
    dependencies=[Depends(_require_admin)],
)
def bulk_register(
    items: List[Any] = Body(...),
    use_case: BulkRegisterUsersUseCase = Depends(get_bulk_register_users_use_case),
):
    result = use_case.execute(_parse_bulk_item(raw) for raw in items)
    return BulkRegistrationResponse(
        message="Bulk user registration complete",
        results=[
            BulkRegistrationItemResponse(
                email=item.email, status=item.status, message=item.message
            )
            for item in result.results
        ],
    )
