"""
Name: HTTP Schemas (DTOs)

Responsibilities:
  - Request/response models for the auth and user routes
  - camelCase on the wire (firstName, lastName, createdAt), snake_case in Python

Notes:
  - Request fields are loose on purpose: format rules live in
    domain/validation and run inside the use cases, so every rule yields
    the same {message} error shape
  - UserResponse never carries the password hash or the reset sub-state
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..domain.entities import User, UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class RegisterRequest(CamelModel):
    first_name: str = Field(default="", max_length=200)
    last_name: str = Field(default="", max_length=200)
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=512)
    dob: date | None = None
    role: UserRole = UserRole.USER


class LoginRequest(CamelModel):
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=512)


class RequestResetRequest(CamelModel):
    email: str = Field(default="", max_length=320)


class ResetPasswordRequest(CamelModel):
    password: str | None = Field(default=None, max_length=512)


class UpdateProfileRequest(CamelModel):
    first_name: str | None = Field(default=None, max_length=200)
    last_name: str | None = Field(default=None, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    dob: date | None = None


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class MessageResponse(CamelModel):
    message: str


class UserResponse(CamelModel):
    id: UUID
    first_name: str
    last_name: str
    email: str
    dob: date
    role: UserRole
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            dob=user.dob,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class LoginResponse(CamelModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class ProfileResponse(CamelModel):
    id: str
    role: UserRole
    message: str


class ProfileUpdateResponse(CamelModel):
    message: str
    user: UserResponse


class BulkRegistrationItemResponse(CamelModel):
    email: str
    status: str
    message: str


class BulkRegistrationResponse(CamelModel):
    message: str
    results: List[BulkRegistrationItemResponse]
