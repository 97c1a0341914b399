"""Pydantic schemas for user management requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from app.adapters.users.base import UserRecord


class UserCreateRequest(BaseModel):
    """Payload for creating a user."""

    name: str = Field(..., min_length=1, max_length=200, description="Display name.")
    email: str = Field(..., min_length=3, max_length=320, description="Unique login email.")
    password: str = Field(..., min_length=1, description="Initial password.")
    password_confirm: str = Field(..., description="Must equal password.")


class UserUpdateRequest(BaseModel):
    """Payload for updating a user's profile."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)


class PasswordChangeRequest(BaseModel):
    """Payload for changing a user's password."""

    password_old: str = Field(..., min_length=1, description="Current password.")
    password_new: str = Field(..., min_length=1, description="Replacement password.")
    password_confirm: str = Field(..., description="Must equal password_new.")


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)."""

    id: str
    name: str
    email: str
    is_active: bool
    registration_date: datetime
    last_login: datetime | None = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            is_active=user.is_active,
            registration_date=user.registration_date,
            last_login=user.last_login,
        )


class UserListResponse(BaseModel):
    """One page of the user listing."""

    page_number: int = Field(..., ge=1)
    page_size: int = Field(..., ge=0, description="0 means the page holds every match.")
    count: int = Field(..., ge=0, description="Total number of matching users.")
    total_pages: int = Field(..., ge=0)
    has_previous_page: bool
    has_next_page: bool
    data: List[UserResponse] = Field(default_factory=list)
