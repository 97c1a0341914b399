from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.auth import require_admin_key
from app.core.container import get_users_service
from app.schemas.users import (
    PasswordChangeRequest,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)
from app.services.users_service import UsersService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_admin_key)],
)

UsersServiceDep = Annotated[UsersService, Depends(get_users_service)]


@router.get("", response_model=UserListResponse)
def list_users(
    users_service: UsersServiceDep,
    page_number: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int | None, Query(ge=0, description="0 returns every match")] = None,
    sort: Annotated[str | None, Query(description="field:asc|desc, field is name or email")] = None,
    search: Annotated[str | None, Query(description="field:value, field is name or email")] = None,
) -> UserListResponse:
    """List users with pagination, sorting and substring search."""
    return users_service.list_users(
        page_number=page_number,
        page_size=page_size,
        sort=sort,
        search=search,
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, users_service: UsersServiceDep) -> UserResponse:
    return users_service.get_user(user_id)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreateRequest, users_service: UsersServiceDep) -> UserResponse:
    """Create a user. Emails are stored lowercased and must be unique."""
    return users_service.create_user(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        password_confirm=payload.password_confirm,
    )


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    users_service: UsersServiceDep,
) -> UserResponse:
    return users_service.update_user(user_id, name=payload.name, email=payload.email)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, users_service: UsersServiceDep) -> Response:
    users_service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    user_id: str,
    payload: PasswordChangeRequest,
    users_service: UsersServiceDep,
) -> Response:
    """Change a user's password; the current password must be supplied."""
    users_service.change_password(
        user_id,
        password_old=payload.password_old,
        password_new=payload.password_new,
        password_confirm=payload.password_confirm,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
