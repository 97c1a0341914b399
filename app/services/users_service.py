"""User management service: listing, CRUD and password changes."""

from __future__ import annotations

import logging
import math
from typing import cast

from app.adapters.users.base import AbstractUserRepository, SearchField, SortField, UserQuery, UserRecord
from app.core.config import settings
from app.core.errors import (
    AuthenticationAppError,
    NotFoundAppError,
    ValidationAppError,
)
from app.schemas.users import UserListResponse, UserResponse
from app.utils.passwords import MAX_PASSWORD_BYTES, hash_password, verify_password

logger = logging.getLogger(__name__)

_LISTABLE_FIELDS = ("name", "email")


def parse_sort(sort: str | None) -> tuple[SortField, bool]:
    """Parse a ``field:direction`` sort expression.

    A bare direction (``"desc"``) sorts by name. Whitespace around the colon
    is ignored.

    Returns:
        Tuple of (field, descending).

    Raises:
        ValidationAppError: If the field or direction is unknown.
    """
    if not sort:
        return "name", False

    field_name, _, direction = (part.strip().lower() for part in sort.partition(":"))
    if not direction and field_name in ("asc", "desc"):
        field_name, direction = "name", field_name

    if field_name not in _LISTABLE_FIELDS:
        raise ValidationAppError(
            code="invalid_sort_field",
            message=f"Cannot sort by '{field_name}'. Use one of: name, email.",
            details={"field": "sort"},
        )
    if direction not in ("", "asc", "desc"):
        raise ValidationAppError(
            code="invalid_sort_direction",
            message="Sort direction must be 'asc' or 'desc'.",
            details={"field": "sort"},
        )
    return cast(SortField, field_name), direction == "desc"


def parse_search(search: str | None) -> tuple[SearchField | None, str | None]:
    """Parse a ``field:value`` search expression.

    Raises:
        ValidationAppError: If the expression is malformed or the field unknown.
    """
    if not search:
        return None, None

    field_name, sep, value = search.partition(":")
    field_name = field_name.strip().lower()
    value = value.strip()
    if not sep or not value:
        raise ValidationAppError(
            code="invalid_search",
            message="Search must look like 'field:value'.",
            details={"field": "search"},
        )
    if field_name not in _LISTABLE_FIELDS:
        raise ValidationAppError(
            code="invalid_search_field",
            message=f"Cannot search by '{field_name}'. Use one of: name, email.",
            details={"field": "search"},
        )
    return cast(SearchField, field_name), value


class UsersService:
    """Business rules around the user repository."""

    def __init__(self, users: AbstractUserRepository) -> None:
        self._users = users

    def list_users(
        self,
        *,
        page_number: int = 1,
        page_size: int | None = None,
        sort: str | None = None,
        search: str | None = None,
    ) -> UserListResponse:
        """Return one page of users.

        ``page_size=0`` returns every match on a single page.
        """
        if page_size is None:
            page_size = settings.app.default_page_size
        if page_number < 1:
            raise ValidationAppError(
                code="invalid_page_number",
                message="page_number must be >= 1",
                details={"field": "page_number"},
            )
        if page_size < 0 or page_size > settings.app.max_page_size:
            raise ValidationAppError(
                code="invalid_page_size",
                message=f"page_size must be between 0 and {settings.app.max_page_size}",
                details={"field": "page_size"},
            )

        sort_field, descending = parse_sort(sort)
        search_field, search_value = parse_search(search)

        query = UserQuery(
            search_field=search_field,
            search_value=search_value,
            sort_field=sort_field,
            descending=descending,
            offset=0 if page_size == 0 else (page_number - 1) * page_size,
            limit=None if page_size == 0 else page_size,
        )
        users, total = self._users.list_users(query)

        if page_size == 0:
            total_pages = 1 if total else 0
        else:
            total_pages = math.ceil(total / page_size)

        return UserListResponse(
            page_number=page_number,
            page_size=page_size,
            count=total,
            total_pages=total_pages,
            has_previous_page=page_number > 1,
            has_next_page=page_number < total_pages,
            data=[UserResponse.from_record(u) for u in users],
        )

    def get_user(self, user_id: str) -> UserResponse:
        return UserResponse.from_record(self._require_user(user_id))

    def create_user(self, *, name: str, email: str, password: str, password_confirm: str) -> UserResponse:
        """Create a user.

        Raises:
            ValidationAppError: If the password is rejected.
            ConflictAppError: If the email is already registered (raised by
                the repository, which owns uniqueness).
        """
        self._validate_new_password(password, password_confirm)
        password_hash = hash_password(password)

        user = self._users.create_user(
            name=name.strip(),
            email=email.strip().lower(),
            password_hash=password_hash,
        )
        logger.info("users.created", extra={"user_id": user.id})
        return UserResponse.from_record(user)

    def update_user(self, user_id: str, *, name: str, email: str) -> UserResponse:
        if not self._users.update_user(user_id, name=name.strip(), email=email.strip().lower()):
            raise self._not_found(user_id)
        logger.info("users.updated", extra={"user_id": user_id})
        return UserResponse.from_record(self._require_user(user_id))

    def delete_user(self, user_id: str) -> None:
        if not self._users.delete_user(user_id):
            raise self._not_found(user_id)
        logger.info("users.deleted", extra={"user_id": user_id})

    def change_password(
        self,
        user_id: str,
        *,
        password_old: str,
        password_new: str,
        password_confirm: str,
    ) -> None:
        """Replace a user's password after checking the current one.

        Raises:
            NotFoundAppError: If the user does not exist.
            AuthenticationAppError: If password_old is wrong.
            ValidationAppError: If the new password is rejected.
        """
        user = self._require_user(user_id)
        if not verify_password(password_old, user.password_hash):
            logger.warning("users.password_change_rejected", extra={"user_id": user_id})
            raise AuthenticationAppError(
                code="invalid_password",
                message="Wrong password",
            )
        self._validate_new_password(password_new, password_confirm)

        self._users.change_password(user_id, hash_password(password_new))
        logger.info("users.password_changed", extra={"user_id": user_id})

    def _require_user(self, user_id: str) -> UserRecord:
        user = self._users.get_user(user_id)
        if user is None:
            raise self._not_found(user_id)
        return user

    def _validate_new_password(self, password: str, confirm: str) -> None:
        min_length = settings.app.password_min_length
        if len(password) < min_length:
            raise ValidationAppError(
                code="password_too_short",
                message=f"Password must be at least {min_length} characters",
                details={"field": "password", "min_length": min_length},
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationAppError(
                code="password_too_long",
                message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
                details={"field": "password", "max_bytes": MAX_PASSWORD_BYTES},
            )
        if password != confirm:
            raise ValidationAppError(
                code="password_mismatch",
                message="Password confirmation mismatched",
                details={"field": "password_confirm"},
            )

    @staticmethod
    def _not_found(user_id: str) -> NotFoundAppError:
        return NotFoundAppError(
            code="user_not_found",
            message="Unknown user",
            details={"user_id": user_id},
        )
