"""User repository interface and record type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

SortField = Literal["name", "email"]
SearchField = Literal["name", "email"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UserRecord:
    """Stored user document.

    Attributes:
        id: Opaque document id.
        name: Display name.
        email: Lowercased, unique login identifier.
        password_hash: bcrypt hash of the user's password.
        is_active: Inactive users cannot log in.
        registration_date: Creation time (UTC).
        last_login: Time of the last successful login, if any.
    """

    id: str
    name: str
    email: str
    password_hash: str
    is_active: bool = True
    registration_date: datetime = field(default_factory=_utcnow)
    last_login: datetime | None = None


@dataclass(frozen=True)
class UserQuery:
    """Filter, sort and window applied to a user listing.

    ``limit=None`` returns every match after ``offset``.
    """

    search_field: SearchField | None = None
    search_value: str | None = None
    sort_field: SortField = "name"
    descending: bool = False
    offset: int = 0
    limit: int | None = None


class AbstractUserRepository(ABC):
    """Interface for user persistence backends."""

    @abstractmethod
    def list_users(self, query: UserQuery) -> tuple[list[UserRecord], int]:
        """Return one window of matching users plus the total match count."""
        raise NotImplementedError

    @abstractmethod
    def get_user(self, user_id: str) -> UserRecord | None:
        raise NotImplementedError

    @abstractmethod
    def get_user_by_email(self, email: str) -> UserRecord | None:
        raise NotImplementedError

    @abstractmethod
    def create_user(self, *, name: str, email: str, password_hash: str) -> UserRecord:
        """Insert a user.

        Raises:
            ConflictAppError: If another user already has the email.
        """
        raise NotImplementedError

    @abstractmethod
    def update_user(self, user_id: str, *, name: str, email: str) -> bool:
        """Update name and email. Returns False when the user does not exist.

        Raises:
            ConflictAppError: If another user already has the email.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_user(self, user_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def change_password(self, user_id: str, password_hash: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mark_login(self, user_id: str, at: datetime) -> None:
        """Stamp ``last_login`` after a successful authentication."""
        raise NotImplementedError
