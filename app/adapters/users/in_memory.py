"""In-memory user document store.

Notes:
- Per-process only and not persisted; intended for development and tests.
- Thread-safe: uses a lock around shared state; email uniqueness is checked
  and written under the same lock.
- Returns copies so callers never mutate stored documents directly.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import datetime

from app.adapters.users.base import AbstractUserRepository, UserQuery, UserRecord
from app.core.errors import ConflictAppError


class InMemoryUserRepository(AbstractUserRepository):
    """Dict-backed user repository keyed by document id."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[str, UserRecord] = {}

    def _matches(self, user: UserRecord, query: UserQuery) -> bool:
        if not query.search_field or not query.search_value:
            return True
        haystack = getattr(user, query.search_field)
        return query.search_value.lower() in haystack.lower()

    def list_users(self, query: UserQuery) -> tuple[list[UserRecord], int]:
        with self._lock:
            matches = [u for u in self._users.values() if self._matches(u, query)]

        matches.sort(
            key=lambda u: getattr(u, query.sort_field).lower(),
            reverse=query.descending,
        )
        total = len(matches)

        end = None if query.limit is None else query.offset + query.limit
        window = matches[query.offset:end]
        return [replace(u) for u in window], total

    def get_user(self, user_id: str) -> UserRecord | None:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def get_user_by_email(self, email: str) -> UserRecord | None:
        email = email.lower()
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return replace(user)
        return None

    def _ensure_email_free_locked(self, email: str, *, owner_id: str | None = None) -> None:
        for user in self._users.values():
            if user.email == email and user.id != owner_id:
                raise ConflictAppError(
                    code="email_already_taken",
                    message="Email is already registered",
                    details={"field": "email"},
                )

    def create_user(self, *, name: str, email: str, password_hash: str) -> UserRecord:
        user = UserRecord(
            id=uuid.uuid4().hex,
            name=name,
            email=email.lower(),
            password_hash=password_hash,
        )
        with self._lock:
            self._ensure_email_free_locked(user.email)
            self._users[user.id] = user
        return replace(user)

    def update_user(self, user_id: str, *, name: str, email: str) -> bool:
        email = email.lower()
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            self._ensure_email_free_locked(email, owner_id=user_id)
            user.name = name
            user.email = email
            return True

    def delete_user(self, user_id: str) -> bool:
        with self._lock:
            return self._users.pop(user_id, None) is not None

    def change_password(self, user_id: str, password_hash: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return False
            user.password_hash = password_hash
            return True

    def mark_login(self, user_id: str, at: datetime) -> None:
        with self._lock:
            user = self._users.get(user_id)
            if user is not None:
                user.last_login = at
