"""Password verifier backed by the user repository."""

from __future__ import annotations

from app.adapters.credentials.base import AbstractCredentialVerifier
from app.adapters.users.base import AbstractUserRepository
from app.utils.passwords import verify_password


class PasswordCredentialVerifier(AbstractCredentialVerifier):
    """Verifies an email/password pair against stored bcrypt hashes.

    Inactive users never verify.
    """

    def __init__(self, users: AbstractUserRepository) -> None:
        self._users = users

    def verify(self, identifier: str, secret: str) -> bool:
        user = self._users.get_user_by_email(identifier)
        if user is None or not user.is_active:
            return False
        return verify_password(secret, user.password_hash)
