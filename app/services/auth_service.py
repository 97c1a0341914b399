"""Login orchestration around the failed-login throttle.

One login attempt runs the guard protocol end to end:
1. Ask the throttle whether the email is locked out.
2. Only when allowed, verify the credentials.
3. Report the outcome back to the throttle before returning or raising.

The throttle state is committed before any error leaves this module, so a
caller that turns ``InvalidCredentialsError`` into a response never races the
bookkeeping.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone

from app.adapters.credentials.base import AbstractCredentialVerifier
from app.adapters.login_throttle.base import AbstractLoginThrottle, Blocked, normalize_identifier
from app.adapters.users.base import AbstractUserRepository
from app.core.errors import InvalidCredentialsError, TooManyAttemptsError, ValidationAppError
from app.schemas.auth import LoginResponse

logger = logging.getLogger(__name__)


def _hash_identifier(identifier: str) -> str:
    """Hash an identifier for logging without exposing the email."""
    return hashlib.sha256(identifier.encode()).hexdigest()[:16]


class AuthService:
    """Authenticates users while enforcing the failed-login lockout."""

    def __init__(
        self,
        *,
        throttle: AbstractLoginThrottle,
        verifier: AbstractCredentialVerifier,
        users: AbstractUserRepository | None = None,
    ) -> None:
        self._throttle = throttle
        self._verifier = verifier
        self._users = users

    def login(self, email: str, password: str) -> LoginResponse:
        """Attempt a login.

        Args:
            email: Account email; matched case-insensitively.
            password: Plain-text password.

        Returns:
            LoginResponse carrying the failure count seen before this success.

        Raises:
            ValidationAppError: If email is empty.
            TooManyAttemptsError: If the email is currently locked out.
            InvalidCredentialsError: If verification fails (failure recorded).
        """
        if not email:
            raise ValidationAppError(code="missing_email", message="Email is required")

        identifier = normalize_identifier(email)
        identifier_hash = _hash_identifier(identifier)

        outcome = self._throttle.check(identifier)
        if isinstance(outcome, Blocked):
            logger.warning(
                "auth.login.blocked",
                extra={
                    "identifier_hash": identifier_hash,
                    "retry_after_minutes": outcome.remaining_minutes,
                },
            )
            raise TooManyAttemptsError(outcome.remaining_minutes)

        if not self._verifier.verify(identifier, password):
            self._throttle.record_failure(identifier)
            logger.info(
                "auth.login.failed",
                extra={
                    "identifier_hash": identifier_hash,
                    "prior_failures": outcome.prior_failures,
                },
            )
            raise InvalidCredentialsError()

        self._throttle.record_success(identifier)
        self._stamp_last_login(identifier)
        logger.info(
            "auth.login.succeeded",
            extra={
                "identifier_hash": identifier_hash,
                "recently_failed_attempts": outcome.prior_failures,
            },
        )
        return LoginResponse(recently_failed_attempts=outcome.prior_failures)

    def _stamp_last_login(self, identifier: str) -> None:
        if self._users is None:
            return
        user = self._users.get_user_by_email(identifier)
        if user is not None:
            self._users.mark_login(user.id, datetime.now(timezone.utc))
