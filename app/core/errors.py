"""Application-level exception types.

Domain errors raised by services and adapters. The HTTP layer maps each class
to a status code in ``app.core.exception_handlers``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    field: str
    retry_after_minutes: int
    min_length: int
    max_bytes: int
    user_id: str


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input validation fails."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class TooManyAttemptsError(AuthenticationAppError):
    """Raised when an identifier is locked out after repeated login failures."""

    def __init__(self, remaining_minutes: int) -> None:
        super().__init__(
            code="too_many_attempts",
            message=(
                "Too many failed login attempts. "
                f"Wait {remaining_minutes} minutes."
            ),
            details={"retry_after_minutes": remaining_minutes},
        )
        self.remaining_minutes = remaining_minutes


class InvalidCredentialsError(AppError):
    """Raised when an email/password pair does not verify."""

    def __init__(self) -> None:
        super().__init__(
            code="invalid_credentials",
            message="Wrong email or password",
        )


class NotFoundAppError(AppError):
    """Raised when a requested resource does not exist."""


class ConflictAppError(AppError):
    """Raised when a write would violate a uniqueness constraint."""
