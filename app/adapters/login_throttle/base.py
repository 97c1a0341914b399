"""Login throttle interfaces and lockout policy.

A throttle tracks consecutive failed logins per account identifier and locks
the identifier out for a fixed window once the failure threshold is reached.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

MAX_FAILURES = 5
LOCKOUT_SECONDS = 30 * 60


def normalize_identifier(identifier: str) -> str:
    """Return the lowercase tracking key for an account identifier.

    Raises:
        ValueError: If identifier is empty.
    """
    if not identifier:
        raise ValueError("identifier must be a non-empty string")
    return identifier.lower()


@dataclass
class AttemptRecord:
    """Failure history of a single identifier.

    Attributes:
        identifier: Normalized account key.
        failure_count: Consecutive failures since the last success or reset.
        last_failure_at: Clock reading of the most recent failure.
    """

    identifier: str
    failure_count: int
    last_failure_at: float


@dataclass(frozen=True)
class Allowed:
    """The identifier may attempt verification.

    Attributes:
        prior_failures: Failures recorded before this attempt (0 after a reset).
    """

    prior_failures: int

    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True)
class Blocked:
    """The identifier is locked out.

    Attributes:
        remaining_minutes: Whole minutes left in the lockout, rounded up.
    """

    remaining_minutes: int

    @property
    def allowed(self) -> bool:
        return False


ThrottleOutcome = Allowed | Blocked


class AbstractLoginThrottle(ABC):
    """Interface for failed-login guards.

    Callers follow a fixed protocol per login attempt: ``check`` first, then
    verify credentials only when allowed, then report exactly one of
    ``record_failure`` or ``record_success``.
    """

    @abstractmethod
    def check(self, identifier: str) -> ThrottleOutcome:
        """Decide whether the identifier may attempt verification now.

        A lockout whose window has elapsed is cleared by this call, which then
        returns ``Allowed(0)``.
        """
        raise NotImplementedError

    @abstractmethod
    def record_failure(self, identifier: str) -> None:
        """Count one failed verification for the identifier."""
        raise NotImplementedError

    @abstractmethod
    def record_success(self, identifier: str) -> None:
        """Forget the identifier's failure history (no-op when there is none)."""
        raise NotImplementedError

    @abstractmethod
    def get_record(self, identifier: str) -> AttemptRecord | None:
        """Return a snapshot of the identifier's record, or None when clean."""
        raise NotImplementedError
