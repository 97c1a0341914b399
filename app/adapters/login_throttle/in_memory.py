"""In-memory failed-login throttle.

Notes:
- Per-process only: running multiple workers gives each worker its own table.
- Thread-safe: every read-modify-write on the table happens under one lock.
- Expiry is lazy. A lockout ends at the first check that observes the window
  has elapsed; there is no background sweep.
- The table is unbounded. An identifier stays tracked until it logs in
  successfully or its lockout expires during a check.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import replace
from typing import Callable

from app.adapters.login_throttle.base import (
    LOCKOUT_SECONDS,
    MAX_FAILURES,
    AbstractLoginThrottle,
    Allowed,
    AttemptRecord,
    Blocked,
    ThrottleOutcome,
    normalize_identifier,
)

logger = logging.getLogger(__name__)


class InMemoryLoginThrottle(AbstractLoginThrottle):
    """Login throttle keeping one AttemptRecord per identifier in a dict.

    After ``MAX_FAILURES`` consecutive failures the identifier is blocked for
    ``LOCKOUT_SECONDS`` measured from the last failure.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty throttle.

        Args:
            clock: Time source returning seconds. Only differences between
                readings are used.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._records: dict[str, AttemptRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def check(self, identifier: str) -> ThrottleOutcome:
        key = normalize_identifier(identifier)

        with self._lock:
            record = self._records.get(key)
            if record is None or record.failure_count < MAX_FAILURES:
                return Allowed(prior_failures=record.failure_count if record else 0)

            elapsed = self._clock() - record.last_failure_at
            if elapsed < LOCKOUT_SECONDS:
                remaining_minutes = math.ceil((LOCKOUT_SECONDS - elapsed) / 60)
                return Blocked(remaining_minutes=remaining_minutes)

            del self._records[key]

        logger.info(
            "login_throttle.lockout_expired",
            extra={"failure_count": record.failure_count},
        )
        return Allowed(prior_failures=0)

    def record_failure(self, identifier: str) -> None:
        key = normalize_identifier(identifier)

        with self._lock:
            now = self._clock()
            record = self._records.get(key)
            if record is None:
                record = AttemptRecord(identifier=key, failure_count=0, last_failure_at=now)
                self._records[key] = record
            record.failure_count += 1
            record.last_failure_at = now
            failure_count = record.failure_count

        if failure_count == MAX_FAILURES:
            logger.warning(
                "login_throttle.lockout_started",
                extra={
                    "failure_count": failure_count,
                    "lockout_s": LOCKOUT_SECONDS,
                },
            )

    def record_success(self, identifier: str) -> None:
        key = normalize_identifier(identifier)

        with self._lock:
            self._records.pop(key, None)

    def get_record(self, identifier: str) -> AttemptRecord | None:
        key = normalize_identifier(identifier)

        with self._lock:
            record = self._records.get(key)
            return replace(record) if record is not None else None
