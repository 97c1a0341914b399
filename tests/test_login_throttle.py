"""Unit tests for the in-memory login throttle."""

import threading

import pytest

from app.adapters.login_throttle.base import (
    LOCKOUT_SECONDS,
    MAX_FAILURES,
    Allowed,
    Blocked,
    normalize_identifier,
)
from app.adapters.login_throttle.in_memory import InMemoryLoginThrottle

EMAIL = "user@x.com"


def _fail(throttle: InMemoryLoginThrottle, times: int, identifier: str = EMAIL) -> None:
    for _ in range(times):
        assert throttle.check(identifier).allowed is True
        throttle.record_failure(identifier)


def test_unknown_identifier_is_allowed_with_zero_failures(throttle) -> None:
    assert throttle.check(EMAIL) == Allowed(prior_failures=0)
    assert throttle.get_record(EMAIL) is None


@pytest.mark.parametrize("failures", range(MAX_FAILURES))
def test_allowed_below_threshold(throttle, failures: int) -> None:
    _fail(throttle, failures)

    assert throttle.check(EMAIL) == Allowed(prior_failures=failures)


def test_fifth_attempt_after_four_failures_is_still_allowed(throttle) -> None:
    _fail(throttle, 4)

    outcome = throttle.check(EMAIL)

    assert outcome.allowed is True
    assert outcome.prior_failures == 4


def test_lockout_starts_after_fifth_failure(throttle) -> None:
    for expected_prior in range(MAX_FAILURES):
        assert throttle.check(EMAIL) == Allowed(prior_failures=expected_prior)
        throttle.record_failure(EMAIL)

    assert throttle.check(EMAIL) == Blocked(remaining_minutes=30)


def test_remaining_minutes_rounds_up(throttle, clock) -> None:
    _fail(throttle, MAX_FAILURES)

    clock.advance(29 * 60)
    assert throttle.check(EMAIL) == Blocked(remaining_minutes=1)

    clock.advance(59)
    assert throttle.check(EMAIL) == Blocked(remaining_minutes=1)

    clock.advance(0.5)
    assert throttle.check(EMAIL) == Blocked(remaining_minutes=1)


def test_remaining_minutes_never_increases_within_window(throttle, clock) -> None:
    _fail(throttle, MAX_FAILURES)

    previous = 30
    for _ in range(0, LOCKOUT_SECONDS, 37):
        outcome = throttle.check(EMAIL)
        assert isinstance(outcome, Blocked)
        assert 1 <= outcome.remaining_minutes <= 30
        assert outcome.remaining_minutes <= previous
        previous = outcome.remaining_minutes
        clock.advance(37)


def test_lockout_expires_exactly_at_window_end(throttle, clock) -> None:
    _fail(throttle, MAX_FAILURES)

    clock.advance(LOCKOUT_SECONDS)

    assert throttle.check(EMAIL) == Allowed(prior_failures=0)
    assert throttle.get_record(EMAIL) is None
    assert len(throttle) == 0


def test_failure_after_expiry_starts_new_count(throttle, clock) -> None:
    _fail(throttle, MAX_FAILURES)
    clock.advance(LOCKOUT_SECONDS + 1)

    assert throttle.check(EMAIL).allowed is True
    throttle.record_failure(EMAIL)

    record = throttle.get_record(EMAIL)
    assert record is not None
    assert record.failure_count == 1


def test_expiry_is_lazy_until_checked(throttle, clock) -> None:
    _fail(throttle, MAX_FAILURES)
    clock.advance(LOCKOUT_SECONDS * 2)

    record = throttle.get_record(EMAIL)
    assert record is not None
    assert record.failure_count == MAX_FAILURES


def test_success_clears_record_regardless_of_count(throttle) -> None:
    _fail(throttle, 3)

    throttle.record_success(EMAIL)
    assert throttle.get_record(EMAIL) is None

    throttle.record_failure(EMAIL)
    record = throttle.get_record(EMAIL)
    assert record is not None
    assert record.failure_count == 1


def test_success_without_record_is_noop(throttle) -> None:
    throttle.record_success(EMAIL)
    throttle.record_success(EMAIL)

    assert throttle.get_record(EMAIL) is None


def test_record_failure_refreshes_timestamp(throttle, clock) -> None:
    throttle.record_failure(EMAIL)
    first = throttle.get_record(EMAIL)
    clock.advance(120)
    throttle.record_failure(EMAIL)
    second = throttle.get_record(EMAIL)

    assert first is not None and second is not None
    assert second.last_failure_at - first.last_failure_at == 120
    assert second.failure_count == 2


def test_lockout_window_measured_from_last_failure(throttle, clock) -> None:
    _fail(throttle, MAX_FAILURES - 1)
    clock.advance(10 * 60)
    throttle.record_failure(EMAIL)

    clock.advance(25 * 60)
    assert throttle.check(EMAIL) == Blocked(remaining_minutes=5)


def test_identifiers_are_case_insensitive(throttle) -> None:
    _fail(throttle, MAX_FAILURES, identifier="User@X.COM")

    assert isinstance(throttle.check("user@x.com"), Blocked)
    throttle.record_success("USER@x.com")
    assert throttle.check("user@x.com") == Allowed(prior_failures=0)


def test_identifiers_are_isolated(throttle) -> None:
    _fail(throttle, MAX_FAILURES)

    assert isinstance(throttle.check(EMAIL), Blocked)
    assert throttle.check("other@x.com") == Allowed(prior_failures=0)


def test_get_record_returns_snapshot(throttle) -> None:
    throttle.record_failure(EMAIL)
    snapshot = throttle.get_record(EMAIL)
    assert snapshot is not None

    snapshot.failure_count = 99

    assert throttle.get_record(EMAIL).failure_count == 1


def test_empty_identifier_rejected(throttle) -> None:
    with pytest.raises(ValueError):
        throttle.check("")
    with pytest.raises(ValueError):
        normalize_identifier("")


def test_concurrent_failures_are_not_lost(throttle) -> None:
    threads_count = 2
    iterations = 500
    barrier = threading.Barrier(threads_count)

    def _worker() -> None:
        barrier.wait()
        for _ in range(iterations):
            throttle.record_failure(EMAIL)

    threads = [threading.Thread(target=_worker) for _ in range(threads_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    record = throttle.get_record(EMAIL)
    assert record is not None
    assert record.failure_count == threads_count * iterations


def test_two_parallel_failures_both_counted(throttle) -> None:
    barrier = threading.Barrier(2)

    def _worker() -> None:
        barrier.wait()
        throttle.record_failure(EMAIL)

    threads = [threading.Thread(target=_worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert throttle.get_record(EMAIL).failure_count == 2
