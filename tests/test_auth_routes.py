"""HTTP tests for the login endpoint and its lockout responses."""

import pytest
from fastapi.testclient import TestClient

from app.adapters.login_throttle.base import LOCKOUT_SECONDS, MAX_FAILURES

EMAIL = "user@x.com"
PASSWORD = "secret-pass"


@pytest.fixture
def registered_user(container):
    return container.users_service.create_user(
        name="Test User",
        email=EMAIL,
        password=PASSWORD,
        password_confirm=PASSWORD,
    )


def _login(client: TestClient, password: str, email: str = EMAIL):
    return client.post(
        "/v1/authentication/login",
        json={"email": email, "password": password},
    )


def test_login_success(client, registered_user) -> None:
    resp = _login(client, PASSWORD)

    assert resp.status_code == 200
    assert resp.json() == {
        "success_login": True,
        "message": "Login successful",
        "recently_failed_attempts": 0,
    }


def test_login_stamps_last_login(client, container, registered_user) -> None:
    assert registered_user.last_login is None

    _login(client, PASSWORD)

    assert container.users_service.get_user(registered_user.id).last_login is not None


def test_wrong_password_returns_401(client, registered_user) -> None:
    resp = _login(client, "nope")

    assert resp.status_code == 401
    error = resp.json()["error"]
    assert error["code"] == "invalid_credentials"
    assert error["message"] == "Wrong email or password"
    assert "details" not in error


def test_unknown_email_returns_401(client) -> None:
    resp = _login(client, PASSWORD, email="ghost@x.com")

    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "invalid_credentials"


def test_success_after_failures_reports_count(client, registered_user) -> None:
    for _ in range(3):
        assert _login(client, "nope").status_code == 401

    resp = _login(client, PASSWORD)

    assert resp.status_code == 200
    assert resp.json()["recently_failed_attempts"] == 3

    _login(client, "nope")
    assert _login(client, PASSWORD).json()["recently_failed_attempts"] == 1


def test_lockout_after_five_failures(client, registered_user) -> None:
    for _ in range(MAX_FAILURES):
        assert _login(client, "nope").status_code == 401

    resp = _login(client, PASSWORD)

    assert resp.status_code == 403
    error = resp.json()["error"]
    assert error["code"] == "too_many_attempts"
    assert "Wait 30 minutes" in error["message"]
    assert error["details"]["retry_after_minutes"] == 30
    assert resp.headers["Retry-After"] == "1800"


def test_lockout_applies_to_any_email_casing(client, registered_user) -> None:
    for _ in range(MAX_FAILURES):
        _login(client, "nope", email="User@X.com")

    resp = _login(client, PASSWORD, email="USER@x.COM")

    assert resp.status_code == 403


def test_lockout_expires_and_login_succeeds(client, clock, registered_user) -> None:
    for _ in range(MAX_FAILURES):
        _login(client, "nope")

    clock.advance(29 * 60)
    blocked = _login(client, PASSWORD)
    assert blocked.status_code == 403
    assert blocked.json()["error"]["details"]["retry_after_minutes"] == 1

    clock.advance(LOCKOUT_SECONDS - 29 * 60)
    resp = _login(client, PASSWORD)

    assert resp.status_code == 200
    assert resp.json()["recently_failed_attempts"] == 0


def test_error_response_carries_request_id(client, registered_user) -> None:
    resp = _login(client, "nope")

    assert resp.json()["error"]["request_id"] == resp.headers["X-Request-ID"]


def test_missing_fields_rejected(client) -> None:
    resp = client.post("/v1/authentication/login", json={"email": EMAIL})

    assert resp.status_code == 422


def test_login_does_not_require_api_key(client, registered_user) -> None:
    resp = client.post(
        "/v1/authentication/login",
        json={"email": EMAIL, "password": PASSWORD},
        headers={"X-API-Key": "not-a-key"},
    )

    assert resp.status_code == 200
