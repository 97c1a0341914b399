"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any ``app`` import so the settings
object is built with test values (fast bcrypt, known admin keys).
"""

import os

import pytest
from fastapi.testclient import TestClient

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("APP_BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from app.adapters.login_throttle.in_memory import InMemoryLoginThrottle  # noqa: E402
from app.core.app_factory import create_app  # noqa: E402
from app.core.container import ServiceContainer, build_container  # noqa: E402


class FakeClock:
    """Deterministic clock used to test lockout windows."""

    def __init__(self, start: float = 10_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def throttle(clock: FakeClock) -> InMemoryLoginThrottle:
    return InMemoryLoginThrottle(clock=clock)


@pytest.fixture
def container(throttle: InMemoryLoginThrottle) -> ServiceContainer:
    return build_container(throttle=throttle)


@pytest.fixture
def client(container: ServiceContainer) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-API-Key": "test-api-key-123"}
