"""Service wiring and FastAPI dependencies.

All mutable state (the login throttle table and the user store) lives in one
``ServiceContainer`` built by the app factory and kept on ``app.state``. Each
app instance therefore owns its own throttle, and tests get a clean one by
building a fresh app.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from app.adapters.credentials.base import AbstractCredentialVerifier
from app.adapters.credentials.password import PasswordCredentialVerifier
from app.adapters.login_throttle.base import AbstractLoginThrottle
from app.adapters.login_throttle.in_memory import InMemoryLoginThrottle
from app.adapters.users.base import AbstractUserRepository
from app.adapters.users.in_memory import InMemoryUserRepository
from app.services.auth_service import AuthService
from app.services.users_service import UsersService


@dataclass
class ServiceContainer:
    """Process-wide services shared by every request of one app."""

    users: AbstractUserRepository
    throttle: AbstractLoginThrottle
    verifier: AbstractCredentialVerifier
    auth_service: AuthService
    users_service: UsersService


def build_container(
    *,
    users: AbstractUserRepository | None = None,
    throttle: AbstractLoginThrottle | None = None,
    verifier: AbstractCredentialVerifier | None = None,
) -> ServiceContainer:
    """Build the service graph, filling in in-memory defaults.

    Args:
        users: User repository; defaults to a new in-memory store.
        throttle: Login throttle; defaults to a new in-memory throttle.
        verifier: Credential verifier; defaults to bcrypt over ``users``.
    """
    if users is None:
        users = InMemoryUserRepository()
    if throttle is None:
        throttle = InMemoryLoginThrottle()
    if verifier is None:
        verifier = PasswordCredentialVerifier(users)

    return ServiceContainer(
        users=users,
        throttle=throttle,
        verifier=verifier,
        auth_service=AuthService(throttle=throttle, verifier=verifier, users=users),
        users_service=UsersService(users),
    )


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_auth_service(request: Request) -> AuthService:
    return get_container(request).auth_service


def get_users_service(request: Request) -> UsersService:
    return get_container(request).users_service
