"""Admin API key check for the user-management routes.

Keys come from a comma-separated setting. The login endpoint is public; only
``/v1/users`` depends on ``require_admin_key``.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from typing import Annotated

from fastapi import Header

from app.core.config import settings
from app.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set of trimmed, non-empty keys.

    Examples:
        >>> parse_api_keys("key1, key2 ,key1")
        {'key1', 'key2'}
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()
    return {key.strip() for key in keys_string.split(",") if key.strip()}


def _key_matches(provided_key: str, valid_keys: set[str]) -> bool:
    # Compare against every key so timing does not reveal which one matched.
    matched = False
    for key in valid_keys:
        if secrets.compare_digest(provided_key.encode(), key.encode()):
            matched = True
    return matched


def validate_api_key(provided_key: str | None) -> None:
    """Validate an admin API key against the configured keys.

    Raises:
        AuthenticationAppError: If the key is missing or invalid, or if
            authentication is required but no keys are configured.
    """
    if not settings.app.api_key_required:
        return

    valid_keys = parse_api_keys(settings.app.api_keys)
    if not valid_keys:
        logger.error(
            "auth.api_keys_not_configured",
            extra={"auth_required": True},
        )
        raise AuthenticationAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
            details={"hint": "Set APP_API_KEYS or disable auth with APP_API_KEY_REQUIRED=false"},
        )

    if not provided_key:
        logger.warning("auth.missing_key", extra={"api_key_present": False})
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Missing API key. Provide X-API-Key header.",
        )

    if not _key_matches(provided_key, valid_keys):
        logger.warning(
            "auth.invalid_key",
            extra={"api_key_hash": hashlib.sha256(provided_key.encode()).hexdigest()[:16]},
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def require_admin_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency guarding admin routes.

    Usage:
        router = APIRouter(dependencies=[Depends(require_admin_key)])

    Raises:
        AuthenticationAppError: Rendered as 403 by the global handlers.
    """
    validate_api_key(x_api_key)
