from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.container import get_auth_service
from app.schemas.auth import LoginRequest, LoginResponse
from app.services.auth_service import AuthService

router = APIRouter(tags=["Authentication"])


@router.post("/authentication/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """Log a user in with email and password.

    Repeated failures lock the email out for 30 minutes after the fifth
    consecutive failure. While locked out the endpoint answers 403
    ``too_many_attempts`` without checking the password.

    Returns:
        LoginResponse: Includes ``recently_failed_attempts``, the number of
            failures recorded before this success.

    Raises:
        InvalidCredentialsError: 401 when the email/password pair is wrong.
        TooManyAttemptsError: 403 while the email is locked out.
    """
    return auth_service.login(payload.email, payload.password)
