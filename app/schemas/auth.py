"""Pydantic schemas for the login endpoint."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials submitted to the login endpoint."""

    email: str = Field(..., min_length=1, description="Account email (case-insensitive).")
    password: str = Field(..., min_length=1, description="Account password.")


class LoginResponse(BaseModel):
    """Successful login result."""

    success_login: bool = Field(True, description="Always true on a 200 response.")
    message: str = Field("Login successful", description="Human-readable status.")
    recently_failed_attempts: int = Field(
        ...,
        ge=0,
        description="Consecutive failed attempts recorded before this successful login.",
    )
