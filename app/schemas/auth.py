"""Pydantic schemas for admin login requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials submitted by the admin login form."""

    email: str = Field(
        ..., max_length=320, description="Admin account email."
    )
    password: str = Field(
        ..., min_length=1, max_length=1024, description="Admin account password."
    )


class LoginResponse(BaseModel):
    """Session returned after a successful sign-in."""

    access_token: str = Field(..., description="Bearer token for admin requests.")
    token_type: str = Field("bearer", description="Token type, always 'bearer'.")
    expires_in: int = Field(..., description="Token lifetime in seconds.")
    refresh_token: str | None = Field(
        default=None, description="Refresh token when the provider issues one."
    )
    user_id: str = Field(..., description="Identity provider user id.")
    email: str = Field(..., description="Email of the authenticated account.")


class LoginStatusResponse(BaseModel):
    """Throttling state shown as a warning next to the login form."""

    remaining_attempts: int = Field(
        ..., ge=0, description="Attempts left before the identifier is blocked."
    )
    reset_at: float = Field(
        ..., description="UNIX epoch seconds when the window or block expires."
    )
    blocked: bool = Field(..., description="Whether login is currently blocked.")
