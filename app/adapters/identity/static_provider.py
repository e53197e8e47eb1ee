"""Single-account identity provider backed by environment configuration."""

from __future__ import annotations

import hashlib
import hmac
import secrets

from app.adapters.identity.base import AbstractIdentityProvider, AuthSession
from app.core.errors import AuthenticationAppError


class StaticCredentialsProvider(AbstractIdentityProvider):
    """Authenticate one admin account declared in settings.

    Meant for local development and small single-admin deployments. Email
    comparison is case-insensitive; both comparisons run in constant time.
    """

    def __init__(self, admin_email: str, admin_password: str, *, token_ttl_seconds: int = 3600) -> None:
        if not admin_email or not admin_password:
            raise ValueError("admin_email and admin_password must be non-empty")

        self._admin_email = admin_email.strip().lower()
        self._admin_password = admin_password
        self._token_ttl_seconds = token_ttl_seconds

    @property
    def user_id(self) -> str:
        return hashlib.sha256(self._admin_email.encode()).hexdigest()[:32]

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        email_ok = hmac.compare_digest(
            email.strip().lower().encode(), self._admin_email.encode()
        )
        password_ok = hmac.compare_digest(password.encode(), self._admin_password.encode())

        if not (email_ok and password_ok):
            raise AuthenticationAppError(
                code="invalid_credentials",
                message="Invalid login credentials",
            )

        return AuthSession(
            access_token=secrets.token_urlsafe(32),
            token_type="bearer",
            expires_in=self._token_ttl_seconds,
            user_id=self.user_id,
            email=self._admin_email,
        )
