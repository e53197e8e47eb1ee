"""Supabase Auth identity provider adapter.

Thin wrapper around the GoTrue password grant exposed by a hosted Supabase
project. Only sign-in is implemented; sessions are not refreshed or revoked
here.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.adapters.identity.base import AbstractIdentityProvider, AuthSession
from app.core.errors import AuthenticationAppError, IdentityProviderAppError

logger = logging.getLogger(__name__)

# Status codes GoTrue uses for rejected credentials / unconfirmed accounts
_CREDENTIAL_REJECTION_STATUSES = {400, 401, 422}


class SupabaseAuthProvider(AbstractIdentityProvider):
    """Authenticate against Supabase Auth using ``grant_type=password``."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            url: Project base URL (e.g., "https://abc.supabase.co").
            anon_key: Public anon key sent in the ``apikey`` header.
            timeout_seconds: Timeout for requests in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.token_url = f"{url.rstrip('/')}/auth/v1/token"
        self._anon_key = anon_key
        self._timeout = timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._anon_key}",
            "Content-Type": "application/json",
        }

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Exchange email/password for a Supabase session.

        Raises:
            AuthenticationAppError: If Supabase rejects the credentials.
            IdentityProviderAppError: On transport errors, unexpected status
                codes or malformed payloads.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self.token_url,
                    params={"grant_type": "password"},
                    headers=self._headers(),
                    json={"email": email, "password": password},
                )
        except httpx.HTTPError as exc:
            logger.error(
                "identity.supabase.transport_error",
                extra={"error_type": type(exc).__name__},
            )
            raise IdentityProviderAppError(
                code="identity_provider_unavailable",
                message="Authentication service is unavailable",
                details={"provider": "supabase"},
            ) from exc

        if response.status_code in _CREDENTIAL_REJECTION_STATUSES:
            logger.info(
                "identity.supabase.rejected",
                extra={
                    "status_code": response.status_code,
                    "error_code": _error_code(response),
                },
            )
            raise AuthenticationAppError(
                code="invalid_credentials",
                message="Invalid login credentials",
            )

        if response.status_code != 200:
            logger.error(
                "identity.supabase.unexpected_status",
                extra={"status_code": response.status_code},
            )
            raise IdentityProviderAppError(
                code="identity_provider_error",
                message="Authentication service returned an error",
                details={"provider": "supabase", "http_status": response.status_code},
            )

        return _parse_session(response)


def _error_code(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    return payload.get("error_code") or payload.get("error")


def _parse_session(response: httpx.Response) -> AuthSession:
    try:
        payload: dict[str, Any] = response.json()
        user = payload["user"]
        return AuthSession(
            access_token=payload["access_token"],
            token_type=payload.get("token_type", "bearer"),
            expires_in=int(payload.get("expires_in", 0)),
            refresh_token=payload.get("refresh_token"),
            user_id=str(user["id"]),
            email=user.get("email", ""),
        )
    except (ValueError, KeyError, TypeError) as exc:
        logger.error(
            "identity.supabase.malformed_session",
            extra={"error_type": type(exc).__name__},
        )
        raise IdentityProviderAppError(
            code="identity_provider_error",
            message="Authentication service returned an invalid session",
            details={"provider": "supabase"},
        ) from exc
