from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.adapters.identity.base import AbstractIdentityProvider
from app.adapters.identity.factory import get_identity_provider
from app.adapters.rate_limit.base import AbstractLoginRateLimiter
from app.core.config import settings
from app.core.rate_limit import get_login_rate_limiter, normalize_identifier
from app.schemas.auth import LoginRequest, LoginResponse, LoginStatusResponse
from app.services.login_service import LoginService

router = APIRouter(prefix="/admin", tags=["Admin Auth"])


def get_login_service(
    limiter: Annotated[AbstractLoginRateLimiter, Depends(get_login_rate_limiter)],
    identity_provider: Annotated[AbstractIdentityProvider, Depends(get_identity_provider)],
) -> LoginService:
    """Build the login service for one request.

    The limiter and identity provider are process-wide and rebuilt when
    their settings change; the service itself is a cheap per-request wrapper.
    """

    return LoginService(
        limiter=limiter,
        identity_provider=identity_provider,
        rate_limit_enabled=settings.login_rate_limit.enabled,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    service: Annotated[LoginService, Depends(get_login_service)],
) -> LoginResponse:
    """Sign in to the admin panel.

    Every call consumes one attempt for the submitted email. Once the
    attempt budget is exhausted the email is blocked and requests are
    rejected with 429 without contacting the identity provider.

    Raises:
        AuthenticationAppError: 401 on invalid credentials.
        RateLimitedAppError: 429 when the email is throttled.
        IdentityProviderAppError: 502 when the provider fails.
        ConfigurationAppError: 500 when the identity provider is misconfigured.
    """
    session = await service.login(payload.email, payload.password)
    return LoginResponse(
        access_token=session.access_token,
        token_type=session.token_type,
        expires_in=session.expires_in,
        refresh_token=session.refresh_token,
        user_id=session.user_id,
        email=session.email,
    )


@router.get("/login/status", response_model=LoginStatusResponse)
def login_status(
    limiter: Annotated[AbstractLoginRateLimiter, Depends(get_login_rate_limiter)],
    email: Annotated[str | None, Query(max_length=320)] = None,
) -> LoginStatusResponse:
    """Report remaining attempts for an email without consuming one.

    Only the limiter is consulted, so this works even when the identity
    provider is not configured.
    """

    status = limiter.peek_status(normalize_identifier(email))
    return LoginStatusResponse(
        remaining_attempts=status.remaining_attempts,
        reset_at=status.reset_at,
        blocked=status.blocked,
    )
