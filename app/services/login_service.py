"""Admin login service combining the rate limiter and the identity provider.

Flow for every login attempt:
- Record an attempt against the normalized email before anything else
- Reject locally (no provider call) while the identifier is throttled
- Authenticate with the identity provider
- Clear the identifier's history after a successful sign-in

Failure messages never reveal whether an email belongs to an account.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable

from app.adapters.identity.base import AbstractIdentityProvider, AuthSession
from app.adapters.rate_limit.base import AbstractLoginRateLimiter
from app.core.errors import AuthenticationAppError, RateLimitedAppError
from app.core.rate_limit import hash_identifier, normalize_identifier

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
TOO_MANY_ATTEMPTS_MESSAGE = "Too many login attempts. Try again later."


def retry_after_seconds(reset_at: float, now: float) -> int:
    """Whole seconds until ``reset_at``, never negative."""
    return max(0, int(math.ceil(reset_at - now)))


class LoginService:
    """Authenticate admin users behind the login rate limiter.

    Args:
        limiter: Per-identifier login throttle.
        identity_provider: Backend that verifies email/password pairs.
        rate_limit_enabled: When False, attempts are neither recorded nor throttled.
        clock: Time source used to compute retry-after values.
    """

    def __init__(
        self,
        limiter: AbstractLoginRateLimiter,
        identity_provider: AbstractIdentityProvider,
        *,
        rate_limit_enabled: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.limiter = limiter
        self.identity_provider = identity_provider
        self.rate_limit_enabled = rate_limit_enabled
        self._clock = clock

    async def login(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password.

        Args:
            email: Submitted email (normalized for throttling only).
            password: Submitted password.

        Returns:
            AuthSession issued by the identity provider.

        Raises:
            RateLimitedAppError: If the identifier is currently throttled.
            AuthenticationAppError: If the credentials are rejected.
            IdentityProviderAppError: If the provider fails.
        """
        identifier = normalize_identifier(email)
        identifier_hash = hash_identifier(identifier)
        remaining: int | None = None

        if self.rate_limit_enabled:
            decision = self.limiter.record_attempt(identifier)
            if not decision.allowed:
                retry_after = retry_after_seconds(decision.reset_at, self._clock())
                logger.warning(
                    "login.rate_limited",
                    extra={
                        "identifier_hash": identifier_hash,
                        "reset_at": decision.reset_at,
                        "retry_after_s": retry_after,
                    },
                )
                raise RateLimitedAppError(
                    code="too_many_attempts",
                    message=TOO_MANY_ATTEMPTS_MESSAGE,
                    details={
                        "retry_after": retry_after,
                        "reset_at": decision.reset_at,
                        "remaining_attempts": 0,
                    },
                )
            remaining = decision.remaining_attempts

        try:
            session = await self.identity_provider.sign_in_with_password(email, password)
        except AuthenticationAppError as exc:
            logger.info(
                "login.failed",
                extra={
                    "identifier_hash": identifier_hash,
                    "reason": exc.code,
                    "remaining_attempts": remaining,
                },
            )
            details = {"remaining_attempts": remaining} if remaining is not None else None
            raise AuthenticationAppError(
                code="invalid_credentials",
                message=INVALID_CREDENTIALS_MESSAGE,
                details=details,
            ) from exc

        if self.rate_limit_enabled:
            self.limiter.reset(identifier)

        logger.info("login.success", extra={"identifier_hash": identifier_hash})
        return session
