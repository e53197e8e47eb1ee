"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep shapes consistent without forcing every
    error to carry every key.
    """

    code: str
    message: str
    hint: str
    http_status: int
    retry_after: int
    reset_at: float
    remaining_attempts: int
    provider: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when credentials are rejected."""


class RateLimitedAppError(AppError):
    """Raised when an identifier is throttled by the login rate limiter."""


class IdentityProviderAppError(AppError):
    """Raised when the identity provider is unreachable or misbehaves."""


class ConfigurationAppError(ValidationAppError):
    """Raised when server-side configuration is missing or inconsistent."""
