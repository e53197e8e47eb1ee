"""Login rate limiter wiring.

This module owns the process-wide limiter instance and the helpers that
turn a submitted email into a throttling key.

Rate limiting strategy:
- Per-identifier window + block, keyed by the normalized email.
- If no email was submitted, all such attempts share one fallback key.
"""

from __future__ import annotations

import hashlib
import logging

from app.adapters.rate_limit.base import AbstractLoginRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryLoginRateLimiter
from app.core.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_IDENTIFIER = "unknown"

_limiter: AbstractLoginRateLimiter | None = None
_limiter_config: tuple[int, int, int, int | None] | None = None


def get_login_rate_limiter() -> AbstractLoginRateLimiter:
    """Return the process-wide login rate limiter.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.

    Returns:
        AbstractLoginRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    cfg = settings.login_rate_limit
    config = (cfg.max_attempts, cfg.window_seconds, cfg.block_seconds, cfg.max_entries)

    if _limiter is None or _limiter_config != config:
        _limiter = InMemoryLoginRateLimiter(
            max_attempts=cfg.max_attempts,
            window_seconds=cfg.window_seconds,
            block_seconds=cfg.block_seconds,
            max_entries=cfg.max_entries,
        )
        _limiter_config = config
        logger.info(
            "login_rate_limit.configured",
            extra={
                "max_attempts": cfg.max_attempts,
                "window_s": cfg.window_seconds,
                "block_s": cfg.block_seconds,
                "max_entries": cfg.max_entries,
            },
        )

    return _limiter


def normalize_identifier(email: str | None) -> str:
    """Build the throttling key for a submitted email.

    Examples:
        >>> normalize_identifier("  Admin@Example.com ")
        'admin@example.com'
        >>> normalize_identifier("")
        'unknown'
        >>> normalize_identifier(None)
        'unknown'
    """

    if not email:
        return UNKNOWN_IDENTIFIER
    normalized = email.strip().lower()
    return normalized or UNKNOWN_IDENTIFIER


def hash_identifier(identifier: str) -> str:
    """Hash the throttling key for logging without exposing the email."""
    return hashlib.sha256(identifier.encode()).hexdigest()[:16]
