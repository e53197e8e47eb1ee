"""Login rate limiting adapters.

This package keeps the limiter behind a small interface so the in-memory
store can later be replaced by Redis or another shared store without
changing the login service.
"""

from app.adapters.rate_limit.base import (
    AbstractLoginRateLimiter,
    RateLimitDecision,
    RateLimitStatus,
)
from app.adapters.rate_limit.in_memory import InMemoryLoginRateLimiter

__all__ = [
    "AbstractLoginRateLimiter",
    "InMemoryLoginRateLimiter",
    "RateLimitDecision",
    "RateLimitStatus",
]
