"""Login rate limiter interfaces.

The login service depends on this abstraction (not the concrete
implementation) so storage backends can be swapped later with minimal
changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of recording one attempt.

    Attributes:
        allowed: Whether the attempt may proceed.
        remaining_attempts: Attempts left in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the window or block expires.
    """

    allowed: bool
    remaining_attempts: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitStatus:
    """Read-only view of an identifier's throttling state.

    Attributes:
        remaining_attempts: Attempts left before a block.
        reset_at: UNIX epoch seconds when the window or block expires.
        blocked: Whether the identifier is currently blocked.
    """

    remaining_attempts: int
    reset_at: float
    blocked: bool


class AbstractLoginRateLimiter(ABC):
    """Interface for per-identifier login throttles."""

    @abstractmethod
    def record_attempt(self, identifier: str) -> RateLimitDecision:
        """Record an attempt for ``identifier`` and decide whether it may proceed.

        Args:
            identifier: Throttling key (e.g., a normalized email address).

        Returns:
            RateLimitDecision describing the outcome.
        """
        raise NotImplementedError

    @abstractmethod
    def peek_status(self, identifier: str) -> RateLimitStatus:
        """Report the identifier's state without consuming an attempt."""
        raise NotImplementedError

    @abstractmethod
    def reset(self, identifier: str) -> None:
        """Forget all recorded attempts for ``identifier``."""
        raise NotImplementedError
