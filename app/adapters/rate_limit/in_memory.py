"""In-memory login rate limiter with a counting window and an escalated block.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: every operation holds one lock around the shared store.
- Expiry is lazy: stale entries are dropped when next recorded against, or
  when the store is full and a new identifier arrives.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import (
    AbstractLoginRateLimiter,
    RateLimitDecision,
    RateLimitStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    count: int
    window_reset_at: float
    blocked: bool = False


class InMemoryLoginRateLimiter(AbstractLoginRateLimiter):
    """Throttle repeated login attempts per identifier.

    Attempts accumulate inside a window of ``window_seconds`` that starts at
    the first attempt. The ``max_attempts``-th attempt within that window is
    rejected and turns the entry into a block lasting ``block_seconds``;
    every attempt during the block is rejected with the same ``reset_at``.
    Once the window or block has passed, the identifier starts fresh.
    """

    def __init__(
        self,
        *,
        max_attempts: int = 5,
        window_seconds: float = 15 * 60,
        block_seconds: float = 60 * 60,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            max_attempts: Attempts allowed per window before blocking.
            window_seconds: Length of the counting window in seconds.
            block_seconds: Length of the block penalty in seconds.
            max_entries: Optional cap on tracked identifiers. When full, expired
                entries are purged first, then the least recently written
                counting entry is evicted. Unexpired blocks are never evicted,
                so the store may exceed the cap while they last.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If any limit is invalid.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if block_seconds <= 0:
            raise ValueError("block_seconds must be > 0")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")

        self._max_attempts = max_attempts
        self._window_seconds = window_seconds
        self._block_seconds = block_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: OrderedDict[str, _Entry] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryLoginRateLimiter(max_attempts={self._max_attempts}, "
            f"window_seconds={self._window_seconds}, "
            f"block_seconds={self._block_seconds}, size={len(self._entries)})"
        )

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @staticmethod
    def _is_expired(entry: _Entry, now: float) -> bool:
        return now >= entry.window_reset_at

    def _make_room(self, now: float) -> None:
        """Ensure a new identifier fits under ``max_entries``. Caller holds the lock."""
        if self._max_entries is None or len(self._entries) < self._max_entries:
            return

        self._purge_expired_locked(now)
        if len(self._entries) < self._max_entries:
            return

        # Only counting entries are evictable; an unexpired block always stays,
        # even if that leaves the store above max_entries.
        excess = len(self._entries) - self._max_entries + 1
        evictable = [key for key, entry in self._entries.items() if not entry.blocked][:excess]
        for key in evictable:
            del self._entries[key]

        if len(evictable) < excess:
            logger.warning(
                "login_rate_limit.over_capacity",
                extra={"size": len(self._entries), "max_entries": self._max_entries},
            )
        elif evictable:
            logger.debug(
                "login_rate_limit.evicted",
                extra={"evicted": len(evictable), "max_entries": self._max_entries},
            )

    def _purge_expired_locked(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def record_attempt(self, identifier: str) -> RateLimitDecision:
        """Record one attempt for ``identifier``.

        The read, increment, compare and write of the entry happen under the
        limiter lock, so concurrent attempts for the same identifier cannot
        both slip under the threshold.

        Args:
            identifier: Throttling key. Callers substitute a fallback constant
                when no identifier is available.

        Returns:
            RateLimitDecision with the allowance and remaining budget.
        """
        now = self._clock()

        with self._lock:
            entry = self._entries.get(identifier)

            if entry is not None and entry.blocked and not self._is_expired(entry, now):
                return RateLimitDecision(
                    allowed=False,
                    remaining_attempts=0,
                    reset_at=entry.window_reset_at,
                )

            if entry is not None and self._is_expired(entry, now):
                del self._entries[identifier]
                entry = None

            if entry is None:
                self._make_room(now)
                entry = _Entry(count=1, window_reset_at=now + self._window_seconds)
                self._entries[identifier] = entry
                return RateLimitDecision(
                    allowed=True,
                    remaining_attempts=self._max_attempts - 1,
                    reset_at=entry.window_reset_at,
                )

            entry.count += 1
            self._entries.move_to_end(identifier)

            if entry.count >= self._max_attempts:
                return self._block(entry, now)

            return RateLimitDecision(
                allowed=True,
                remaining_attempts=self._max_attempts - entry.count,
                reset_at=entry.window_reset_at,
            )

    def _block(self, entry: _Entry, now: float) -> RateLimitDecision:
        entry.blocked = True
        entry.window_reset_at = now + self._block_seconds
        return RateLimitDecision(
            allowed=False,
            remaining_attempts=0,
            reset_at=entry.window_reset_at,
        )

    def peek_status(self, identifier: str) -> RateLimitStatus:
        """Report the throttling state of ``identifier`` without mutating the store.

        Expired entries are reported as absent but left in place; only
        ``record_attempt`` or a purge removes them.
        """
        now = self._clock()

        with self._lock:
            entry = self._entries.get(identifier)

            if entry is None or self._is_expired(entry, now):
                return RateLimitStatus(
                    remaining_attempts=self._max_attempts,
                    reset_at=now + self._window_seconds,
                    blocked=False,
                )

            if entry.blocked:
                return RateLimitStatus(
                    remaining_attempts=0,
                    reset_at=entry.window_reset_at,
                    blocked=True,
                )

            return RateLimitStatus(
                remaining_attempts=max(0, self._max_attempts - entry.count),
                reset_at=entry.window_reset_at,
                blocked=False,
            )

    def reset(self, identifier: str) -> None:
        with self._lock:
            self._entries.pop(identifier, None)

    def purge_expired(self) -> int:
        """Drop every entry whose window or block has passed.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        with self._lock:
            removed = self._purge_expired_locked(now)

        if removed:
            logger.debug("login_rate_limit.purged", extra={"removed": removed})
        return removed
