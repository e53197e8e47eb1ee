"""Unit tests for the in-memory login rate limiter."""

import threading

import pytest

from app.adapters.rate_limit.in_memory import InMemoryLoginRateLimiter

WINDOW = 15 * 60
BLOCK = 60 * 60


@pytest.fixture
def limiter(clock) -> InMemoryLoginRateLimiter:
    return InMemoryLoginRateLimiter(
        max_attempts=5,
        window_seconds=WINDOW,
        block_seconds=BLOCK,
        clock=clock,
    )


def test_first_attempt_for_new_identifier(limiter, clock) -> None:
    decision = limiter.record_attempt("new@x.com")

    assert decision.allowed is True
    assert decision.remaining_attempts == 4
    assert decision.reset_at == clock() + WINDOW


def test_blocks_on_fifth_attempt_and_keeps_reset_at(limiter, clock) -> None:
    remaining = [limiter.record_attempt("a@x.com") for _ in range(4)]
    assert [d.allowed for d in remaining] == [True] * 4
    assert [d.remaining_attempts for d in remaining] == [4, 3, 2, 1]

    fifth = limiter.record_attempt("a@x.com")
    assert fifth.allowed is False
    assert fifth.remaining_attempts == 0
    assert fifth.reset_at == clock() + BLOCK

    sixth = limiter.record_attempt("a@x.com")
    assert sixth.allowed is False
    assert sixth.remaining_attempts == 0
    assert sixth.reset_at == fifth.reset_at


def test_attempts_during_block_do_not_extend_it(limiter, clock) -> None:
    for _ in range(5):
        limiter.record_attempt("k")
    blocked_until = clock() + BLOCK

    clock.advance(BLOCK - 1)
    decision = limiter.record_attempt("k")

    assert decision.allowed is False
    assert decision.reset_at == blocked_until


def test_block_expiry_starts_fresh(limiter, clock) -> None:
    for _ in range(5):
        limiter.record_attempt("k")

    clock.advance(BLOCK)
    decision = limiter.record_attempt("k")

    assert decision.allowed is True
    assert decision.remaining_attempts == 4
    assert decision.reset_at == clock() + WINDOW


def test_window_expiry_starts_fresh(limiter, clock) -> None:
    for _ in range(3):
        limiter.record_attempt("k")

    clock.advance(WINDOW)
    decision = limiter.record_attempt("k")

    assert decision.allowed is True
    assert decision.remaining_attempts == 4


def test_window_does_not_slide_with_attempts(limiter, clock) -> None:
    first = limiter.record_attempt("k")
    clock.advance(WINDOW - 1)
    second = limiter.record_attempt("k")

    assert second.reset_at == first.reset_at
    assert second.remaining_attempts == 3


def test_reset_clears_history(limiter) -> None:
    for _ in range(3):
        limiter.record_attempt("k")

    limiter.reset("k")
    decision = limiter.record_attempt("k")

    assert decision.allowed is True
    assert decision.remaining_attempts == 4


def test_reset_lifts_block(limiter) -> None:
    for _ in range(5):
        limiter.record_attempt("k")

    limiter.reset("k")

    assert limiter.record_attempt("k").allowed is True


def test_reset_is_idempotent(limiter) -> None:
    limiter.reset("never-seen")
    limiter.reset("never-seen")

    assert len(limiter) == 0


def test_identifiers_are_isolated(limiter) -> None:
    for _ in range(5):
        limiter.record_attempt("k1")

    assert limiter.record_attempt("k1").allowed is False
    assert limiter.record_attempt("k2").allowed is True


def test_expired_entry_is_removed_when_recorded_again(limiter, clock) -> None:
    limiter.record_attempt("k")
    clock.advance(WINDOW)

    limiter.record_attempt("k")

    assert len(limiter) == 1
    assert limiter.peek_status("k").remaining_attempts == 4


class TestPeekStatus:
    def test_unknown_identifier_reports_full_budget(self, limiter, clock) -> None:
        status = limiter.peek_status("nobody")

        assert status.remaining_attempts == 5
        assert status.blocked is False
        assert status.reset_at == clock() + WINDOW
        assert len(limiter) == 0

    def test_counting_identifier(self, limiter) -> None:
        first = limiter.record_attempt("k")
        limiter.record_attempt("k")

        status = limiter.peek_status("k")

        assert status.remaining_attempts == 3
        assert status.blocked is False
        assert status.reset_at == first.reset_at

    def test_blocked_identifier(self, limiter) -> None:
        for _ in range(4):
            limiter.record_attempt("k")
        blocking = limiter.record_attempt("k")

        status = limiter.peek_status("k")

        assert status.remaining_attempts == 0
        assert status.blocked is True
        assert status.reset_at == blocking.reset_at

    def test_expired_block_reported_as_fresh_without_deleting(self, limiter, clock) -> None:
        for _ in range(5):
            limiter.record_attempt("k")
        clock.advance(BLOCK + 1)

        status = limiter.peek_status("k")

        assert status.remaining_attempts == 5
        assert status.blocked is False
        assert status.reset_at == clock() + WINDOW
        assert len(limiter) == 1

    def test_expired_window_reported_as_fresh(self, limiter, clock) -> None:
        limiter.record_attempt("k")
        limiter.record_attempt("k")
        clock.advance(WINDOW)

        status = limiter.peek_status("k")

        assert status.remaining_attempts == 5
        assert status.blocked is False

    def test_peek_does_not_change_next_decision(self, clock) -> None:
        def run(peeks: int) -> list:
            limiter = InMemoryLoginRateLimiter(
                max_attempts=5, window_seconds=WINDOW, block_seconds=BLOCK, clock=clock
            )
            decisions = []
            for _ in range(6):
                for _ in range(peeks):
                    limiter.peek_status("k")
                decisions.append(limiter.record_attempt("k"))
            return decisions

        assert run(peeks=0) == run(peeks=3)


class TestBoundedStore:
    def test_purge_expired_removes_only_stale_entries(self, limiter, clock) -> None:
        limiter.record_attempt("old")
        clock.advance(WINDOW)
        limiter.record_attempt("fresh")

        assert limiter.purge_expired() == 1
        assert len(limiter) == 1
        assert limiter.peek_status("fresh").remaining_attempts == 4

    def test_full_store_purges_expired_before_evicting(self, clock) -> None:
        limiter = InMemoryLoginRateLimiter(
            max_attempts=5, window_seconds=10, block_seconds=20, max_entries=2, clock=clock
        )
        limiter.record_attempt("stale")
        clock.advance(5)
        limiter.record_attempt("live")
        clock.advance(5)

        limiter.record_attempt("new")

        assert len(limiter) == 2
        assert limiter.peek_status("live").remaining_attempts == 4

    def test_full_store_evicts_least_recently_written(self, clock) -> None:
        limiter = InMemoryLoginRateLimiter(
            max_attempts=5, window_seconds=60, block_seconds=120, max_entries=2, clock=clock
        )
        limiter.record_attempt("a")
        limiter.record_attempt("b")
        limiter.record_attempt("a")

        limiter.record_attempt("c")

        assert len(limiter) == 2
        assert limiter.peek_status("a").remaining_attempts == 3
        assert limiter.peek_status("b").remaining_attempts == 5
        assert limiter.peek_status("c").remaining_attempts == 4

    def test_active_block_survives_a_full_store(self, clock) -> None:
        limiter = InMemoryLoginRateLimiter(
            max_attempts=5, window_seconds=900, block_seconds=3600, max_entries=3, clock=clock
        )
        for _ in range(5):
            limiter.record_attempt("victim@x.com")
        blocked_until = clock() + 3600

        for i in range(3):
            limiter.record_attempt(f"junk{i}")

        decision = limiter.record_attempt("victim@x.com")
        assert decision.allowed is False
        assert decision.remaining_attempts == 0
        assert decision.reset_at == blocked_until
        assert limiter.peek_status("victim@x.com").blocked is True

    def test_store_exceeds_cap_rather_than_dropping_blocks(self, clock) -> None:
        limiter = InMemoryLoginRateLimiter(
            max_attempts=1, window_seconds=60, block_seconds=600, max_entries=2, clock=clock
        )
        for key in ("a", "b"):
            limiter.record_attempt(key)
            limiter.record_attempt(key)

        assert limiter.record_attempt("c").allowed is True

        assert len(limiter) == 3
        assert limiter.record_attempt("a").allowed is False
        assert limiter.record_attempt("b").allowed is False


def test_concurrent_attempts_block_exactly_once(clock) -> None:
    limiter = InMemoryLoginRateLimiter(
        max_attempts=5, window_seconds=WINDOW, block_seconds=BLOCK, clock=clock
    )
    results = []
    results_lock = threading.Lock()
    barrier = threading.Barrier(20)

    def attempt() -> None:
        barrier.wait()
        decision = limiter.record_attempt("shared")
        with results_lock:
            results.append(decision.allowed)

    threads = [threading.Thread(target=attempt) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 4
    assert results.count(False) == 16


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_attempts": 0},
        {"window_seconds": 0},
        {"block_seconds": 0},
        {"max_entries": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InMemoryLoginRateLimiter(**kwargs)
