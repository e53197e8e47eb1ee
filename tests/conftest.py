"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets TESTING so no .env file is loaded, and provides admin credentials
for the static identity provider.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

os.environ.setdefault("AUTH_PROVIDER", "static")
os.environ.setdefault("AUTH_ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("AUTH_ADMIN_PASSWORD", "correct-horse-battery-staple")
os.environ.setdefault("LOG_FORMAT", "plain")

import pytest  # noqa: E402


class FakeClock:
    """Deterministic clock used to simulate window and block expiry."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
