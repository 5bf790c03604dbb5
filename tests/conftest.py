"""Shared test fixtures for the order invalidator."""

from __future__ import annotations

import pytest


class FakeClock:
    """Monotonic clock that advances only when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a controllable monotonic clock."""
    return FakeClock()


@pytest.fixture
def sleeps() -> list[float]:
    """Collects pacing delays instead of sleeping."""
    return []


@pytest.fixture
def twelve_order_ids() -> list[str]:
    """Twelve distinct order IDs."""
    return [f"ORD-{n:04d}" for n in range(1, 13)]


@pytest.fixture
def invalidator_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear configuration env vars so tests see defaults only."""
    for name in (
        "API_BASE_URL",
        "BATCH_SIZE",
        "PACING_DELAY_SECONDS",
        "REQUEST_TIMEOUT_SECONDS",
        "BATCH_RETRY_ATTEMPTS",
        "LOG_LEVEL",
        "APP_KEY",
        "SECRET_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
