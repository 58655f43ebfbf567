"""
Shared fixtures for the crypto tracker tests.
"""

from datetime import datetime, timezone

import pytest

from crypto_tracker.models import PricePoint


# 2024-01-16 12:00:00 UTC
NOON = int(datetime(2024, 1, 16, 12, 0, tzinfo=timezone.utc).timestamp())


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, now: float):
        self.now = float(now)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _make_point(timestamp, price=50000.0, high=52000.0, low=48000.0, volume=1000.0):
    return PricePoint(timestamp=timestamp, price=price, high_24h=high, low_24h=low, volume_24h=volume)


@pytest.fixture
def clock():
    """Fake clock starting at 2024-01-16 12:00:00 UTC."""
    return FakeClock(NOON)


@pytest.fixture
def make_point():
    """Factory for price points with sensible 24h fields."""
    return _make_point
