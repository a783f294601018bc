"""Fixtures for test suite"""

import pytest
from datetime import datetime, timezone

from dlmm_history.config import HistoricalDataConfig
from dlmm_history.services import HistoricalDataService, MockMarketDataGenerator


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def pool_address():
    return "11111111111111111111111111111112"


@pytest.fixture
def start_date():
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def end_date():
    return datetime(2024, 1, 2, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    """Small cache with a two minute TTL."""
    return HistoricalDataConfig(
        cache_size=2,
        cache_ttl_ms=2 * 60 * 1000,
        fallback_to_mock=True,
        api_endpoint=None,
    )


@pytest.fixture
def service(config, clock):
    return HistoricalDataService(config, seed=42, clock=clock)


@pytest.fixture
def generator():
    return MockMarketDataGenerator(seed=7)


@pytest.fixture
def hourly_dataset(generator, pool_address, start_date, end_date):
    """24 hourly candles with bin ladders."""
    return generator.generate(pool_address, start_date, end_date, "1h")
