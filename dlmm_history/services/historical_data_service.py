"""
Historical Data Service

Serves historical price and liquidity datasets for DLMM pools. Lookups go
cache first, then the remote API when one is configured, then the mock
generator when fallback is allowed. Remote failures are never retried here;
callers that need retries wrap fetch_historical_data themselves.
"""

import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional, Sequence

import numpy as np
from loguru import logger

from ..config.constants import COMMON_POOL_ADDRESSES
from ..config.settings import HistoricalDataConfig
from ..core.data_cache import HistoricalDataCache, make_cache_key
from ..core.exceptions import DataUnavailableError
from ..models.market_data import CacheStats, HistoricalDataset, Interval, ensure_utc
from .mock_generator import MockMarketDataGenerator
from .remote_source import HistoricalSource, RemoteHistoricalSource


class HistoricalDataService:
    """
    Cache-fronted provider of historical datasets.

    Usage:
        service = HistoricalDataService(HistoricalDataConfig(cache_size=5), seed=7)
        data = service.fetch_historical_data(pool, start, end, "1h")
        df = data.price_frame()
    """

    def __init__(
        self,
        config: Optional[HistoricalDataConfig] = None,
        source: Optional[HistoricalSource] = None,
        generator: Optional[MockMarketDataGenerator] = None,
        cache: Optional[HistoricalDataCache] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Args:
            config: Service settings; defaults are loaded from the environment
            source: Remote data source; built from config.api_endpoint when omitted
            generator: Mock generator; built from config and rng/seed when omitted
            cache: Dataset cache; built from config and clock when omitted
            rng: Random source for the default generator
            seed: Seed for the default generator when rng is not given
            clock: Monotonic clock in seconds for the default cache
        """
        self.config = config or HistoricalDataConfig()

        if source is None and self.config.remote_enabled:
            source = RemoteHistoricalSource(self.config.api_endpoint, timeout=self.config.request_timeout)
        self.source = source

        self.generator = generator if generator is not None else MockMarketDataGenerator(
            rng=rng,
            seed=seed,
            bin_step_bps=self.config.bin_step_bps,
            active_bin_range=self.config.active_bin_range,
            base_fee_rate=self.config.base_fee_rate,
        )
        self.cache = cache if cache is not None else HistoricalDataCache(
            max_entries=self.config.cache_size,
            ttl_ms=self.config.cache_ttl_ms,
            clock=clock,
        )

        logger.info(
            f"HistoricalDataService initialized (cache={self.cache.max_entries}, "
            f"ttl={self.cache.ttl_ms}ms, remote={'on' if self.source else 'off'}, "
            f"fallback={self.config.fallback_to_mock})"
        )

    def fetch_historical_data(
        self,
        pool_address,
        start_time: datetime,
        end_time: datetime,
        interval="1h"
    ) -> HistoricalDataset:
        """
        Fetch historical data with fallback to generated data.

        Args:
            pool_address: Pool identifier (str or any object whose str() is the address)
            start_time: Range start; naive values are UTC
            end_time: Range end; swapped with start_time when earlier
            interval: One of 1m/5m/15m/1h/4h/1d; anything else means 1h

        Returns:
            HistoricalDataset, identical to the cached one on a hit

        Raises:
            DataUnavailableError: remote source gave nothing and fallback_to_mock is off
        """
        pool = str(pool_address)
        interval = Interval.parse(interval)
        start, end = ensure_utc(start_time), ensure_utc(end_time)
        if end < start:
            logger.warning(f"End {end.isoformat()} precedes start {start.isoformat()} for {pool}, swapping")
            start, end = end, start

        cache_key = make_cache_key(pool, start, end, interval)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Historical data cache hit for {pool}")
            return cached

        failure = ""
        if self.source is not None:
            try:
                remote = self.source.fetch(pool, start, end, interval)
                if remote is not None:
                    self.cache.put(cache_key, remote)
                    logger.info(f"Fetched real historical data for {pool}")
                    return remote
                failure = "remote source returned no data"
            except Exception as e:
                failure = str(e)
                logger.warning(f"API fetch failed for {pool}: {e}")
        else:
            failure = "no remote source configured"

        if self.config.fallback_to_mock:
            dataset = self.generator.generate(pool, start, end, interval)
            self.cache.put(cache_key, dataset)
            logger.debug(f"Using mock historical data for {pool}: {len(dataset.price_data)} candles")
            return dataset

        raise DataUnavailableError(pool, failure)

    def get_cache_stats(self) -> CacheStats:
        """Get cache statistics for monitoring."""
        return self.cache.stats()

    def clear_cache(self) -> None:
        """Drop all cached datasets and hit counters."""
        self.cache.clear()
        logger.info("Historical data cache cleared")

    def preload_common_data(
        self,
        pool_addresses: Optional[Iterable] = None,
        intervals: Sequence[str] = ("1h", "1d"),
        days: int = 30,
        now: Optional[datetime] = None
    ) -> int:
        """
        Warm the cache for common pools over the trailing window.

        Args:
            pool_addresses: Pools to load; defaults to the well-known placeholders
            intervals: Intervals to load per pool
            days: Length of the trailing window
            now: Window end; defaults to the current time

        Returns:
            Number of datasets fetched
        """
        pools = list(pool_addresses) if pool_addresses is not None else list(COMMON_POOL_ADDRESSES)
        end = ensure_utc(now) if now else datetime.now(timezone.utc)
        start = end - timedelta(days=days)

        logger.info(f"Preloading historical data for {len(pools)} pools")
        loaded = 0
        for pool in pools:
            for interval in intervals:
                self.fetch_historical_data(pool, start, end, interval)
                loaded += 1

        logger.info(f"Preloaded {loaded} datasets for {len(pools)} pools")
        return loaded
