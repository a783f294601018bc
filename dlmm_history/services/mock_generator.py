"""
Synthetic DLMM market data generator

Produces OHLCV candles from a regime-switching random walk and, for every
candle, a ladder of liquidity bins around the candle's close. All randomness
comes from an injected numpy Generator, so a seeded generator reproduces
the same dataset.
"""

import math
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

import numpy as np
from loguru import logger

from ..config.constants import (
    VOLATILITY_RANGES,
    BASE_VOLUME_RANGES,
    SEED_PRICE_MIN,
    SEED_PRICE_MAX,
    REGIME_SWITCH_PROBABILITY,
    TREND_BIAS_RANGE,
    MEAN_REVERSION_SPEED,
    MAX_STEP_CHANGE,
    WICK_VOLATILITY_FACTOR,
    MAX_WICK_RATIO,
    VOLUME_MOVE_SENSITIVITY,
    VOLUME_SPLIT_RANGE,
    DEFAULT_BIN_STEP_BPS,
    DEFAULT_ACTIVE_BIN_RANGE,
    MAX_ACTIVE_BIN_RANGE,
    MIN_BIN_LIQUIDITY,
    ACTIVE_BIN_DISTANCE,
    BIN_LIQUIDITY_RANGE,
    LIQUIDITY_DECAY,
    UTILIZATION_DECAY,
    DEFAULT_BASE_FEE_RATE,
    FEE_DISTANCE_FACTOR,
    DAY_MS,
)
from ..models.market_data import (
    Interval,
    PricePoint,
    LiquidityBinSnapshot,
    TimeRange,
    DatasetMetadata,
    HistoricalDataset,
    ensure_utc,
    to_epoch_ms,
)


class MarketRegime(str, Enum):
    """Behaviour of the random walk."""
    TRENDING = "trending"
    RANGING = "ranging"
    VOLATILE = "volatile"


def _format_liquidity(value: float) -> str:
    """Six-decimal string, floored so it never rounds to zero."""
    return f"{max(float(value), MIN_BIN_LIQUIDITY):.6f}"


def expected_point_count(start: datetime, end: datetime, interval: Interval) -> int:
    """Number of candles covering [start, end), rounding a partial bucket up."""
    span_ms = max(0, to_epoch_ms(end) - to_epoch_ms(start))
    return -(-span_ms // interval.milliseconds)


class MockMarketDataGenerator:
    """
    Generates internally consistent historical datasets.

    Guarantees per candle: high >= max(open, close), low <= min(open, close),
    all prices positive, open equal to the previous close, and
    volume_x + volume_y == volume. Per timestamp, the bins within
    ACTIVE_BIN_DISTANCE of the current price are flagged active.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        bin_step_bps: int = DEFAULT_BIN_STEP_BPS,
        active_bin_range: int = DEFAULT_ACTIVE_BIN_RANGE,
        base_fee_rate: float = DEFAULT_BASE_FEE_RATE
    ):
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.bin_step_bps = bin_step_bps
        if not ACTIVE_BIN_DISTANCE <= active_bin_range <= MAX_ACTIVE_BIN_RANGE:
            raise ValueError(
                f"active_bin_range must be between {ACTIVE_BIN_DISTANCE} and {MAX_ACTIVE_BIN_RANGE}, got {active_bin_range}"
            )
        self.active_bin_range = active_bin_range
        self.base_fee_rate = base_fee_rate

    @property
    def bin_step(self) -> float:
        return self.bin_step_bps / 10_000

    def generate(
        self,
        pool_address: str,
        start: datetime,
        end: datetime,
        interval: Interval = Interval.ONE_HOUR
    ) -> HistoricalDataset:
        """
        Generate a full dataset for a pool.

        Args:
            pool_address: Pool identifier, copied into the dataset
            start: Range start (naive values are UTC)
            end: Range end, expected >= start
            interval: Candle interval

        Returns:
            HistoricalDataset with source "mock" and full coverage
        """
        interval = Interval.parse(interval)
        start, end = ensure_utc(start), ensure_utc(end)
        total_points = expected_point_count(start, end, interval)

        logger.debug(f"Generating {total_points} {interval.value} candles for {pool_address}")

        price_data = self._generate_prices(start, total_points, interval)
        liquidity_data = self._generate_liquidity(price_data, interval)

        return HistoricalDataset(
            pool_address=str(pool_address),
            time_range=TimeRange(start=start, end=end, interval=interval),
            price_data=price_data,
            liquidity_data=liquidity_data,
            metadata=DatasetMetadata(
                data_points=len(price_data),
                coverage=1.0,
                source="mock",
            ),
        )

    # =========================================================================
    # Price series
    # =========================================================================

    def _generate_prices(self, start: datetime, total_points: int, interval: Interval) -> List[PricePoint]:
        rng = self.rng
        volatility = rng.uniform(*VOLATILITY_RANGES[interval.value])
        base_price = rng.uniform(SEED_PRICE_MIN, SEED_PRICE_MAX)
        base_volume = rng.uniform(*BASE_VOLUME_RANGES[interval.value])
        trend_bias = (rng.random() - 0.5) * TREND_BIAS_RANGE

        regimes = list(MarketRegime)
        regime = MarketRegime.RANGING
        strength = 0.5 + rng.random() * 0.5

        step = timedelta(milliseconds=interval.milliseconds)
        points: List[PricePoint] = []
        price = base_price

        for i in range(total_points):
            if rng.random() < REGIME_SWITCH_PROBABILITY:
                regime = regimes[int(rng.integers(len(regimes)))]
                strength = 0.3 + rng.random() * 0.7

            change = self._price_change(regime, strength, volatility, trend_bias, price, base_price)
            change = float(np.clip(change, -MAX_STEP_CHANGE, MAX_STEP_CHANGE))

            open_price = price
            close_price = open_price * (1 + change)

            upper_wick = min(rng.random() * volatility * WICK_VOLATILITY_FACTOR, MAX_WICK_RATIO)
            lower_wick = min(rng.random() * volatility * WICK_VOLATILITY_FACTOR, MAX_WICK_RATIO)
            high = max(open_price, close_price) + close_price * upper_wick
            low = min(open_price, close_price) - close_price * lower_wick

            volume = (
                base_volume
                * self._volume_multiplier(abs(change), regime, strength)
                * rng.uniform(0.8, 1.2)
            )
            volume_x = volume * rng.uniform(*VOLUME_SPLIT_RANGE)

            points.append(PricePoint(
                timestamp=start + i * step,
                open=open_price,
                high=high,
                low=low,
                close=close_price,
                volume=volume,
                volume_x=volume_x,
                volume_y=volume - volume_x,
            ))
            price = close_price

        return points

    def _price_change(
        self,
        regime: MarketRegime,
        strength: float,
        volatility: float,
        trend_bias: float,
        price: float,
        base_price: float
    ) -> float:
        """Fractional close/open change for one step."""
        rng = self.rng

        if regime == MarketRegime.TRENDING:
            # Persistent drift in the bias direction
            direction = 1 if trend_bias > 0 else -1
            change = (rng.random() - 0.3) * volatility * strength * direction
        elif regime == MarketRegime.VOLATILE:
            change = (rng.random() - 0.5) * volatility * (1 + strength)
        else:
            # Mean reversion towards the seed price
            reversion = (base_price - price) / price * MEAN_REVERSION_SPEED * strength
            change = reversion + (rng.random() - 0.5) * volatility * 0.5

        return change + trend_bias

    def _volume_multiplier(self, move: float, regime: MarketRegime, strength: float) -> float:
        """Volume scale for a step; larger moves trade more."""
        multiplier = 1 + move * VOLUME_MOVE_SENSITIVITY

        if regime == MarketRegime.TRENDING:
            multiplier *= 1.2 + strength * 0.3
        elif regime == MarketRegime.VOLATILE:
            multiplier *= 1.5 + strength * 0.8
        else:
            multiplier *= 0.8 + strength * 0.2

        return multiplier * self.rng.uniform(0.7, 1.3)

    # =========================================================================
    # Liquidity bins
    # =========================================================================

    def active_bin_id(self, price: float) -> int:
        """Bin whose ladder price is closest to the given price."""
        return int(round(math.log(price) / math.log1p(self.bin_step)))

    def bin_price(self, bin_id: int) -> float:
        return (1 + self.bin_step) ** bin_id

    def _generate_liquidity(self, price_data: List[PricePoint], interval: Interval) -> List[LiquidityBinSnapshot]:
        rng = self.rng
        offsets = np.arange(-self.active_bin_range, self.active_bin_range + 1)
        distances = np.abs(offsets)
        decay = np.exp(-LIQUIDITY_DECAY * distances)
        utilization_decay = np.exp(-UTILIZATION_DECAY * distances)
        # Bins above the active price hold mostly X, bins below mostly Y
        x_shares = np.clip(0.5 + offsets * 0.02, 0.1, 0.9)
        fee_rates = self.base_fee_rate * (1 + FEE_DISTANCE_FACTOR * distances)
        periods_per_day = DAY_MS / interval.milliseconds

        snapshots: List[LiquidityBinSnapshot] = []
        for point in price_data:
            active_bin = self.active_bin_id(point.close)
            liquidity = rng.uniform(*BIN_LIQUIDITY_RANGE, size=len(offsets)) * decay
            utilization = utilization_decay * rng.uniform(0.5, 1.0, size=len(offsets))
            volume_24h = point.volume * periods_per_day * liquidity / liquidity.sum()

            for idx, offset in enumerate(offsets):
                bin_id = active_bin + int(offset)
                snapshots.append(LiquidityBinSnapshot(
                    timestamp=point.timestamp,
                    bin_id=bin_id,
                    price=self.bin_price(bin_id),
                    liquidity_x=_format_liquidity(liquidity[idx] * x_shares[idx]),
                    liquidity_y=_format_liquidity(liquidity[idx] * (1 - x_shares[idx])),
                    fee_rate=float(fee_rates[idx]),
                    is_active=bool(distances[idx] <= ACTIVE_BIN_DISTANCE),
                    utilization_rate=float(utilization[idx]),
                    volume_24h=float(volume_24h[idx]),
                ))

        return snapshots
