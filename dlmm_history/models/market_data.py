"""Historical market data models for DLMM pools"""

from enum import Enum
from datetime import datetime, timezone
from typing import List, Literal, Tuple
import pandas as pd
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..config.constants import INTERVAL_MS, DEFAULT_INTERVAL, MAX_FEE_RATE


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    """Milliseconds since the Unix epoch."""
    return int(round(ensure_utc(value).timestamp() * 1000))


class Interval(str, Enum):
    """Candle interval buckets."""
    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    ONE_HOUR = "1h"
    FOUR_HOURS = "4h"
    ONE_DAY = "1d"

    @property
    def milliseconds(self) -> int:
        return INTERVAL_MS[self.value]

    @classmethod
    def parse(cls, value) -> "Interval":
        """Resolve an interval, defaulting to 1h for anything unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown interval {value!r}, defaulting to {DEFAULT_INTERVAL}")
            return cls(DEFAULT_INTERVAL)


class _FrozenModel(BaseModel):
    """Immutable model serialized with camelCase aliases."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PricePoint(_FrozenModel):
    """One OHLCV candle."""
    timestamp: datetime = Field(..., description="Candle open time (UTC)")
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(..., ge=0, description="Total volume in quote units")
    volume_x: float = Field(..., ge=0, description="Volume attributed to token X")
    volume_y: float = Field(..., ge=0, description="Volume attributed to token Y")

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_candle(self) -> "PricePoint":
        if self.high < max(self.open, self.close):
            raise ValueError(f"high {self.high} below body {max(self.open, self.close)}")
        if self.low > min(self.open, self.close):
            raise ValueError(f"low {self.low} above body {min(self.open, self.close)}")
        # X/Y split must account for the total within 10%
        if abs(self.volume_x + self.volume_y - self.volume) > 0.1 * self.volume:
            raise ValueError(
                f"volume split {self.volume_x} + {self.volume_y} does not match volume {self.volume}"
            )
        return self


class LiquidityBinSnapshot(_FrozenModel):
    """Liquidity held in a single DLMM bin at a point in time."""
    timestamp: datetime
    bin_id: int
    price: float = Field(..., gt=0, description="Price of the bin on the ladder")
    liquidity_x: str = Field(..., description="Token X liquidity as a decimal string")
    liquidity_y: str = Field(..., description="Token Y liquidity as a decimal string")
    fee_rate: float = Field(..., gt=0, lt=MAX_FEE_RATE)
    is_active: bool = False
    utilization_rate: float = Field(0.0, ge=0, le=1)
    volume_24h: float = Field(0.0, ge=0, alias="volume24h")

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @field_validator("liquidity_x", "liquidity_y", mode="before")
    @classmethod
    def _positive_decimal(cls, value) -> str:
        if isinstance(value, (int, float)):
            value = f"{value:.6f}"
        if float(value) <= 0:
            raise ValueError(f"liquidity must be positive, got {value}")
        return value

    @property
    def total_liquidity(self) -> float:
        return float(self.liquidity_x) + float(self.liquidity_y)


class TimeRange(_FrozenModel):
    start: datetime
    end: datetime
    interval: Interval

    @field_validator("start", "end")
    @classmethod
    def _utc_bounds(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class DatasetMetadata(_FrozenModel):
    data_points: int = Field(..., ge=0)
    coverage: float = Field(1.0, ge=0, le=1, description="Fraction of the range covered by data")
    source: Literal["mock", "api"] = "mock"


class HistoricalDataset(_FrozenModel):
    """
    Price series and bin liquidity for one pool over one time range.

    Built once per fetch (or served from cache) and never mutated.
    """
    pool_address: str
    time_range: TimeRange
    price_data: Tuple[PricePoint, ...] = Field(default_factory=tuple)
    liquidity_data: Tuple[LiquidityBinSnapshot, ...] = Field(default_factory=tuple)
    metadata: DatasetMetadata

    @field_validator("pool_address", mode="before")
    @classmethod
    def _stringify_address(cls, value) -> str:
        return str(value)

    def price_frame(self) -> pd.DataFrame:
        """Price series as an OHLCV DataFrame indexed by timestamp."""
        columns = ["open", "high", "low", "close", "volume", "volume_x", "volume_y"]
        if not self.price_data:
            return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name="date", tz="UTC"))

        df = pd.DataFrame([p.model_dump() for p in self.price_data])
        df = df.rename(columns={"timestamp": "date"})
        df["date"] = pd.to_datetime(df["date"], utc=True)
        return df.set_index("date")[columns]

    def liquidity_frame(self) -> pd.DataFrame:
        """Bin snapshots with numeric liquidity columns, indexed by timestamp."""
        columns = [
            "bin_id", "price", "liquidity_x", "liquidity_y", "fee_rate",
            "is_active", "utilization_rate", "volume_24h",
        ]
        if not self.liquidity_data:
            return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name="date", tz="UTC"))

        df = pd.DataFrame([b.model_dump() for b in self.liquidity_data])
        df = df.rename(columns={"timestamp": "date"})
        df["date"] = pd.to_datetime(df["date"], utc=True)
        df["liquidity_x"] = df["liquidity_x"].astype(float)
        df["liquidity_y"] = df["liquidity_y"].astype(float)
        return df.set_index("date")[columns]


class CacheEntryStats(BaseModel):
    key: str
    hits: int
    size: int


class CacheStats(BaseModel):
    """Snapshot of cache usage."""
    size: int = Field(0, description="Number of live entries")
    total_hits: int = Field(0, description="Hits accumulated across entries")
    total_size: int = Field(0, description="Estimated bytes held")
    entries: List[CacheEntryStats] = Field(default_factory=list, description="Entries by hits, descending")
