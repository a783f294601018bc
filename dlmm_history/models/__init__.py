from .market_data import (
    Interval,
    PricePoint,
    LiquidityBinSnapshot,
    TimeRange,
    DatasetMetadata,
    HistoricalDataset,
    CacheEntryStats,
    CacheStats,
    ensure_utc,
    to_epoch_ms,
)

__all__ = [
    "Interval",
    "PricePoint",
    "LiquidityBinSnapshot",
    "TimeRange",
    "DatasetMetadata",
    "HistoricalDataset",
    "CacheEntryStats",
    "CacheStats",
    "ensure_utc",
    "to_epoch_ms",
]
