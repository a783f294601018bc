"""Historical market data simulator for Solana DLMM pools"""

from .config import HistoricalDataConfig
from .core import DataUnavailableError, HistoricalDataError, RemoteSourceError, setup_logger
from .models import HistoricalDataset, Interval, LiquidityBinSnapshot, PricePoint
from .services import HistoricalDataService, MockMarketDataGenerator, RemoteHistoricalSource

__version__ = "0.1.0"

__all__ = [
    "HistoricalDataConfig",
    "HistoricalDataService",
    "MockMarketDataGenerator",
    "RemoteHistoricalSource",
    "HistoricalDataset",
    "Interval",
    "PricePoint",
    "LiquidityBinSnapshot",
    "HistoricalDataError",
    "DataUnavailableError",
    "RemoteSourceError",
    "setup_logger",
]
