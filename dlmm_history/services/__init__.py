"""Historical data services

Components:
- HistoricalDataService: cache-fronted facade with remote and mock sources
- MockMarketDataGenerator: synthetic OHLCV and bin liquidity
- RemoteHistoricalSource: JSON API client
"""

from .mock_generator import MockMarketDataGenerator, MarketRegime
from .remote_source import RemoteHistoricalSource, HistoricalSource
from .historical_data_service import HistoricalDataService

__all__ = [
    "MockMarketDataGenerator",
    "MarketRegime",
    "RemoteHistoricalSource",
    "HistoricalSource",
    "HistoricalDataService",
]
