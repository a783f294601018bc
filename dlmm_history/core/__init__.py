from .data_cache import HistoricalDataCache, CacheEntry, make_cache_key
from .exceptions import HistoricalDataError, RemoteSourceError, DataUnavailableError
from .logger import setup_logger, setup_logger_from_config, get_logger

__all__ = [
    "HistoricalDataCache",
    "CacheEntry",
    "make_cache_key",
    "HistoricalDataError",
    "RemoteSourceError",
    "DataUnavailableError",
    "setup_logger",
    "setup_logger_from_config",
    "get_logger",
]
