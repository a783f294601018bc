from .settings import HistoricalDataConfig

__all__ = ["HistoricalDataConfig"]
