"""Exception hierarchy for historical data retrieval"""


class HistoricalDataError(Exception):
    """Base error for the historical data service."""


class RemoteSourceError(HistoricalDataError):
    """The remote historical data API failed or returned an unusable body."""


class DataUnavailableError(HistoricalDataError):
    """No source could provide data and mock generation is disabled."""

    def __init__(self, pool_address: str, reason: str = ""):
        self.pool_address = pool_address
        self.reason = reason
        message = (
            f"Historical data unavailable for {pool_address}: "
            "Unable to fetch historical data and mock data generation is disabled"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
