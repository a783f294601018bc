"""HTTP client for a remote historical data API"""

from datetime import datetime
from typing import Optional, Protocol

import requests
from loguru import logger
from pydantic import ValidationError

from ..core.exceptions import RemoteSourceError
from ..models.market_data import HistoricalDataset, Interval, ensure_utc


class HistoricalSource(Protocol):
    """Anything that can supply a dataset or None when it has no data."""

    def fetch(
        self,
        pool_address: str,
        start: datetime,
        end: datetime,
        interval: Interval
    ) -> Optional[HistoricalDataset]:
        ...


class RemoteHistoricalSource:
    """
    Fetches historical datasets from a JSON API.

    POSTs {poolAddress, startDate, endDate, interval} to {api_endpoint}/historical
    and expects a HistoricalDataset body in camelCase, or null when the API has
    no data for the request. No retries are performed here.
    """

    def __init__(
        self,
        api_endpoint: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.api_endpoint = api_endpoint.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    @property
    def url(self) -> str:
        return f"{self.api_endpoint}/historical"

    def fetch(
        self,
        pool_address: str,
        start: datetime,
        end: datetime,
        interval: Interval
    ) -> Optional[HistoricalDataset]:
        """
        Request a dataset from the API.

        Returns:
            The parsed dataset, or None when the API returns null

        Raises:
            RemoteSourceError: on transport errors, non-2xx status, or a malformed body
        """
        payload = {
            "poolAddress": str(pool_address),
            "startDate": ensure_utc(start).isoformat(),
            "endDate": ensure_utc(end).isoformat(),
            "interval": Interval.parse(interval).value,
        }

        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise RemoteSourceError(f"API request failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteSourceError(f"API returned a non-JSON body: {e}") from e

        if body is None:
            logger.debug(f"API has no historical data for {pool_address}")
            return None
        if not isinstance(body, dict):
            raise RemoteSourceError(f"Unexpected response: {type(body).__name__}")

        metadata = body.get("metadata")
        if isinstance(metadata, dict) and "source" not in metadata:
            body = {**body, "metadata": {**metadata, "source": "api"}}

        try:
            dataset = HistoricalDataset.model_validate(body)
        except ValidationError as e:
            raise RemoteSourceError(f"Malformed historical data: {e.error_count()} errors") from e

        if dataset.metadata.source != "api":
            dataset = dataset.model_copy(
                update={"metadata": dataset.metadata.model_copy(update={"source": "api"})}
            )

        logger.debug(f"Fetched {len(dataset.price_data)} candles from API for {pool_address}")
        return dataset
