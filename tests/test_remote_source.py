"""Tests for RemoteHistoricalSource"""

import pytest
import requests
from unittest.mock import Mock

from dlmm_history.config import HistoricalDataConfig
from dlmm_history.core.exceptions import DataUnavailableError, RemoteSourceError
from dlmm_history.models import Interval
from dlmm_history.services import HistoricalDataService, RemoteHistoricalSource


def _response(body=None, status_error=None, json_error=None):
    response = Mock()
    response.raise_for_status = Mock(side_effect=status_error)
    if json_error is not None:
        response.json = Mock(side_effect=json_error)
    else:
        response.json = Mock(return_value=body)
    return response


@pytest.fixture
def session():
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture
def source(session):
    return RemoteHistoricalSource("https://api.test.com", timeout=5, session=session)


@pytest.fixture
def api_payload(hourly_dataset):
    """Wire-format body as the API would send it."""
    return hourly_dataset.model_dump(mode="json", by_alias=True)


class TestRequest:
    """Tests for the outgoing request"""

    def test_posts_to_historical_endpoint(self, source, session, api_payload, pool_address, start_date, end_date):
        session.post.return_value = _response(api_payload)

        source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR)

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://api.test.com/historical"
        assert kwargs["timeout"] == 5
        assert kwargs["json"] == {
            "poolAddress": pool_address,
            "startDate": "2024-01-01T00:00:00+00:00",
            "endDate": "2024-01-02T00:00:00+00:00",
            "interval": "1h",
        }

    def test_sets_json_headers(self, source, session):
        assert session.headers["Content-Type"] == "application/json"
        assert session.headers["Accept"] == "application/json"


class TestResponseParsing:
    """Tests for response handling"""

    def test_parses_dataset_and_marks_api(self, source, session, api_payload, pool_address, start_date, end_date):
        session.post.return_value = _response(api_payload)

        dataset = source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR)

        assert dataset.metadata.source == "api"
        assert len(dataset.price_data) == 24
        assert dataset.price_data[0].timestamp == start_date

    def test_missing_source_defaults_to_api(self, source, session, api_payload, pool_address, start_date, end_date):
        del api_payload["metadata"]["source"]
        session.post.return_value = _response(api_payload)

        dataset = source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR)

        assert dataset.metadata.source == "api"

    def test_null_body_returns_none(self, source, session, pool_address, start_date, end_date):
        session.post.return_value = _response(None)

        assert source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR) is None

    def test_http_error(self, source, session, pool_address, start_date, end_date):
        session.post.return_value = _response(status_error=requests.HTTPError("503 Server Error"))

        with pytest.raises(RemoteSourceError, match="API request failed"):
            source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR)

    def test_connection_error(self, source, session, pool_address, start_date, end_date):
        session.post.side_effect = requests.ConnectionError("Network error")

        with pytest.raises(RemoteSourceError):
            source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR)

    def test_non_json_body(self, source, session, pool_address, start_date, end_date):
        session.post.return_value = _response(json_error=ValueError("Expecting value"))

        with pytest.raises(RemoteSourceError, match="non-JSON"):
            source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR)

    def test_unexpected_body_type(self, source, session, pool_address, start_date, end_date):
        session.post.return_value = _response([1, 2, 3])

        with pytest.raises(RemoteSourceError, match="Unexpected response"):
            source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR)

    def test_malformed_dataset(self, source, session, pool_address, start_date, end_date):
        session.post.return_value = _response({"poolAddress": pool_address, "priceData": "oops"})

        with pytest.raises(RemoteSourceError, match="Malformed"):
            source.fetch(pool_address, start_date, end_date, Interval.ONE_HOUR)


class TestServiceIntegration:
    """Remote source wired into HistoricalDataService"""

    def test_api_data_served_and_cached(self, session, api_payload, pool_address, start_date, end_date):
        session.post.return_value = _response(api_payload)
        source = RemoteHistoricalSource("https://api.test.com", session=session)
        service = HistoricalDataService(HistoricalDataConfig(cache_size=5), source=source)

        first = service.fetch_historical_data(pool_address, start_date, end_date, "1h")
        second = service.fetch_historical_data(pool_address, start_date, end_date, "1h")

        assert first.metadata.source == "api"
        assert second is first
        assert session.post.call_count == 1

    def test_network_failure_without_fallback(self, session, pool_address, start_date, end_date):
        session.post.side_effect = requests.ConnectionError("Network error")
        source = RemoteHistoricalSource("https://api.test.com", session=session)
        service = HistoricalDataService(
            HistoricalDataConfig(fallback_to_mock=False, api_endpoint="https://api.test.com"),
            source=source,
        )

        with pytest.raises(DataUnavailableError, match="mock data generation is disabled"):
            service.fetch_historical_data(pool_address, start_date, end_date, "1h")

    def test_network_failure_with_fallback(self, session, pool_address, start_date, end_date):
        session.post.side_effect = requests.ConnectionError("Network error")
        source = RemoteHistoricalSource("https://api.test.com", session=session)
        service = HistoricalDataService(HistoricalDataConfig(fallback_to_mock=True), source=source, seed=2)

        result = service.fetch_historical_data(pool_address, start_date, end_date, "1h")

        assert result.metadata.source == "mock"
        assert len(result.price_data) == 24
