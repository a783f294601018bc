"""Tests for HistoricalDataConfig"""

import pytest
from pathlib import Path
from pydantic import ValidationError

from dlmm_history.config import HistoricalDataConfig


class TestDefaults:
    """Tests for default settings"""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DLMM_HISTORY_CACHE_SIZE", raising=False)
        monkeypatch.delenv("DLMM_HISTORY_API_ENDPOINT", raising=False)
        config = HistoricalDataConfig(_env_file=None)

        assert config.cache_size == 10
        assert config.cache_ttl_ms == 24 * 60 * 60 * 1000
        assert config.fallback_to_mock is True
        assert config.api_endpoint is None
        assert config.remote_enabled is False
        assert config.logs_dir == Path("logs")

    def test_remote_enabled_with_endpoint(self):
        assert HistoricalDataConfig(api_endpoint="https://api.test.com").remote_enabled is True


class TestEnvironment:
    """Tests for environment overrides"""

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("DLMM_HISTORY_CACHE_SIZE", "3")
        monkeypatch.setenv("DLMM_HISTORY_FALLBACK_TO_MOCK", "false")
        config = HistoricalDataConfig(_env_file=None)

        assert config.cache_size == 3
        assert config.fallback_to_mock is False

    def test_init_overrides_env(self, monkeypatch):
        monkeypatch.setenv("DLMM_HISTORY_CACHE_SIZE", "3")

        assert HistoricalDataConfig(cache_size=7, _env_file=None).cache_size == 7


class TestValidation:
    """Tests for setting constraints"""

    def test_negative_ttl_rejected(self):
        with pytest.raises(ValidationError):
            HistoricalDataConfig(cache_ttl_ms=-1)

    def test_fee_ceiling(self):
        with pytest.raises(ValidationError, match="yields fee"):
            HistoricalDataConfig(base_fee_rate=0.05)

    def test_narrow_ladder_allows_higher_base_fee(self):
        config = HistoricalDataConfig(base_fee_rate=0.05, active_bin_range=5)
        assert config.base_fee_rate == 0.05

    def test_ladder_width_capped(self):
        with pytest.raises(ValidationError):
            HistoricalDataConfig(active_bin_range=101)

    def test_widest_ladder_accepted(self):
        config = HistoricalDataConfig(active_bin_range=100, base_fee_rate=0.0001)
        assert config.active_bin_range == 100
