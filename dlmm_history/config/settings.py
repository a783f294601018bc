"""Configuration settings loader for the DLMM historical data simulator"""

from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from .constants import (
    DEFAULT_ACTIVE_BIN_RANGE,
    MAX_ACTIVE_BIN_RANGE,
    DEFAULT_BASE_FEE_RATE,
    DEFAULT_BIN_STEP_BPS,
    FEE_DISTANCE_FACTOR,
    MAX_FEE_RATE,
)


class HistoricalDataConfig(BaseSettings):
    """Service settings, overridable through DLMM_HISTORY_* environment variables."""

    # Cache
    cache_size: int = Field(10, description="Max datasets held in the cache")
    cache_ttl_ms: int = Field(24 * 60 * 60 * 1000, ge=0, description="Cache entry TTL in milliseconds")

    # Sources
    fallback_to_mock: bool = Field(True, description="Generate mock data when the remote source fails")
    api_endpoint: Optional[str] = Field(None, description="Base URL of the historical data API")
    request_timeout: float = Field(10.0, gt=0, description="HTTP timeout in seconds")

    # Liquidity ladder
    bin_step_bps: int = Field(DEFAULT_BIN_STEP_BPS, gt=0, description="Bin step in basis points")
    active_bin_range: int = Field(
        DEFAULT_ACTIVE_BIN_RANGE, ge=2, le=MAX_ACTIVE_BIN_RANGE,
        description="Bins emitted on each side of the active bin")
    base_fee_rate: float = Field(DEFAULT_BASE_FEE_RATE, gt=0, description="Fee rate of the active bin")

    # Logging
    log_level: str = Field("INFO", description="Minimum log level")
    logs_dir: Path = Field(Path("logs"), description="Logs directory")

    model_config = {
        "env_prefix": "DLMM_HISTORY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def _check_fee_ceiling(self) -> "HistoricalDataConfig":
        # Outermost bin carries the highest fee
        max_fee = self.base_fee_rate * (1 + self.active_bin_range * FEE_DISTANCE_FACTOR)
        if max_fee >= MAX_FEE_RATE:
            raise ValueError(
                f"base_fee_rate {self.base_fee_rate} with active_bin_range "
                f"{self.active_bin_range} yields fee {max_fee:.4f} >= {MAX_FEE_RATE}"
            )
        return self

    @property
    def remote_enabled(self) -> bool:
        return bool(self.api_endpoint)
