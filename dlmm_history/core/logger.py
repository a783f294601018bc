"""Loguru sinks for the DLMM historical data simulator"""

import sys
from pathlib import Path
from loguru import logger
from typing import Optional

from ..config.settings import HistoricalDataConfig

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"
CACHE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message}"

CACHE_MODULE = "dlmm_history.core.data_cache"


def _is_cache_event(record) -> bool:
    return record["name"] == CACHE_MODULE or "cache" in record["message"].lower()


def setup_logger(
    log_dir: Optional[Path] = Path("logs"),
    log_level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "14 days"
) -> None:
    """
    Route simulator logs to the console and, when log_dir is set, to files.

    Files written under log_dir:
        history_*.log  everything at log_level
        errors_*.log   ERROR and above
        cache_*.log    hits, evictions and expiries from the dataset cache,
                       kept at DEBUG regardless of log_level

    Args:
        log_dir: Directory for log files; None logs to the console only
        log_level: Minimum level for console and main file
        rotation: When to rotate the main and error files
        retention: How long to keep rotated files
    """
    logger.remove()

    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT, colorize=True)

    if log_dir is None:
        logger.debug("Logger initialized (console only)")
        return

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_dir / "history_{time:YYYY-MM-DD}.log",
        level=log_level,
        format=FILE_FORMAT,
        rotation=rotation,
        retention=retention,
        compression="gz"
    )
    logger.add(
        log_dir / "errors_{time:YYYY-MM-DD}.log",
        level="ERROR",
        format=FILE_FORMAT,
        rotation=rotation,
        retention=retention,
        compression="gz"
    )
    logger.add(
        log_dir / "cache_{time:YYYY-MM-DD}.log",
        level="DEBUG",
        format=CACHE_FORMAT,
        rotation="1 day",
        retention="3 days",
        filter=_is_cache_event
    )

    logger.debug(f"Logger initialized, writing to {log_dir}")


def setup_logger_from_config(config: HistoricalDataConfig) -> None:
    """Apply the logs_dir and log_level of a service config."""
    setup_logger(log_dir=config.logs_dir, log_level=config.log_level)


def get_logger(name: Optional[str] = None):
    """Logger bound to a component name, or the shared logger."""
    if name:
        return logger.bind(name=name)
    return logger
