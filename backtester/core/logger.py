"""
Logging for backtest runs. Everything logs under the "backtester" logger:
backtester.backtest (run summaries, per-trade fills at DEBUG), backtester.backtest.comparison
(skipped strategies) and backtester.data (loaded files).
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_file: Optional[str] = None,
    trade_log: bool = False,
) -> logging.Logger:
    """
    Send backtester logs to stdout and, when log_dir and log_file are set, to a file.
    trade_log lowers backtester.backtest to DEBUG so every fill and skipped entry is logged.
    Calling again replaces the previous handlers.
    """
    package_logger = logging.getLogger("backtester")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    package_logger.addHandler(console)

    if log_dir and log_file:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_dir / log_file, encoding="utf-8")
        fh.setFormatter(formatter)
        package_logger.addHandler(fh)

    engine_logger = logging.getLogger("backtester.backtest")
    engine_logger.setLevel(logging.DEBUG if trade_log else logging.NOTSET)
    return package_logger
