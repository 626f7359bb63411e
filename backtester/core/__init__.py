"""Core: config, types, errors, logging."""

from backtester.core.config import load_config, Config
from backtester.core.errors import (
    BacktesterError,
    UnknownStrategyError,
    InvalidParameterError,
    InsufficientDataError,
    MetricsDomainError,
)
from backtester.core.types import (
    PriceBar,
    PositionState,
    Signal,
    SignalAction,
    Trade,
    EquityPoint,
)
from backtester.core.logger import setup_logging

__all__ = [
    "load_config",
    "Config",
    "BacktesterError",
    "UnknownStrategyError",
    "InvalidParameterError",
    "InsufficientDataError",
    "MetricsDomainError",
    "PriceBar",
    "PositionState",
    "Signal",
    "SignalAction",
    "Trade",
    "EquityPoint",
    "setup_logging",
]
