"""Exception hierarchy for the backtester."""

from __future__ import annotations


class BacktesterError(Exception):
    """Base error for the backtester."""


class UnknownStrategyError(BacktesterError, KeyError):
    """Strategy name is not in the registry."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class InvalidParameterError(BacktesterError, ValueError):
    """Strategy parameter override does not match the strategy's parameters."""


class InsufficientDataError(BacktesterError, ValueError):
    """No usable price bars."""


class MetricsDomainError(BacktesterError, ValueError):
    """Metric is undefined for the given inputs (e.g. non-positive capital)."""
