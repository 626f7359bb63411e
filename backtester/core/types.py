"""
Core data types for bars, signals, positions, trades, and equity points.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from enum import Enum


class PositionState(str, Enum):
    FLAT = "FLAT"
    LONG = "LONG"


class SignalAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class PriceBar:
    """OHLCV bar for one trading day."""
    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


@dataclass(frozen=True)
class Signal:
    """Strategy output for a single bar. Strength is in [0, 1]."""
    action: SignalAction
    strength: float = 0.0
    reason: str = ""

    @classmethod
    def hold(cls, reason: str = "") -> "Signal":
        return cls(SignalAction.HOLD, 0.0, reason)

    @classmethod
    def buy(cls, strength: float, reason: str) -> "Signal":
        return cls(SignalAction.BUY, _clip(strength), reason)

    @classmethod
    def sell(cls, strength: float, reason: str) -> "Signal":
        return cls(SignalAction.SELL, _clip(strength), reason)


@dataclass(frozen=True)
class Trade:
    """Closed long trade for analytics."""
    symbol: str
    entry_date: date
    exit_date: date
    entry_price: float
    exit_price: float
    shares: int
    pnl: float
    pnl_pct: float
    holding_days: int
    exit_reason: str = "signal"  # "signal" | "end_of_data"


@dataclass(frozen=True)
class EquityPoint:
    """Total account value (cash + marked position) at a bar's close."""
    date: date
    equity: float


def _clip(value: float) -> float:
    return max(0.0, min(1.0, float(value)))
