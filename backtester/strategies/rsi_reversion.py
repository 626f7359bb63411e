"""
RSI mean reversion: buy oversold, sell overbought.
"""

from __future__ import annotations
from typing import Any, Mapping, Sequence

from backtester.core.types import PositionState, PriceBar, Signal
from backtester.indicators.technical import rsi
from backtester.strategies.base import closes_through, register_strategy


@register_strategy(
    "rsi_reversion",
    defaults={"period": 14, "oversold": 30.0, "overbought": 70.0},
    min_bars=lambda p: p["period"] + 1,
    minimums={"period": 1, "oversold": 0.0, "overbought": 0.0},
)
def rsi_reversion(
    bars: Sequence[PriceBar],
    index: int,
    position: PositionState,
    params: Mapping[str, Any],
) -> Signal:
    """Buy when RSI drops below oversold, sell when it rises above overbought."""
    period = params["period"]
    oversold, overbought = params["oversold"], params["overbought"]
    if period < 1 or index < period:
        return Signal.hold("insufficient history")
    value = float(rsi(closes_through(bars, index), period)[-1])

    if position != PositionState.LONG and value < oversold:
        # strength grows with distance below the threshold
        strength = (oversold - value) / oversold if oversold > 0 else 1.0
        return Signal.buy(strength, f"RSI {value:.1f} < {oversold:g}")
    if position == PositionState.LONG and value > overbought:
        room = 100.0 - overbought
        strength = (value - overbought) / room if room > 0 else 1.0
        return Signal.sell(strength, f"RSI {value:.1f} > {overbought:g}")
    return Signal.hold()
