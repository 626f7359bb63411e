"""
Moving-average crossover: long on a golden cross, flat on a death cross.
"""

from __future__ import annotations
from typing import Any, Mapping, Sequence

from backtester.core.types import PositionState, PriceBar, Signal
from backtester.indicators.technical import sma
from backtester.strategies.base import closes_through, register_strategy


@register_strategy(
    "sma_crossover",
    defaults={"short": 20, "long": 50},
    min_bars=lambda p: max(p["short"], p["long"]) + 1,
    minimums={"short": 1, "long": 1},
)
def sma_crossover(
    bars: Sequence[PriceBar],
    index: int,
    position: PositionState,
    params: Mapping[str, Any],
) -> Signal:
    """Buy when the short SMA crosses above the long SMA, sell on the cross back below."""
    short, long = params["short"], params["long"]
    # need both averages defined on the previous bar too
    if min(short, long) < 1 or index < max(short, long):
        return Signal.hold("insufficient history")
    closes = closes_through(bars, index)
    short_ma = sma(closes, short)
    long_ma = sma(closes, long)
    prev_short, prev_long = short_ma[-2], long_ma[-2]
    curr_short, curr_long = short_ma[-1], long_ma[-1]
    spread = abs(curr_short - curr_long) / curr_long if curr_long else 0.0

    if position != PositionState.LONG and prev_short <= prev_long and curr_short > curr_long:
        return Signal.buy(spread * 10, f"SMA{short} crossed above SMA{long}")
    if position == PositionState.LONG and prev_short >= prev_long and curr_short < curr_long:
        return Signal.sell(spread * 10, f"SMA{short} crossed below SMA{long}")
    return Signal.hold()
