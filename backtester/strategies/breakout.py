"""
Channel breakout: buy a close above the prior N-bar high, exit below the prior N-bar low.
"""

from __future__ import annotations
from typing import Any, Mapping, Sequence

from backtester.core.types import PositionState, PriceBar, Signal
from backtester.strategies.base import register_strategy


@register_strategy(
    "breakout",
    defaults={"lookback": 20},
    min_bars=lambda p: p["lookback"] + 1,
    minimums={"lookback": 1},
)
def breakout(
    bars: Sequence[PriceBar],
    index: int,
    position: PositionState,
    params: Mapping[str, Any],
) -> Signal:
    """Buy on a close above the prior channel high, sell on a close below the prior channel low."""
    lookback = params["lookback"]
    if lookback < 1 or index < lookback:
        return Signal.hold("insufficient history")
    window = bars[index - lookback: index]
    channel_high = max(b.high for b in window)
    channel_low = min(b.low for b in window)
    close = bars[index].close

    if position != PositionState.LONG and close > channel_high:
        return Signal.buy(1.0, f"close {close:.2f} > {lookback}-bar high {channel_high:.2f}")
    if position == PositionState.LONG and close < channel_low:
        return Signal.sell(1.0, f"close {close:.2f} < {lookback}-bar low {channel_low:.2f}")
    return Signal.hold()
