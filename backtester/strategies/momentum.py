"""Rate-of-change momentum."""

from __future__ import annotations
from typing import Any, Mapping, Sequence

from backtester.core.types import PositionState, PriceBar, Signal
from backtester.strategies.base import register_strategy


@register_strategy(
    "momentum",
    defaults={"lookback": 20, "threshold": 0.05},
    min_bars=lambda p: p["lookback"] + 1,
    minimums={"lookback": 1, "threshold": 0.0},
)
def momentum(
    bars: Sequence[PriceBar],
    index: int,
    position: PositionState,
    params: Mapping[str, Any],
) -> Signal:
    """Buy when the lookback return exceeds the threshold, sell when it falls below -threshold."""
    lookback, threshold = params["lookback"], params["threshold"]
    if lookback < 1 or index < lookback:
        return Signal.hold("insufficient history")
    base = bars[index - lookback].close
    if base <= 0:
        return Signal.hold("non-positive base price")
    change = (bars[index].close - base) / base
    strength = abs(change) / (2 * threshold) if threshold > 0 else 1.0

    if position != PositionState.LONG and change > threshold:
        return Signal.buy(strength, f"{lookback}-bar return {change:+.2%} > {threshold:.2%}")
    if position == PositionState.LONG and change < -threshold:
        return Signal.sell(strength, f"{lookback}-bar return {change:+.2%} < {-threshold:.2%}")
    return Signal.hold()
