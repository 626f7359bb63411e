"""Buy and hold benchmark."""

from __future__ import annotations
from typing import Any, Mapping, Sequence

from backtester.core.types import PositionState, PriceBar, Signal
from backtester.strategies.base import register_strategy


@register_strategy("buy_hold")
def buy_hold(
    bars: Sequence[PriceBar],
    index: int,
    position: PositionState,
    params: Mapping[str, Any],
) -> Signal:
    """Buy on the first bar and never sell."""
    if index == 0 and position != PositionState.LONG:
        return Signal.buy(1.0, "initial entry")
    return Signal.hold()
