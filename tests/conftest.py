"""Shared fixtures: synthetic daily bars."""

from datetime import date, timedelta
from typing import Callable, Optional, Sequence

import numpy as np
import pytest

from backtester.core.types import PriceBar

START = date(2024, 1, 1)


def build_bars(
    closes: Sequence[float],
    highs: Optional[Sequence[float]] = None,
    lows: Optional[Sequence[float]] = None,
    start: date = START,
) -> list:
    """One bar per calendar day; high/low default to the close."""
    highs = closes if highs is None else highs
    lows = closes if lows is None else lows
    return [
        PriceBar(
            date=start + timedelta(days=i),
            open=float(c),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=1000.0,
        )
        for i, (c, h, lo) in enumerate(zip(closes, highs, lows))
    ]


@pytest.fixture
def make_bars() -> Callable[..., list]:
    return build_bars


@pytest.fixture
def flat_bars():
    """Constant $100 close for 60 bars."""
    return build_bars([100.0] * 60)


@pytest.fixture
def rising_bars():
    """Close rising linearly from $100 to $200 across 252 bars."""
    return build_bars(np.linspace(100.0, 200.0, 252))


@pytest.fixture
def random_walk_bars():
    rng = np.random.default_rng(7)
    closes = 100.0 * np.cumprod(1.0 + rng.normal(0.0005, 0.02, 300))
    highs = closes * (1.0 + rng.uniform(0.0, 0.01, 300))
    lows = closes * (1.0 - rng.uniform(0.0, 0.01, 300))
    return build_bars(closes, highs, lows)
