"""
Technical indicators over a price series.
Every function returns a float array the same length as its input, so index i of the
output lines up with bar i.
"""

from __future__ import annotations
from typing import Sequence, Union

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

SeriesLike = Union[Sequence[float], np.ndarray, pd.Series]

RSI_NEUTRAL = 50.0


def _as_array(series: SeriesLike) -> np.ndarray:
    return np.asarray(series, dtype=float)


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


def sma(series: SeriesLike, period: int) -> np.ndarray:
    """Simple moving average. NaN until `period` values are available."""
    _check_period(period)
    arr = _as_array(series)
    out = np.full(len(arr), np.nan)
    if len(arr) >= period:
        out[period - 1:] = sliding_window_view(arr, period).mean(axis=1)
    return out


def ema(series: SeriesLike, period: int) -> np.ndarray:
    """
    Exponential moving average, alpha = 2 / (period + 1).
    Warm-up bars (i < period - 1) hold the running simple average, so there are no NaNs.
    """
    _check_period(period)
    arr = _as_array(series)
    out = np.empty(len(arr))
    if len(arr) == 0:
        return out
    alpha = 2.0 / (period + 1)
    out[0] = arr[0]
    for i in range(1, len(arr)):
        if i < period - 1:
            out[i] = arr[: i + 1].mean()
        else:
            out[i] = (arr[i] - out[i - 1]) * alpha + out[i - 1]
    return out


def rsi(series: SeriesLike, period: int = 14) -> np.ndarray:
    """
    Relative strength index from simple averages of the trailing `period` deltas.
    Bars without a full window read 50 (neutral) instead of NaN so comparisons stay defined.
    A window with no losses reads 100; a completely flat window stays at 50.
    """
    _check_period(period)
    arr = _as_array(series)
    out = np.full(len(arr), RSI_NEUTRAL)
    if len(arr) <= period:
        return out
    deltas = np.diff(arr)
    avg_gain = sliding_window_view(np.clip(deltas, 0.0, None), period).mean(axis=1)
    avg_loss = sliding_window_view(np.clip(-deltas, 0.0, None), period).mean(axis=1)
    values = np.full(len(avg_gain), RSI_NEUTRAL)
    no_loss = avg_loss == 0
    values[no_loss & (avg_gain > 0)] = 100.0
    has_loss = ~no_loss
    rs = avg_gain[has_loss] / avg_loss[has_loss]
    values[has_loss] = 100.0 - 100.0 / (1.0 + rs)
    out[period:] = values
    return out
