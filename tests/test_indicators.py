"""Unit tests for indicators.technical."""

import math

import numpy as np
import pandas as pd
import pytest

from backtester.indicators.technical import ema, rsi, sma


def test_sma_constant_series():
    values = sma([100.0] * 60, 20)
    assert len(values) == 60
    assert all(math.isnan(v) for v in values[:19])
    assert values[19] == 100.0
    assert values[59] == 100.0


def test_sma_trailing_mean():
    values = sma([1, 2, 3, 4, 5], 3)
    assert np.isnan(values[:2]).all()
    assert values[2:].tolist() == pytest.approx([2.0, 3.0, 4.0])


def test_sma_short_series_all_nan():
    assert np.isnan(sma([1.0, 2.0], 5)).all()


def test_ema_warmup_then_recursive():
    # alpha = 0.5; i=1 is the simple average, then recursive
    values = ema([1.0, 2.0, 3.0, 4.0], 3)
    assert values.tolist() == pytest.approx([1.0, 1.5, 2.25, 3.125])


def test_ema_empty():
    assert len(ema([], 10)) == 0


def test_rsi_constant_is_neutral():
    values = rsi([100.0] * 60, 14)
    assert (values == 50.0).all()


def test_rsi_warmup_neutral_then_all_gains():
    values = rsi(list(range(1, 31)), 14)
    assert (values[:14] == 50.0).all()
    assert (values[14:] == 100.0).all()


def test_rsi_all_losses():
    values = rsi(list(range(30, 0, -1)), 14)
    assert values[14] == pytest.approx(0.0)


def test_rsi_mixed_window():
    # deltas 1, -0.5, 1 => avg gain 2/3, avg loss 1/6, RS 4 => 80
    values = rsi([10.0, 11.0, 10.5, 11.5], 3)
    assert values[3] == pytest.approx(80.0)


def test_accepts_pandas_series():
    s = pd.Series([1.0, 2.0, 3.0, 4.0])
    assert sma(s, 2)[-1] == pytest.approx(3.5)


def test_invalid_period():
    with pytest.raises(ValueError):
        sma([1.0, 2.0], 0)
    with pytest.raises(ValueError):
        rsi([1.0, 2.0], 0)
