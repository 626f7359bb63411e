"""CLI smoke tests."""

import numpy as np
import pandas as pd

import main
from backtester.core.config import Config


def _write_prices(path):
    dates = pd.date_range("2023-01-02", periods=120, freq="B")
    closes = np.linspace(100.0, 130.0, 120)
    pd.DataFrame({
        "date": dates.strftime("%Y-%m-%d"),
        "open": closes, "high": closes + 1, "low": closes - 1, "close": closes, "volume": 1000,
    }).to_csv(path / "TEST.csv", index=False)


def test_list(capsys):
    assert main.run_list() == 0
    out = capsys.readouterr().out
    for name in ("sma_crossover", "rsi_reversion", "momentum", "breakout", "buy_hold"):
        assert name in out


def test_single_backtest(tmp_path, capsys):
    _write_prices(tmp_path)
    config = Config(symbol="TEST", data_path=tmp_path)
    assert main.run_single(config, "buy_hold") == 0
    out = capsys.readouterr().out
    assert "buy_hold on TEST" in out
    assert "Total trades: 0" in out


def test_compare(tmp_path, capsys):
    _write_prices(tmp_path)
    config = Config(symbol="TEST", data_path=tmp_path, start_date="2023-02-01")
    assert main.run_compare(config, ["buy_hold", "momentum", "unknown"]) == 0
    out = capsys.readouterr().out
    assert " 1. buy_hold" in out
    assert "skipped unknown" in out
