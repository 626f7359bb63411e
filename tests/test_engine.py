"""Unit tests for backtesting.engine."""

import logging
import math

import numpy as np
import pytest

from backtester.backtesting.engine import BacktestEngine, run_backtest
from backtester.core.errors import InsufficientDataError, InvalidParameterError
from backtester.core.types import Signal, SignalAction
from backtester.strategies.base import RegisteredStrategy


def scripted(actions):
    """Strategy that emits actions[index] ('B', 'S' or anything else for HOLD)."""

    def func(bars, index, position, params):
        code = actions[index] if index < len(actions) else "."
        if code == "B":
            return Signal.buy(1.0, "scripted")
        if code == "S":
            return Signal.sell(1.0, "scripted")
        return Signal.hold()

    return RegisteredStrategy(name="scripted", func=func)


@pytest.mark.parametrize("name", ["breakout", "buy_hold", "momentum", "rsi_reversion", "sma_crossover"])
def test_equity_curve_one_point_per_bar(random_walk_bars, name):
    result = run_backtest(random_walk_bars, name, symbol="TEST")
    assert len(result.equity_curve) == len(random_walk_bars)
    assert [p.date for p in result.equity_curve] == [b.date for b in random_walk_bars]


@pytest.mark.parametrize("name", ["breakout", "buy_hold", "momentum", "rsi_reversion", "sma_crossover"])
def test_compounded_returns_match_total(random_walk_bars, name):
    result = run_backtest(random_walk_bars, name)
    equity = np.array([p.equity for p in result.equity_curve])
    rets = equity[1:] / equity[:-1] - 1.0
    assert np.prod(1.0 + rets) - 1.0 == pytest.approx(equity[-1] / equity[0] - 1.0, abs=1e-9)
    assert equity[-1] == pytest.approx(result.final_capital)


def test_constant_price_no_trades(flat_bars):
    result = run_backtest(flat_bars, "sma_crossover", symbol="FLAT", initial_capital=10000.0)
    m = result.metrics
    assert m.total_trades == 0
    assert m.total_return_pct == 0.0
    assert m.annualized_return_pct == 0.0
    assert m.sharpe_ratio == 0.0
    assert m.max_drawdown_pct == 0.0
    assert m.max_drawdown_date is None
    assert result.final_capital == 10000.0
    assert all(p.equity == 10000.0 for p in result.equity_curve)


def test_buy_hold_liquidation_not_recorded(rising_bars):
    result = run_backtest(rising_bars, "buy_hold", initial_capital=10000.0)
    # 100 shares at $100, liquidated at $200
    assert result.metrics.total_trades == 0
    assert result.trades == ()
    assert result.final_capital == pytest.approx(20000.0)
    assert result.metrics.total_return_pct == pytest.approx(100.0)
    assert result.metrics.annualized_return_pct == pytest.approx(100.0)
    assert result.metrics.win_rate == 0.0
    assert result.metrics.profit_factor == 0.0
    assert result.equity_curve[0].equity == pytest.approx(10000.0)


def test_buy_hold_liquidation_recorded_as_trade(rising_bars):
    result = run_backtest(rising_bars, "buy_hold", initial_capital=10000.0, record_final_liquidation=True)
    assert result.metrics.total_trades == 1
    trade = result.trades[0]
    assert trade.exit_reason == "end_of_data"
    assert trade.shares == 100
    assert trade.entry_date == rising_bars[0].date
    assert trade.exit_date == rising_bars[-1].date
    assert trade.pnl == pytest.approx(10000.0)
    assert trade.holding_days == 251
    assert result.final_capital == pytest.approx(20000.0)
    assert result.metrics.profit_factor == math.inf


def test_single_winning_trade(make_bars):
    bars = make_bars([100.0, 120.0, 150.0])
    result = BacktestEngine(scripted("B.S"), initial_capital=10000.0).run(bars, symbol="WIN")
    assert len(result.trades) == 1
    trade = result.trades[0]
    assert trade.symbol == "WIN"
    assert trade.shares == 100
    assert trade.entry_price == 100.0
    assert trade.exit_price == 150.0
    assert trade.pnl == pytest.approx(5000.0)
    assert trade.pnl_pct == pytest.approx(50.0)
    assert trade.holding_days == 2
    assert trade.exit_reason == "signal"
    m = result.metrics
    assert m.win_rate == 100.0
    assert m.profit_factor == math.inf
    assert result.final_capital == pytest.approx(15000.0)


def test_losing_trade(make_bars):
    bars = make_bars([100.0, 90.0, 80.0])
    m = BacktestEngine(scripted("B.S"), initial_capital=10000.0).run(bars).metrics
    assert m.win_rate == 0.0
    assert m.profit_factor == 0.0
    assert m.losing_trades == 1
    assert m.avg_loss == pytest.approx(-2000.0)
    assert m.avg_trade_return_pct == pytest.approx(-20.0)


def test_leftover_cash_and_position_size(make_bars):
    bars = make_bars([30.0, 30.0])
    result = BacktestEngine(scripted("B"), initial_capital=1000.0, position_size=0.5).run(bars)
    # floor(500 / 30) = 16 shares, 520 cash left
    assert result.equity_curve[0].equity == pytest.approx(1000.0)
    assert result.final_capital == pytest.approx(1000.0)


def test_zero_shares_is_noop(make_bars):
    bars = make_bars([100.0, 200.0, 300.0])
    result = BacktestEngine(scripted("BBS"), initial_capital=50.0).run(bars)
    assert result.trades == ()
    assert result.final_capital == 50.0
    assert [p.equity for p in result.equity_curve] == [50.0, 50.0, 50.0]


def test_duplicate_signals_ignored(make_bars):
    bars = make_bars([100.0, 110.0, 120.0, 130.0, 140.0])
    # SELL while flat and BUY while long are ignored
    result = BacktestEngine(scripted("SBBSS"), initial_capital=1000.0).run(bars)
    assert len(result.trades) == 1
    assert result.trades[0].entry_price == 110.0
    assert result.trades[0].exit_price == 130.0


def test_drawdown_trough_date(make_bars):
    bars = make_bars([100.0, 120.0, 90.0, 110.0])
    result = BacktestEngine(scripted("B"), initial_capital=10000.0).run(bars)
    assert result.max_drawdown_pct == pytest.approx(25.0)
    assert result.max_drawdown_date == bars[2].date


def test_short_series_warns_and_degrades(make_bars, caplog):
    bars = make_bars([100.0 + i for i in range(10)])
    with caplog.at_level(logging.WARNING, logger="backtester.backtest"):
        result = run_backtest(bars, "sma_crossover")
    assert result.metrics.total_trades == 0
    assert result.final_capital == 10000.0
    assert any("required" in r.getMessage() for r in caplog.records)


def test_single_bar(make_bars):
    result = run_backtest(make_bars([100.0]), "buy_hold")
    assert len(result.equity_curve) == 1
    assert result.metrics.annualized_return_pct == pytest.approx(0.0)
    assert result.metrics.sharpe_ratio == 0.0


def test_empty_series_raises():
    with pytest.raises(InsufficientDataError):
        run_backtest([], "buy_hold")


@pytest.mark.parametrize("kwargs", [
    {"initial_capital": 0.0},
    {"initial_capital": -5.0},
    {"position_size": 0.0},
    {"position_size": 1.5},
])
def test_invalid_engine_arguments(kwargs):
    with pytest.raises(ValueError):
        BacktestEngine("buy_hold", **kwargs)


def test_result_metadata_and_frames(rising_bars):
    result = run_backtest(rising_bars, "momentum", symbol="RISE", params={"lookback": 10}, record_final_liquidation=True)
    assert result.symbol == "RISE"
    assert result.strategy == "momentum"
    assert result.params == {"lookback": 10, "threshold": 0.05}
    assert result.start_date == rising_bars[0].date
    assert result.end_date == rising_bars[-1].date
    assert result.bars == 252
    equity = result.equity_frame()
    assert len(equity) == 252
    assert equity["equity"].iloc[-1] == pytest.approx(result.final_capital)
    trades = result.trades_frame()
    assert len(trades) == len(result.trades)
    assert "pnl_pct" in trades.columns


def test_invalid_strategy_params_rejected_up_front(flat_bars):
    with pytest.raises(InvalidParameterError):
        run_backtest(flat_bars, "sma_crossover", params={"short": 0, "long": 3})
    with pytest.raises(InvalidParameterError):
        BacktestEngine("momentum", params={"lookback": -1})
