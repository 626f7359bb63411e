"""Backtesting: bar-by-bar long-only simulation and strategy comparison."""

from backtester.backtesting.engine import BacktestEngine, BacktestResult, run_backtest
from backtester.backtesting.comparison import ComparisonResult, compare_strategies

__all__ = ["BacktestEngine", "BacktestResult", "run_backtest", "ComparisonResult", "compare_strategies"]
