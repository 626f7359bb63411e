#!/usr/bin/env python3
"""
Backtester CLI: backtest | compare | list
Usage:
  python main.py backtest [--config config.yaml] [--strategy sma_crossover] [--symbol SPY]
  python main.py compare [--config config.yaml] [--strategies sma_crossover,momentum]
  python main.py list
"""

from __future__ import annotations
import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backtester.backtesting.comparison import compare_strategies
from backtester.backtesting.engine import BacktestResult, run_backtest
from backtester.core.config import Config, load_config
from backtester.core.errors import BacktesterError
from backtester.core.logger import setup_logging
from backtester.data.csv_source import CsvPriceSource
from backtester.strategies import get_strategy, list_strategies

logger = logging.getLogger("backtester")


def _to_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _load_bars(config: Config):
    source = CsvPriceSource(config.data_path)
    return source.get_bars(config.symbol, _to_date(config.start_date), _to_date(config.end_date))


def _print_result(result: BacktestResult) -> None:
    m = result.metrics
    print(f"\n--- {result.strategy} on {result.symbol} ({result.start_date} .. {result.end_date}, {result.bars} bars) ---")
    print(f"Capital: {result.initial_capital:.2f} -> {result.final_capital:.2f}")
    print(f"Total return: {m.total_return_pct:.2f}%  Annualized: {m.annualized_return_pct:.2f}%")
    print(f"Sharpe ratio: {m.sharpe_ratio:.2f}  Sortino ratio: {m.sortino_ratio:.2f}")
    print(f"Max drawdown: {m.max_drawdown_pct:.2f}% (trough {m.max_drawdown_date})")
    print(f"Total trades: {m.total_trades} (wins: {m.winning_trades}, losses: {m.losing_trades})")
    print(f"Win rate: {m.win_rate:.1f}%  Profit factor: {m.profit_factor:.2f}")
    print(f"Avg trade: {m.avg_trade_return_pct:.2f}%  Avg win: {m.avg_win:.2f}  Avg loss: {m.avg_loss:.2f}")
    print(f"Avg holding days: {m.avg_holding_days:.1f}")


def run_single(config: Config, strategy: str) -> int:
    """Run one strategy on the configured symbol."""
    bars = _load_bars(config)
    result = run_backtest(
        bars,
        strategy,
        symbol=config.symbol,
        initial_capital=config.initial_capital,
        position_size=config.position_size,
        params=config.params_for(strategy),
        record_final_liquidation=config.record_final_liquidation,
    )
    _print_result(result)
    return 0


def run_compare(config: Config, strategies: list[str]) -> int:
    """Run several strategies on the same bars and print them ranked."""
    bars = _load_bars(config)
    comparison = compare_strategies(
        bars,
        strategies,
        symbol=config.symbol,
        initial_capital=config.initial_capital,
        position_size=config.position_size,
        params_by_strategy={name: config.params_for(name) for name in strategies},
        record_final_liquidation=config.record_final_liquidation,
        max_workers=config.max_workers,
    )
    print(f"\n--- Strategy ranking for {config.symbol} ---")
    for rank, result in enumerate(comparison.ranked, start=1):
        m = result.metrics
        print(
            f"{rank:>2}. {result.strategy:<15} annualized {m.annualized_return_pct:>8.2f}%  "
            f"sharpe {m.sharpe_ratio:>6.2f}  max dd {m.max_drawdown_pct:>6.2f}%  trades {m.total_trades}"
        )
    for name, reason in comparison.skipped.items():
        print(f"    skipped {name}: {reason}")
    return 0 if comparison.ranked else 1


def run_list() -> int:
    for name in list_strategies():
        strategy = get_strategy(name)
        params = ", ".join(f"{k}={v}" for k, v in strategy.defaults.items())
        print(f"{name:<15} {strategy.description}" + (f" [{params}]" if params else ""))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Backtester CLI")
    parser.add_argument("mode", choices=["backtest", "compare", "list"], help="Run, compare or list strategies")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--strategy", default=None, help="Strategy for backtest mode")
    parser.add_argument("--strategies", default=None, help="Comma-separated strategies for compare mode")
    parser.add_argument("--symbol", default=None, help="Symbol (overrides config)")
    parser.add_argument("--data", type=Path, default=None, help="CSV file or directory (overrides config)")
    parser.add_argument("--trade-log", action="store_true", help="Log every fill at DEBUG")
    args = parser.parse_args()

    if args.mode == "list":
        return run_list()

    config = load_config(args.config, ROOT, overrides={"symbol": args.symbol, "data_path": args.data})
    setup_logging(config.log_level, config.log_dir, config.log_file, trade_log=args.trade_log)
    try:
        if args.mode == "backtest":
            return run_single(config, args.strategy or config.strategy)
        strategies = args.strategies.split(",") if args.strategies else (config.compare_strategies or list_strategies())
        return run_compare(config, [s.strip() for s in strategies if s.strip()])
    except (BacktesterError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
