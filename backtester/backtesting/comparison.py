"""
Strategy comparison: run several strategies on the same bars and rank by annualized return.
"""

from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from backtester.backtesting.engine import BacktestEngine, BacktestResult
from backtester.core.errors import InvalidParameterError, UnknownStrategyError
from backtester.core.types import PriceBar
from backtester.strategies.base import get_strategy

logger = logging.getLogger("backtester.backtest.comparison")


@dataclass
class ComparisonResult:
    """Results ranked best first, plus strategies that could not be run."""
    ranked: List[BacktestResult] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)

    @property
    def best(self) -> Optional[BacktestResult]:
        return self.ranked[0] if self.ranked else None


def compare_strategies(
    bars: Iterable[PriceBar],
    strategies: Sequence[str],
    symbol: str = "",
    initial_capital: float = 10000.0,
    position_size: float = 1.0,
    params_by_strategy: Optional[Mapping[str, Mapping[str, Any]]] = None,
    record_final_liquidation: bool = False,
    max_workers: int = 1,
) -> ComparisonResult:
    """
    Run each named strategy on identical bars and capital. Unknown names and invalid
    parameter overrides are logged and skipped. Each run owns its ledger, so max_workers > 1 runs them on a thread pool.
    """
    bars = tuple(bars)
    params_by_strategy = params_by_strategy or {}
    out = ComparisonResult()
    engines: List[BacktestEngine] = []
    for name in dict.fromkeys(strategies):
        try:
            engines.append(BacktestEngine(
                get_strategy(name),
                initial_capital=initial_capital,
                position_size=position_size,
                params=params_by_strategy.get(name),
                record_final_liquidation=record_final_liquidation,
            ))
        except (UnknownStrategyError, InvalidParameterError) as e:
            logger.warning("Skipping strategy %s: %s", name, e)
            out.skipped[name] = str(e)

    if max_workers > 1 and len(engines) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(lambda eng: eng.run(bars, symbol=symbol), engines))
    else:
        results = [eng.run(bars, symbol=symbol) for eng in engines]

    out.ranked = sorted(results, key=lambda r: r.annualized_return_pct, reverse=True)
    return out
