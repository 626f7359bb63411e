"""
Performance metrics: returns, Sharpe, Sortino, drawdown, win rate, profit factor, trade averages.
Returns are per-bar simple returns; annualization assumes 252 trading days per year.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

import numpy as np

from backtester.core.errors import MetricsDomainError
from backtester.core.types import EquityPoint, Trade

TRADING_DAYS_PER_YEAR = 252


@dataclass(frozen=True)
class PerformanceMetrics:
    """Aggregate performance metrics. Percentages are in percent units (50.0 = 50%)."""
    total_return_pct: float
    annualized_return_pct: float
    sharpe_ratio: float
    sortino_ratio: float
    max_drawdown_pct: float
    max_drawdown_date: Optional[date]
    win_rate: float
    profit_factor: float
    expectancy: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    avg_trade_return_pct: float
    avg_win: float
    avg_loss: float
    avg_holding_days: float


class DrawdownTracker:
    """Running peak-to-trough drawdown. Records the trough date of the deepest drawdown."""

    def __init__(self, initial_equity: float):
        self.peak = initial_equity
        self.max_drawdown = 0.0
        self.max_drawdown_date: Optional[date] = None

    def update(self, when: date, equity: float) -> float:
        """Feed one equity observation; returns the current drawdown fraction."""
        if equity > self.peak:
            self.peak = equity
        drawdown = (self.peak - equity) / self.peak if self.peak > 0 else 0.0
        if drawdown > self.max_drawdown:
            self.max_drawdown = drawdown
            self.max_drawdown_date = when
        return drawdown

    @property
    def max_drawdown_pct(self) -> float:
        return self.max_drawdown * 100.0


def total_return_pct(initial_capital: float, final_capital: float) -> float:
    if initial_capital <= 0:
        raise MetricsDomainError(f"initial capital must be positive, got {initial_capital}")
    return (final_capital - initial_capital) / initial_capital * 100.0


def years_from_bars(n_bars: int) -> float:
    return n_bars / TRADING_DAYS_PER_YEAR


def annualized_return_pct(initial_capital: float, final_capital: float, n_bars: int) -> float:
    """Compound annual growth over n_bars trading days."""
    if initial_capital <= 0:
        raise MetricsDomainError(f"initial capital must be positive, got {initial_capital}")
    if final_capital <= 0:
        raise MetricsDomainError(f"annualized return undefined for final capital {final_capital}")
    if n_bars <= 0:
        raise MetricsDomainError("annualized return needs at least one bar")
    years = years_from_bars(n_bars)
    return ((final_capital / initial_capital) ** (1.0 / years) - 1.0) * 100.0


def period_returns(equity: Sequence[float]) -> List[float]:
    """Simple returns between consecutive equity values. A zero base yields a zero return."""
    arr = np.asarray(equity, dtype=float)
    if len(arr) < 2:
        return []
    prev, curr = arr[:-1], arr[1:]
    rets = np.divide(curr - prev, prev, out=np.zeros_like(prev), where=prev != 0)
    return rets.tolist()


def sharpe_ratio(returns: Sequence[float], risk_free_rate: float = 0.0,
                 periods_per_year: float = TRADING_DAYS_PER_YEAR) -> float:
    """Annualized Sharpe. Zero volatility gives 0."""
    if len(returns) == 0:
        return 0.0
    arr = np.asarray(returns, dtype=float)
    excess = arr - risk_free_rate / periods_per_year
    if excess.std() <= 1e-12:
        return 0.0
    return float(np.sqrt(periods_per_year) * excess.mean() / excess.std())


def sortino_ratio(returns: Sequence[float], risk_free_rate: float = 0.0,
                  periods_per_year: float = TRADING_DAYS_PER_YEAR) -> float:
    """Annualized Sortino (downside deviation). Falls back to Sharpe without downside."""
    if len(returns) == 0:
        return 0.0
    arr = np.asarray(returns, dtype=float)
    excess = arr - risk_free_rate / periods_per_year
    downside = arr[arr < 0]
    if len(downside) == 0 or downside.std() <= 1e-12:
        return sharpe_ratio(returns, risk_free_rate, periods_per_year)
    return float(np.sqrt(periods_per_year) * excess.mean() / downside.std())


def max_drawdown(equity: Sequence[EquityPoint], initial_equity: Optional[float] = None) -> Tuple[float, Optional[date]]:
    """Max drawdown in percent and the date of its trough."""
    if not equity:
        return 0.0, None
    tracker = DrawdownTracker(equity[0].equity if initial_equity is None else initial_equity)
    for point in equity:
        tracker.update(point.date, point.equity)
    return tracker.max_drawdown_pct, tracker.max_drawdown_date


def win_rate(pnls: Sequence[float]) -> float:
    """Percent of trades with positive PnL."""
    if not pnls:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls) * 100.0


def profit_factor(pnls: Sequence[float]) -> float:
    """Gross profit / gross loss. inf when there are profits but no losses, 0 when neither."""
    wins = sum(p for p in pnls if p > 0)
    losses = sum(-p for p in pnls if p < 0)
    if losses <= 0:
        return float("inf") if wins > 0 else 0.0
    return wins / losses


def _mean(values: Sequence[float]) -> float:
    return float(sum(values) / len(values)) if values else 0.0


def expectancy(pnls: Sequence[float]) -> float:
    """Average PnL per trade."""
    return _mean(pnls)


def compute_metrics(
    initial_capital: float,
    final_capital: float,
    trades: Sequence[Trade],
    equity_curve: Sequence[EquityPoint],
    n_bars: Optional[int] = None,
    drawdown: Optional[DrawdownTracker] = None,
) -> PerformanceMetrics:
    """
    Full metrics for a finished run.
    n_bars defaults to the equity curve length. Without a tracker the drawdown is
    recomputed from the equity curve, seeded with initial_capital.
    """
    n_bars = len(equity_curve) if n_bars is None else n_bars
    pnls = [t.pnl for t in trades]
    wins = [t for t in trades if t.pnl > 0]
    losses = [t for t in trades if t.pnl < 0]
    rets = period_returns([p.equity for p in equity_curve])
    if drawdown is not None:
        dd_pct, dd_date = drawdown.max_drawdown_pct, drawdown.max_drawdown_date
    else:
        dd_pct, dd_date = max_drawdown(equity_curve, initial_capital)

    return PerformanceMetrics(
        total_return_pct=total_return_pct(initial_capital, final_capital),
        annualized_return_pct=annualized_return_pct(initial_capital, final_capital, n_bars),
        sharpe_ratio=sharpe_ratio(rets),
        sortino_ratio=sortino_ratio(rets),
        max_drawdown_pct=dd_pct,
        max_drawdown_date=dd_date,
        win_rate=win_rate(pnls),
        profit_factor=profit_factor(pnls),
        expectancy=expectancy(pnls),
        total_trades=len(trades),
        winning_trades=len(wins),
        losing_trades=len(losses),
        avg_trade_return_pct=_mean([t.pnl_pct for t in trades]),
        avg_win=_mean([t.pnl for t in wins]),
        avg_loss=_mean([t.pnl for t in losses]),
        avg_holding_days=_mean([t.holding_days for t in trades]),
    )
