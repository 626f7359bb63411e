"""Analytics: performance metrics (returns, Sharpe, Sortino, drawdown, win rate, etc.)."""

from backtester.analytics.metrics import (
    TRADING_DAYS_PER_YEAR,
    DrawdownTracker,
    PerformanceMetrics,
    annualized_return_pct,
    compute_metrics,
    expectancy,
    max_drawdown,
    period_returns,
    profit_factor,
    sharpe_ratio,
    sortino_ratio,
    total_return_pct,
    win_rate,
)

__all__ = [
    "TRADING_DAYS_PER_YEAR",
    "DrawdownTracker",
    "PerformanceMetrics",
    "annualized_return_pct",
    "compute_metrics",
    "expectancy",
    "max_drawdown",
    "period_returns",
    "profit_factor",
    "sharpe_ratio",
    "sortino_ratio",
    "total_return_pct",
    "win_rate",
]
