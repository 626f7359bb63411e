"""
Backtest engine: replays bars through a strategy, long-only, one position at a time,
fills at the bar close.
"""

from __future__ import annotations
import logging
import math
from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from backtester.analytics.metrics import DrawdownTracker, PerformanceMetrics, compute_metrics
from backtester.core.errors import InsufficientDataError
from backtester.core.types import EquityPoint, PositionState, PriceBar, SignalAction, Trade
from backtester.strategies.base import RegisteredStrategy, get_strategy

logger = logging.getLogger("backtester.backtest")


@dataclass(frozen=True)
class BacktestResult:
    """Outcome of one run: identity, capital summary, metrics, trades and equity curve."""
    symbol: str
    strategy: str
    params: Mapping[str, Any]
    start_date: date
    end_date: date
    bars: int
    initial_capital: float
    final_capital: float
    metrics: PerformanceMetrics
    trades: Tuple[Trade, ...] = field(default_factory=tuple)
    equity_curve: Tuple[EquityPoint, ...] = field(default_factory=tuple)

    @property
    def annualized_return_pct(self) -> float:
        return self.metrics.annualized_return_pct

    @property
    def max_drawdown_pct(self) -> float:
        return self.metrics.max_drawdown_pct

    @property
    def max_drawdown_date(self) -> Optional[date]:
        return self.metrics.max_drawdown_date

    def equity_frame(self) -> pd.DataFrame:
        """Equity curve as a DataFrame indexed by date."""
        df = pd.DataFrame(
            {"date": [p.date for p in self.equity_curve], "equity": [p.equity for p in self.equity_curve]}
        )
        return df.set_index("date")

    def trades_frame(self) -> pd.DataFrame:
        """Trades as a DataFrame, one row per trade."""
        columns = [f.name for f in fields(Trade)]
        return pd.DataFrame([asdict(t) for t in self.trades], columns=columns)


class BacktestEngine:
    """
    Runs one strategy over a chronological bar sequence.

    FLAT --BUY--> LONG buys floor(cash * position_size / close) shares; zero shares is a no-op.
    LONG --SELL--> FLAT sells everything at the close and books a Trade.
    A position still open after the last bar is liquidated at the last close into final
    capital. That liquidation is only booked as a Trade when record_final_liquidation is set.
    """

    def __init__(
        self,
        strategy: Union[str, RegisteredStrategy],
        initial_capital: float = 10000.0,
        position_size: float = 1.0,
        params: Optional[Mapping[str, Any]] = None,
        record_final_liquidation: bool = False,
    ):
        if initial_capital <= 0:
            raise ValueError(f"initial_capital must be positive, got {initial_capital}")
        if not 0 < position_size <= 1:
            raise ValueError(f"position_size must be in (0, 1], got {position_size}")
        self.strategy = get_strategy(strategy) if isinstance(strategy, str) else strategy
        self.params: Dict[str, Any] = self.strategy.resolve_params(params)
        self.initial_capital = initial_capital
        self.position_size = position_size
        self.record_final_liquidation = record_final_liquidation

    def run(self, bars: Iterable[PriceBar], symbol: str = "") -> BacktestResult:
        """
        Replay bars in the given order (assumed ascending by date, not checked).
        One equity point is produced per bar.
        """
        bars = tuple(bars)
        if not bars:
            raise InsufficientDataError(f"No price bars for {symbol or 'series'}")
        name = self.strategy.name
        required = self.strategy.required_bars(self.params)
        if len(bars) < required:
            logger.warning(
                "%s: %d bars < %d required by %s; no signals expected",
                symbol, len(bars), required, name,
            )
        logger.info("Backtest %s on %s: %d bars %s..%s", name, symbol, len(bars), bars[0].date, bars[-1].date)

        cash = self.initial_capital
        shares = 0
        entry_price = 0.0
        entry_date: Optional[date] = None
        position = PositionState.FLAT
        trades: List[Trade] = []
        equity_curve: List[EquityPoint] = []
        drawdown = DrawdownTracker(self.initial_capital)

        for i, bar in enumerate(bars):
            signal = self.strategy.evaluate(bars, i, position, self.params)

            if signal.action == SignalAction.BUY and position == PositionState.FLAT:
                qty = math.floor(cash * self.position_size / bar.close) if bar.close > 0 else 0
                if qty <= 0:
                    logger.debug("%s %s: BUY skipped, cash %.2f buys 0 shares at %.2f", symbol, bar.date, cash, bar.close)
                else:
                    cash -= qty * bar.close
                    shares, entry_price, entry_date = qty, bar.close, bar.date
                    position = PositionState.LONG
                    logger.debug("%s %s: BUY %d @ %.2f (%s)", symbol, bar.date, qty, bar.close, signal.reason)

            elif signal.action == SignalAction.SELL and position == PositionState.LONG:
                trade = self._close_trade(symbol, shares, entry_price, entry_date, bar, "signal")
                trades.append(trade)
                cash += shares * bar.close
                shares = 0
                position = PositionState.FLAT
                logger.debug(
                    "%s %s: SELL %d @ %.2f pnl=%.2f (%s)",
                    symbol, bar.date, trade.shares, bar.close, trade.pnl, signal.reason,
                )

            equity = cash + shares * bar.close
            equity_curve.append(EquityPoint(bar.date, equity))
            drawdown.update(bar.date, equity)

        # Liquidate any open position at the last close
        if position == PositionState.LONG:
            last = bars[-1]
            if self.record_final_liquidation:
                trades.append(self._close_trade(symbol, shares, entry_price, entry_date, last, "end_of_data"))
            logger.debug("%s %s: end of data, liquidating %d @ %.2f", symbol, last.date, shares, last.close)
            cash += shares * last.close
            shares = 0

        metrics = compute_metrics(
            self.initial_capital, cash, trades, equity_curve, n_bars=len(bars), drawdown=drawdown,
        )
        logger.info(
            "Backtest %s on %s done: final %.2f, return %.2f%%, %d trades",
            name, symbol, cash, metrics.total_return_pct, metrics.total_trades,
        )
        return BacktestResult(
            symbol=symbol,
            strategy=name,
            params=dict(self.params),
            start_date=bars[0].date,
            end_date=bars[-1].date,
            bars=len(bars),
            initial_capital=self.initial_capital,
            final_capital=cash,
            metrics=metrics,
            trades=tuple(trades),
            equity_curve=tuple(equity_curve),
        )

    @staticmethod
    def _close_trade(
        symbol: str,
        shares: int,
        entry_price: float,
        entry_date: date,
        bar: PriceBar,
        exit_reason: str,
    ) -> Trade:
        cost = shares * entry_price
        pnl = shares * bar.close - cost
        return Trade(
            symbol=symbol,
            entry_date=entry_date,
            exit_date=bar.date,
            entry_price=entry_price,
            exit_price=bar.close,
            shares=shares,
            pnl=pnl,
            pnl_pct=pnl / cost * 100.0,
            holding_days=(bar.date - entry_date).days,
            exit_reason=exit_reason,
        )


def run_backtest(
    bars: Iterable[PriceBar],
    strategy: Union[str, RegisteredStrategy],
    symbol: str = "",
    initial_capital: float = 10000.0,
    position_size: float = 1.0,
    params: Optional[Mapping[str, Any]] = None,
    record_final_liquidation: bool = False,
) -> BacktestResult:
    """Build an engine and run it once."""
    engine = BacktestEngine(
        strategy,
        initial_capital=initial_capital,
        position_size=position_size,
        params=params,
        record_final_liquidation=record_final_liquidation,
    )
    return engine.run(bars, symbol=symbol)
