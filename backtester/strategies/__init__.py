"""Strategies: registry and built-in implementations."""

from backtester.strategies.base import (
    RegisteredStrategy,
    StrategyFunction,
    get_strategy,
    list_strategies,
    register_strategy,
)
# Importing the modules registers the built-in strategies
from backtester.strategies.breakout import breakout
from backtester.strategies.buy_hold import buy_hold
from backtester.strategies.momentum import momentum
from backtester.strategies.rsi_reversion import rsi_reversion
from backtester.strategies.sma_crossover import sma_crossover

__all__ = [
    "RegisteredStrategy",
    "StrategyFunction",
    "get_strategy",
    "list_strategies",
    "register_strategy",
    "breakout",
    "buy_hold",
    "momentum",
    "rsi_reversion",
    "sma_crossover",
]
