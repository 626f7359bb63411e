"""Indicators: moving averages and RSI."""

from backtester.indicators.technical import sma, ema, rsi, RSI_NEUTRAL

__all__ = ["sma", "ema", "rsi", "RSI_NEUTRAL"]
