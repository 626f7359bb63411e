"""Price data adapters (outside the engine)."""

from backtester.data.base import PriceDataSource
from backtester.data.csv_source import CsvPriceSource, bars_from_dataframe

__all__ = ["PriceDataSource", "CsvPriceSource", "bars_from_dataframe"]
