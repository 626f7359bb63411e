"""Abstract price data source: supplies ordered daily bars to the engine."""

from __future__ import annotations
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Tuple

from backtester.core.types import PriceBar


class PriceDataSource(ABC):
    """Source of historical daily bars for a symbol."""

    @abstractmethod
    def get_bars(
        self,
        symbol: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Tuple[PriceBar, ...]:
        """Return bars ascending by date, inclusive of start and end when given."""
        pass
