"""
CSV price data: one file per symbol (<SYMBOL>.csv) or a single file.
Columns are matched case-insensitively; the date column may be named date, time or timestamp.
"""

from __future__ import annotations
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Tuple, Union

import pandas as pd

from backtester.core.errors import InsufficientDataError
from backtester.core.types import PriceBar
from backtester.data.base import PriceDataSource

logger = logging.getLogger("backtester.data")

_DATE_COLUMNS = ("date", "time", "timestamp", "datetime")
_PRICE_COLUMNS = ("open", "high", "low", "close")


def _normalize(df: pd.DataFrame) -> pd.DataFrame:
    df = df.rename(columns=lambda c: str(c).strip().lower())
    date_col = next((c for c in _DATE_COLUMNS if c in df.columns), None)
    if date_col is None:
        raise ValueError(f"No date column, expected one of {_DATE_COLUMNS}; got {list(df.columns)}")
    missing = [c for c in _PRICE_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing price columns: {missing}")
    out = pd.DataFrame({"date": pd.to_datetime(df[date_col]).dt.date})
    for col in _PRICE_COLUMNS:
        out[col] = pd.to_numeric(df[col], errors="coerce")
    out["volume"] = pd.to_numeric(df["volume"], errors="coerce").fillna(0.0) if "volume" in df.columns else 0.0
    return out


def bars_from_dataframe(df: pd.DataFrame) -> Tuple[PriceBar, ...]:
    """
    Convert an OHLCV DataFrame to bars. Drops rows with missing prices, keeps the last
    row per date, and sorts ascending.
    """
    df = _normalize(df)
    before = len(df)
    df = df.dropna(subset=list(_PRICE_COLUMNS))
    df = df.drop_duplicates(subset="date", keep="last").sort_values("date")
    if len(df) < before:
        logger.debug("Dropped %d incomplete or duplicate rows", before - len(df))
    return tuple(
        PriceBar(
            date=row.date,
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for row in df.itertuples(index=False)
    )


class CsvPriceSource(PriceDataSource):
    """Reads bars from a CSV file, or from <directory>/<SYMBOL>.csv."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _file_for(self, symbol: str) -> Path:
        if self.path.is_dir():
            return self.path / f"{symbol.upper()}.csv"
        return self.path

    def get_bars(
        self,
        symbol: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Tuple[PriceBar, ...]:
        path = self._file_for(symbol)
        if not path.exists():
            raise FileNotFoundError(f"No price file for {symbol}: {path}")
        bars = bars_from_dataframe(pd.read_csv(path))
        if start is not None:
            bars = tuple(b for b in bars if b.date >= start)
        if end is not None:
            bars = tuple(b for b in bars if b.date <= end)
        if not bars:
            raise InsufficientDataError(f"No usable bars for {symbol} in {path}")
        logger.info("Loaded %d bars for %s from %s", len(bars), symbol, path)
        return bars
