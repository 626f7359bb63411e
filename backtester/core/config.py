"""
Load configuration from config.yaml and .env. Environment variables win over the file.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(
    config_path: Optional[Path] = None,
    project_root: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> "Config":
    """
    Load config.yaml, overlay env, then explicit overrides (e.g. CLI flags; None values are
    ignored). Returns Config.
    """
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default).strip()

    def env_bool(key: str, default: bool = False) -> bool:
        return os.getenv(key, str(default)).lower() in ("true", "1", "yes")

    def env_int(key: str, default: int = 0) -> int:
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    def env_float(key: str, default: float = 0.0) -> float:
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    data_section = data.get("data", {})
    backtest = data.get("backtest", {})
    logging_section = data.get("logging", {})

    compare = backtest.get("compare") or []
    if env("COMPARE_STRATEGIES"):
        compare = [s.strip() for s in env("COMPARE_STRATEGIES").split(",") if s.strip()]

    values: Dict[str, Any] = dict(
        # Data
        symbol=env("SYMBOL", data_section.get("symbol", "SPY")).upper(),
        data_path=Path(env("DATA_PATH", str(data_section.get("path", "data")))),
        start_date=data_section.get("start_date"),
        end_date=data_section.get("end_date"),
        # Backtest
        strategy=env("STRATEGY", backtest.get("strategy", "sma_crossover")),
        compare_strategies=list(compare),
        initial_capital=env_float("INITIAL_CAPITAL", float(backtest.get("initial_capital", 10000.0))),
        position_size=env_float("POSITION_SIZE", float(backtest.get("position_size", 1.0))),
        record_final_liquidation=env_bool(
            "RECORD_FINAL_LIQUIDATION", bool(backtest.get("record_final_liquidation", False))
        ),
        max_workers=env_int("MAX_WORKERS", int(backtest.get("max_workers", 1))),
        # Per-strategy parameter overrides
        strategy_params={name: dict(params or {}) for name, params in (data.get("strategies") or {}).items()},
        # Logging
        log_level=env("LOG_LEVEL", logging_section.get("level", "INFO")),
        log_dir=Path(logging_section.get("log_dir", "logs")),
        log_file=logging_section.get("log_file", "backtester.log"),
    )
    for key, value in (overrides or {}).items():
        if key not in Config.__slots__:
            raise ValueError(f"Unknown config key: {key}")
        if value is not None:
            values[key] = value
    values["symbol"] = str(values["symbol"]).upper()
    return Config(**values)


class Config:
    """Unified configuration. Treat as immutable after load."""

    __slots__ = (
        "symbol", "data_path", "start_date", "end_date",
        "strategy", "compare_strategies", "initial_capital", "position_size",
        "record_final_liquidation", "max_workers", "strategy_params",
        "log_level", "log_dir", "log_file",
    )

    def __init__(
        self,
        symbol: str = "SPY",
        data_path: Path = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        strategy: str = "sma_crossover",
        compare_strategies: Optional[List[str]] = None,
        initial_capital: float = 10000.0,
        position_size: float = 1.0,
        record_final_liquidation: bool = False,
        max_workers: int = 1,
        strategy_params: Optional[Dict[str, Dict[str, Any]]] = None,
        log_level: str = "INFO",
        log_dir: Path = None,
        log_file: str = "backtester.log",
    ):
        self.symbol = symbol
        self.data_path = Path(data_path) if data_path else Path("data")
        self.start_date = start_date
        self.end_date = end_date
        self.strategy = strategy
        self.compare_strategies = compare_strategies or []
        self.initial_capital = initial_capital
        self.position_size = position_size
        self.record_final_liquidation = record_final_liquidation
        self.max_workers = max(1, max_workers)
        self.strategy_params = strategy_params or {}
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file

    def params_for(self, strategy: str) -> Dict[str, Any]:
        """Parameter overrides configured for a strategy (empty if none)."""
        return dict(self.strategy_params.get(strategy, {}))
