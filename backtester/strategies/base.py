"""
Strategy interface and registry.

A strategy is a pure function ``(bars, index, position, params) -> Signal``. It may only
look at ``bars[: index + 1]`` and keeps no state between calls; indicators are recomputed
from the visible history every bar. Position transitions belong to the engine, strategies
only read the current state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

import numpy as np

from backtester.core.errors import InvalidParameterError, UnknownStrategyError
from backtester.core.types import PositionState, PriceBar, Signal


class StrategyFunction(Protocol):
    def __call__(
        self,
        bars: Sequence[PriceBar],
        index: int,
        position: PositionState,
        params: Mapping[str, Any],
    ) -> Signal:
        ...


@dataclass(frozen=True)
class RegisteredStrategy:
    """A named strategy with its default parameters and lookback requirement."""
    name: str
    func: StrategyFunction
    defaults: Mapping[str, Any] = field(default_factory=dict)
    min_bars: Callable[[Mapping[str, Any]], int] = lambda params: 1
    description: str = ""
    minimums: Mapping[str, float] = field(default_factory=dict)

    def resolve_params(self, overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Defaults overlaid with overrides, cast to the default's type and checked against minimums."""
        params = dict(self.defaults)
        for key, value in (overrides or {}).items():
            if key not in self.defaults:
                raise InvalidParameterError(
                    f"Unknown parameter {key!r} for strategy {self.name!r} "
                    f"(expected one of: {', '.join(sorted(self.defaults))})"
                )
            try:
                params[key] = type(self.defaults[key])(value)
            except (TypeError, ValueError) as e:
                raise InvalidParameterError(f"Bad value for {self.name}.{key}: {value!r}") from e
        for key, low in self.minimums.items():
            if params[key] < low:
                raise InvalidParameterError(f"{self.name}.{key} must be >= {low:g}, got {params[key]!r}")
        return params

    def required_bars(self, params: Optional[Mapping[str, Any]] = None) -> int:
        """Bars needed before the strategy can emit anything but HOLD."""
        return self.min_bars(self.resolve_params(params))

    def evaluate(
        self,
        bars: Sequence[PriceBar],
        index: int,
        position: PositionState,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Signal:
        resolved = self.resolve_params() if params is None else params
        return self.func(bars, index, position, resolved)


_REGISTRY: Dict[str, RegisteredStrategy] = {}


def register_strategy(
    name: str,
    defaults: Optional[Mapping[str, Any]] = None,
    min_bars: Optional[Callable[[Mapping[str, Any]], int]] = None,
    minimums: Optional[Mapping[str, float]] = None,
) -> Callable[[StrategyFunction], StrategyFunction]:
    """
    Decorator: add a strategy function to the registry under `name`.
    `minimums` maps parameter names to their lowest allowed value.
    """

    def decorator(func: StrategyFunction) -> StrategyFunction:
        if name in _REGISTRY:
            raise ValueError(f"Strategy already registered: {name}")
        doc = (func.__doc__ or "").strip()
        _REGISTRY[name] = RegisteredStrategy(
            name=name,
            func=func,
            defaults=dict(defaults or {}),
            min_bars=min_bars or (lambda params: 1),
            description=doc.splitlines()[0] if doc else "",
            minimums=dict(minimums or {}),
        )
        return func

    return decorator


def get_strategy(name: str) -> RegisteredStrategy:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise UnknownStrategyError(
            f"Unknown strategy {name!r} (available: {', '.join(list_strategies())})"
        ) from None


def list_strategies() -> List[str]:
    return sorted(_REGISTRY)


def closes_through(bars: Sequence[PriceBar], index: int) -> np.ndarray:
    """Close prices of bars[0..index]."""
    return np.fromiter((b.close for b in bars[: index + 1]), dtype=float, count=index + 1)
