"""Built-in reference strategies and strategy lookup.

Two ways to find strategies:
  1. Built-in strategies in this ``strategies/`` package (auto-discovered).
  2. Any importable class, named as ``"package.module:ClassName"``.
"""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path

from wordle_bench.strategy import Strategy

from wordle_bench.strategies.first_candidate import (
    FirstCandidateStrategy,
    HardModeFirstCandidateStrategy,
    SlateOpenerStrategy,
)
from wordle_bench.strategies.random_candidate import RandomCandidateStrategy

_PKG_DIR = Path(__file__).resolve().parent

__all__ = [
    "FirstCandidateStrategy",
    "HardModeFirstCandidateStrategy",
    "RandomCandidateStrategy",
    "SlateOpenerStrategy",
    "discover_strategies",
    "load_strategy",
]


def _subclasses_in_module(mod) -> list[type[Strategy]]:
    found: list[type[Strategy]] = []
    for attr_name in dir(mod):
        obj = getattr(mod, attr_name)
        if (
            isinstance(obj, type)
            and issubclass(obj, Strategy)
            and obj is not Strategy
            and obj.__module__ == mod.__name__
        ):
            found.append(obj)
    return found


def discover_strategies() -> list[type[Strategy]]:
    """Return all Strategy subclasses defined in this package, sorted by class name."""
    found: list[type[Strategy]] = []
    for info in pkgutil.iter_modules([str(_PKG_DIR)]):
        mod = importlib.import_module(f"{__name__}.{info.name}")
        found.extend(_subclasses_in_module(mod))
    return sorted(found, key=lambda cls: cls.__name__)


def load_strategy(spec: str) -> type[Strategy]:
    """Resolve ``"module:ClassName"`` (or a built-in class name) to a Strategy class.

    Raises
    ------
    ValueError
        If the module or class cannot be found or is not a Strategy.
    """
    if ":" not in spec:
        for cls in discover_strategies():
            if spec in (cls.__name__, cls().name):
                return cls
        raise ValueError(f"no built-in strategy named {spec!r}; use 'module:ClassName'")

    module_name, _, cls_name = spec.partition(":")
    try:
        mod = importlib.import_module(module_name)
    except ImportError as exc:
        raise ValueError(f"cannot import strategy module {module_name!r}: {exc}") from exc
    obj = getattr(mod, cls_name, None)
    if not (isinstance(obj, type) and issubclass(obj, Strategy)):
        raise ValueError(f"{spec!r} is not a Strategy subclass")
    return obj
