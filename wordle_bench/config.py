"""Harness configuration.

A :class:`HarnessConfig` is built once per run and never mutated.  It can be
created directly, from a mapping (``HarnessConfig.from_dict``) or from a JSON
file (``load_config``), e.g.::

    {
        "words_to_test": {"random": 200, "seed": 7},
        "execution_mode": "parallel",
        "max_turns": 6,
        "significance_threshold": 0.05
    }
"""

from __future__ import annotations

import enum
import json
import random
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Sequence

from wordle_bench.errors import InvalidConfig
from wordle_bench.wordle_env import DEFAULT_WORD_LENGTH


class ExecutionMode(str, enum.Enum):
    SERIAL = "serial"
    PARALLEL = "parallel"


class SelectionKind(str, enum.Enum):
    ALL = "all"
    FIRST = "first"
    RANDOM = "random"


@dataclass(frozen=True)
class WordSelection:
    """Which target words a run uses."""

    kind: SelectionKind = SelectionKind.ALL
    count: int | None = None
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.kind is SelectionKind.ALL:
            if self.count is not None:
                raise InvalidConfig("'all' selection takes no count")
        elif self.count is None or self.count < 0:
            raise InvalidConfig(f"{self.kind.value!r} selection needs a count >= 0")

    @classmethod
    def all(cls) -> WordSelection:
        return cls(SelectionKind.ALL)

    @classmethod
    def first(cls, n: int) -> WordSelection:
        return cls(SelectionKind.FIRST, n)

    @classmethod
    def random(cls, n: int, seed: int = 42) -> WordSelection:
        return cls(SelectionKind.RANDOM, n, seed)

    def apply(self, words: Sequence[str]) -> list[str]:
        """Return the selected words, in a reproducible order."""
        words = list(words)
        if self.kind is SelectionKind.ALL:
            return words
        n = min(self.count, len(words))
        if self.kind is SelectionKind.FIRST:
            return words[:n]
        return random.Random(self.seed).sample(words, n)

    def to_json(self) -> str | dict[str, int]:
        if self.kind is SelectionKind.ALL:
            return "all"
        if self.kind is SelectionKind.FIRST:
            return {"first": self.count}
        return {"random": self.count, "seed": self.seed}

    @classmethod
    def from_json(cls, value: Any) -> WordSelection:
        if value == "all" or value is None:
            return cls.all()
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.first(value)
        if isinstance(value, dict):
            if "first" in value:
                return cls.first(_as_int(value["first"], "words_to_test.first"))
            if "random" in value:
                return cls.random(
                    _as_int(value["random"], "words_to_test.random"),
                    seed=_as_int(value.get("seed", 42), "words_to_test.seed"),
                )
        raise InvalidConfig(f"cannot interpret words_to_test={value!r}")


POOL_KINDS = ("process", "thread")


@dataclass(frozen=True)
class HarnessConfig:
    """Knobs for one harness run.

    Attributes
    ----------
    words_to_test : WordSelection
        All answers, the first N, or N drawn with a fixed seed.
    execution_mode : ExecutionMode
        ``serial`` runs on the calling thread; ``parallel`` uses a pool.
    max_turns : int
        Guesses allowed per game.
    significance_threshold : float
        Alpha used when comparing against a baseline.
    word_length : int
        Letters per word.
    max_workers : int or None
        Pool size in parallel mode (None lets the executor decide).
    pool : str
        ``"process"`` or ``"thread"``.
    retain_traces : bool
        Keep every game's guesses in memory (never persisted).
    seed : int
        Root seed for the per-game seeds handed to strategies.
    """

    words_to_test: WordSelection = field(default_factory=WordSelection.all)
    execution_mode: ExecutionMode = ExecutionMode.SERIAL
    max_turns: int = 6
    significance_threshold: float = 0.05
    word_length: int = DEFAULT_WORD_LENGTH
    max_workers: int | None = None
    pool: str = "process"
    retain_traces: bool = False
    seed: int = 42

    def __post_init__(self) -> None:
        if not isinstance(self.words_to_test, WordSelection):
            object.__setattr__(self, "words_to_test", WordSelection.from_json(self.words_to_test))
        if not isinstance(self.execution_mode, ExecutionMode):
            try:
                object.__setattr__(self, "execution_mode", ExecutionMode(self.execution_mode))
            except ValueError:
                raise InvalidConfig(f"unknown execution_mode {self.execution_mode!r}") from None
        if self.max_turns < 1:
            raise InvalidConfig(f"max_turns must be >= 1, got {self.max_turns}")
        if not 0.0 < self.significance_threshold < 1.0:
            raise InvalidConfig(
                f"significance_threshold must be in (0, 1), got {self.significance_threshold}"
            )
        if self.word_length < 1:
            raise InvalidConfig(f"word_length must be >= 1, got {self.word_length}")
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidConfig(f"max_workers must be >= 1, got {self.max_workers}")
        if self.pool not in POOL_KINDS:
            raise InvalidConfig(f"pool must be one of {POOL_KINDS}, got {self.pool!r}")

    def with_changes(self, **changes: Any) -> HarnessConfig:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["words_to_test"] = self.words_to_test.to_json()
        data["execution_mode"] = self.execution_mode.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HarnessConfig:
        known = {f for f in cls.__dataclass_fields__}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfig(f"unknown config keys: {unknown}")
        try:
            return cls(**data)
        except TypeError as exc:
            raise InvalidConfig(str(exc)) from exc


def load_config(path: str | Path) -> HarnessConfig:
    """Read a :class:`HarnessConfig` from a JSON file."""
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidConfig(f"cannot read config {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidConfig(f"config {p} must hold a JSON object")
    return HarnessConfig.from_dict(data)


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfig(f"{what} must be an integer, got {value!r}")
    return value
