from __future__ import annotations

import pytest

from wordle_bench.perf import Corpus, PerformanceRecord
from wordle_bench.runner import GameOutcome, OutcomeStatus
from wordle_bench.strategy import Strategy

WORDS = [
    "cigar", "rebut", "sissy", "humph", "awake", "blush", "focal", "evade",
    "naval", "serve", "heath", "dwarf", "model", "karma", "stink", "grade",
    "quiet", "bench", "abate", "feign", "major", "death", "fresh", "crust",
    "stool", "colon", "abase", "marry", "react", "batty",
]


class ConstantStrategy(Strategy):
    """Always guesses the same word."""

    word = "zzzzz"

    @property
    def name(self) -> str:
        return "Constant"

    def guess(self, history):
        return self.word


class ScriptedStrategy(Strategy):
    """Plays a fixed list of guesses, then repeats the last one."""

    script: list[str] = []

    @property
    def name(self) -> str:
        return "Scripted"

    def guess(self, history):
        return self.script[min(len(history), len(self.script) - 1)]


class ExplodingStrategy(Strategy):
    @property
    def name(self) -> str:
        return "Exploding"

    def guess(self, history):
        raise ZeroDivisionError("boom")


@pytest.fixture
def words() -> list[str]:
    return list(WORDS)


def make_record(
    name: str,
    turns: list[int | None],
    max_turns: int = 6,
    words: list[str] | None = None,
    tag: str = "test",
) -> PerformanceRecord:
    """Build a record directly; ``None`` in *turns* means a failed game."""
    words = words or WORDS[: len(turns)]
    outcomes = []
    for word, t in zip(words, turns):
        if t is None:
            outcomes.append(GameOutcome(word, OutcomeStatus.FAILED, max_turns, max_turns))
        else:
            outcomes.append(GameOutcome(word, OutcomeStatus.SOLVED, t, max_turns))
    return PerformanceRecord(
        strategy_name=name,
        strategy_version="1.0.0",
        hard_mode=False,
        corpus=Corpus(tuple(words), tag),
        max_turns=max_turns,
        outcomes=tuple(outcomes),
    )
