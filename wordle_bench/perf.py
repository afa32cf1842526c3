"""Performance records: one strategy's outcomes over one corpus."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any

from wordle_bench.runner import GameOutcome, OutcomeStatus

# Bumped whenever the serialized layout changes incompatibly.
FORMAT_VERSION = 1


@dataclass(frozen=True)
class Corpus:
    """Ordered target words plus a free-form tag (e.g. ``"nyt-2022"``).

    Two corpora are the same corpus when their word tuples are equal; the
    tag is a label for humans and baseline keys.
    """

    words: tuple[str, ...]
    tag: str = "default"

    def __post_init__(self) -> None:
        object.__setattr__(self, "words", tuple(self.words))

    def __len__(self) -> int:
        return len(self.words)

    @property
    def fingerprint(self) -> str:
        digest = hashlib.sha256("\n".join(self.words).encode("utf-8"))
        return digest.hexdigest()[:16]

    def same_words(self, other: Corpus) -> bool:
        return self.words == other.words


@dataclass(frozen=True)
class PerformanceSummary:
    """Pre-computed statistics for one record."""

    strategy_name: str
    num_tried: int
    num_solved: int
    num_failed: int
    num_errors: int
    solve_rate: float
    mean_turns: float | None
    median_turns: float | None
    mean_ranked_turns: float
    max_turns: int
    histogram: dict[int, int] = field(default_factory=dict)

    @property
    def num_missed(self) -> int:
        return self.num_failed + self.num_errors

    def to_dict(self) -> dict[str, Any]:
        dist: dict[str, int] = {str(k): v for k, v in self.histogram.items()}
        dist["failed"] = self.num_missed
        return {
            "name": self.strategy_name,
            "games_played": self.num_tried,
            "games_solved": self.num_solved,
            "solve_rate": round(self.solve_rate, 4),
            "mean_guesses": None if self.mean_turns is None else round(self.mean_turns, 3),
            "median_guesses": self.median_turns,
            "mean_ranked_guesses": round(self.mean_ranked_turns, 3),
            "strategy_errors": self.num_errors,
            "guess_distribution": dist,
        }


def _median(values: list[int]) -> float | None:
    n = len(values)
    if n == 0:
        return None
    values = sorted(values)
    if n % 2 == 1:
        return float(values[n // 2])
    return (values[n // 2 - 1] + values[n // 2]) / 2


@dataclass(frozen=True)
class PerformanceRecord:
    """A record of one strategy's games, in corpus order.

    Attributes
    ----------
    strategy_name : str
        Registered name of the strategy.
    strategy_version : str
        ``Strategy.version`` at the time of the run.
    hard_mode : bool
        Whether the games were played under hard-mode rules.
    corpus : Corpus
        Target words, in the order the outcomes are stored.
    max_turns : int
        Turn budget every game was played with.
    outcomes : tuple[GameOutcome, ...]
        ``outcomes[i]`` is the game against ``corpus.words[i]``.
    """

    strategy_name: str
    strategy_version: str
    hard_mode: bool
    corpus: Corpus
    max_turns: int
    outcomes: tuple[GameOutcome, ...]
    format_version: int = FORMAT_VERSION

    def __post_init__(self) -> None:
        object.__setattr__(self, "outcomes", tuple(self.outcomes))
        if len(self.outcomes) != len(self.corpus):
            raise ValueError(
                f"{len(self.outcomes)} outcomes for a corpus of {len(self.corpus)} words"
            )
        for word, outcome in zip(self.corpus.words, self.outcomes):
            if outcome.word != word:
                raise ValueError(f"outcome for {outcome.word!r} stored at slot of {word!r}")
            if outcome.max_turns != self.max_turns:
                raise ValueError(
                    f"outcome for {word!r} used max_turns={outcome.max_turns}, "
                    f"record says {self.max_turns}"
                )

    # ------------------------------------------------------------------
    # Derived statistics
    # ------------------------------------------------------------------

    @property
    def label(self) -> str:
        return f"{self.strategy_name} v{self.strategy_version}"

    def num_tried(self) -> int:
        return len(self.outcomes)

    def num_solved(self) -> int:
        return sum(1 for o in self.outcomes if o.solved)

    def num_missed(self) -> int:
        return self.num_tried() - self.num_solved()

    def solve_rate(self) -> float:
        n = self.num_tried()
        return self.num_solved() / n if n else 0.0

    def mean_turns(self) -> float | None:
        """Average guesses over solved games only (None if nothing was solved)."""
        solved = [o.turns for o in self.outcomes if o.solved]
        return sum(solved) / len(solved) if solved else None

    def ranked_turns(self) -> list[int]:
        return [o.ranked_turns for o in self.outcomes]

    def errors(self) -> list[GameOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.STRATEGY_ERROR]

    def histogram(self) -> dict[int, int]:
        bins = {t: 0 for t in range(1, self.max_turns + 1)}
        for o in self.outcomes:
            if o.solved:
                bins[o.turns] += 1
        return bins

    def summary(self) -> PerformanceSummary:
        n = self.num_tried()
        solved = [o.turns for o in self.outcomes if o.solved]
        errors = len(self.errors())
        ranked = self.ranked_turns()
        return PerformanceSummary(
            strategy_name=self.strategy_name,
            num_tried=n,
            num_solved=len(solved),
            num_failed=n - len(solved) - errors,
            num_errors=errors,
            solve_rate=len(solved) / n if n else 0.0,
            mean_turns=sum(solved) / len(solved) if solved else None,
            median_turns=_median(solved),
            mean_ranked_turns=sum(ranked) / n if n else 0.0,
            max_turns=self.max_turns,
            histogram=self.histogram(),
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def without_traces(self) -> PerformanceRecord:
        return PerformanceRecord(
            strategy_name=self.strategy_name,
            strategy_version=self.strategy_version,
            hard_mode=self.hard_mode,
            corpus=self.corpus,
            max_turns=self.max_turns,
            outcomes=tuple(o.without_trace() for o in self.outcomes),
            format_version=self.format_version,
        )

    def to_dict(self, include_traces: bool = False) -> dict[str, Any]:
        outcomes = self.outcomes if include_traces else self.without_traces().outcomes
        return {
            "format_version": self.format_version,
            "strategy": {
                "name": self.strategy_name,
                "version": self.strategy_version,
                "hard_mode": self.hard_mode,
            },
            "corpus": {
                "tag": self.corpus.tag,
                "fingerprint": self.corpus.fingerprint,
                "words": list(self.corpus.words),
            },
            "max_turns": self.max_turns,
            "outcomes": [o.to_dict() for o in outcomes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PerformanceRecord:
        """Inverse of :meth:`to_dict`.

        Raises KeyError, TypeError or ValueError on malformed input; the
        baseline store turns those into ``BaselineFormatError``.
        """
        strategy = data["strategy"]
        corpus_data = data["corpus"]
        max_turns = data["max_turns"]
        if isinstance(max_turns, bool) or not isinstance(max_turns, int):
            raise TypeError(f"max_turns must be an integer, got {max_turns!r}")
        words = corpus_data["words"]
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            raise TypeError("corpus.words must be a list of strings")
        corpus = Corpus(tuple(words), str(corpus_data["tag"]))
        fingerprint = corpus_data.get("fingerprint")
        if fingerprint is not None and fingerprint != corpus.fingerprint:
            raise ValueError("corpus fingerprint does not match its words")
        return cls(
            strategy_name=str(strategy["name"]),
            strategy_version=str(strategy["version"]),
            hard_mode=bool(strategy["hard_mode"]),
            corpus=corpus,
            max_turns=max_turns,
            outcomes=tuple(_outcome_from_dict(o, max_turns) for o in data["outcomes"]),
            format_version=data["format_version"],
        )


def _outcome_from_dict(data: Any, max_turns: int) -> GameOutcome:
    if not isinstance(data, dict):
        raise TypeError(f"outcome must be an object, got {type(data).__name__}")
    turns = data.get("turns")
    if isinstance(turns, bool) or not isinstance(turns, int):
        raise TypeError(f"turns must be an integer, got {turns!r}")
    trace = data.get("trace")
    if trace is not None:
        if not isinstance(trace, list):
            raise TypeError(f"trace must be a list, got {type(trace).__name__}")
        for step in trace:
            if not (
                isinstance(step, list)
                and len(step) == 2
                and all(isinstance(part, str) for part in step)
            ):
                raise TypeError(f"trace entries must be [guess, pattern] strings, got {step!r}")
    return GameOutcome.from_dict(data, max_turns)

