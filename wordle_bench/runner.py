"""Play one strategy against one secret word."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from wordle_bench.errors import InvalidWord, StrategyError
from wordle_bench.strategy import GameConfig, Strategy, StrategyFactory
from wordle_bench.wordle_env import (
    GuessRecord,
    WordleEnv,
    feedback_from_str,
    feedback_to_str,
    normalize_word,
)

logger = logging.getLogger(__name__)


class OutcomeStatus(str, enum.Enum):
    SOLVED = "solved"
    FAILED = "failed"
    STRATEGY_ERROR = "strategy_error"


@dataclass(frozen=True)
class GameOutcome:
    """Terminal result of one game.

    ``turns`` is the number of guesses that were scored.  A game that ended
    with a strategy error counts as failed for aggregation; ``error`` keeps
    the reason for diagnostics.
    """

    word: str
    status: OutcomeStatus
    turns: int
    max_turns: int
    error: str | None = None
    trace: tuple[GuessRecord, ...] | None = None

    def __post_init__(self) -> None:
        if self.status is OutcomeStatus.SOLVED and not 1 <= self.turns <= self.max_turns:
            raise ValueError(f"solved in {self.turns} turns with max_turns={self.max_turns}")
        if not 0 <= self.turns <= self.max_turns:
            raise ValueError(f"turns={self.turns} outside [0, {self.max_turns}]")
        if (self.error is not None) != (self.status is OutcomeStatus.STRATEGY_ERROR):
            raise ValueError("error message must be set exactly for strategy errors")
        if self.trace is not None and self.status is OutcomeStatus.SOLVED:
            if len(self.trace) != self.turns or self.trace[-1].guess != self.word:
                raise ValueError(f"solved trace for {self.word!r} does not end with the secret")

    @property
    def solved(self) -> bool:
        return self.status is OutcomeStatus.SOLVED

    @property
    def failed(self) -> bool:
        return not self.solved

    @property
    def ranked_turns(self) -> int:
        """Turns used, with every unsolved game censored at ``max_turns + 1``."""
        return self.turns if self.solved else self.max_turns + 1

    def without_trace(self) -> GameOutcome:
        if self.trace is None:
            return self
        return GameOutcome(self.word, self.status, self.turns, self.max_turns, self.error)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "word": self.word,
            "status": self.status.value,
            "turns": self.turns,
        }
        if self.error is not None:
            data["error"] = self.error
        if self.trace is not None:
            data["trace"] = [[r.guess, feedback_to_str(r.feedback)] for r in self.trace]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], max_turns: int) -> GameOutcome:
        trace = data.get("trace")
        if trace is not None:
            trace = tuple(GuessRecord(g, feedback_from_str(p)) for g, p in trace)
        return cls(
            word=data["word"],
            status=OutcomeStatus(data["status"]),
            turns=data["turns"],
            max_turns=max_turns,
            error=data.get("error"),
            trace=trace,
        )


def play_game(
    factory: StrategyFactory,
    secret: str,
    *,
    vocabulary: Sequence[str],
    word_length: int = 5,
    max_turns: int = 6,
    seed: int = 0,
    retain_trace: bool = False,
) -> GameOutcome:
    """Run a fresh strategy from *factory* until it solves *secret* or runs out of turns.

    Nothing the strategy does can make this function raise: construction
    failures, exceptions from ``begin_game``/``guess`` and malformed guesses
    all end the game with ``OutcomeStatus.STRATEGY_ERROR``.
    """
    secret = normalize_word(secret, word_length)
    env = WordleEnv(word_length=word_length, max_turns=max_turns)
    env.reset(secret)

    strat: Strategy | None = None
    try:
        strat = factory()
        if strat.hard_mode:
            env = WordleEnv(word_length=word_length, max_turns=max_turns, hard_mode=True)
            env.reset(secret)
        strat.begin_game(GameConfig(
            word_length=word_length,
            vocabulary=tuple(vocabulary),
            max_turns=max_turns,
            hard_mode=strat.hard_mode,
            seed=seed,
        ))
        while not env.game_over():
            try:
                word = strat.guess(env.history)
            except Exception as exc:
                raise StrategyError(
                    f"guess() raised {type(exc).__name__} on turn {env.turn}: {exc}"
                ) from exc
            try:
                env.guess(word)
            except InvalidWord as exc:
                raise StrategyError(f"invalid guess on turn {env.turn}: {exc}") from exc
    except Exception as exc:
        message = str(exc) if isinstance(exc, StrategyError) else (
            f"{type(exc).__name__}: {exc}"
        )
        logger.warning("strategy %s failed on %r: %s", _describe(strat, factory), secret, message)
        return GameOutcome(
            word=secret,
            status=OutcomeStatus.STRATEGY_ERROR,
            turns=env.turns_used,
            max_turns=max_turns,
            error=message,
            trace=env.trace if retain_trace else None,
        )

    solved = env.is_solved()
    try:
        strat.end_game(secret, solved, env.turns_used)
    except Exception:
        logger.exception("end_game() of %s raised; outcome kept", _describe(strat, factory))

    return GameOutcome(
        word=secret,
        status=OutcomeStatus.SOLVED if solved else OutcomeStatus.FAILED,
        turns=env.turns_used,
        max_turns=max_turns,
        trace=env.trace if retain_trace else None,
    )


def _describe(strat: Strategy | None, factory: StrategyFactory) -> str:
    if strat is not None:
        return type(strat).__name__
    return getattr(factory, "__name__", repr(factory))
