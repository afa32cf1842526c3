"""Abstract base class for Wordle strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from wordle_bench.wordle_env import Feedback


@dataclass(frozen=True)
class GameConfig:
    """All information a strategy receives at the start of each game.

    Attributes
    ----------
    word_length : int
        Number of letters in each word.
    vocabulary : tuple[str, ...]
        Valid guess words (immutable).  Strategies may restrict themselves
        to this list; the harness only checks the shape of a guess.
    max_turns : int
        Maximum number of guesses allowed per game.
    hard_mode : bool
        Whether guesses are checked against hard-mode rules.
    seed : int
        Per-game seed for strategies that make random choices.  It depends
        on the run seed and the game's position in the run, never on the
        secret word.
    """

    word_length: int
    vocabulary: tuple[str, ...]
    max_turns: int
    hard_mode: bool = False
    seed: int = 0


class Strategy(ABC):
    """Interface that every Wordle strategy must implement.

    The harness builds a fresh instance for every game, so any state kept
    on ``self`` lives for exactly one game.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable strategy name (used in reports and baseline keys)."""
        ...

    @property
    def version(self) -> str:
        """Bump this whenever the guessing logic changes."""
        return "0.1.0"

    @property
    def hard_mode(self) -> bool:
        """Return True to have every guess checked against hard-mode rules."""
        return False

    def begin_game(self, config: GameConfig) -> None:
        """Called at the start of each game.

        Use this for precomputation.  The default implementation does nothing.
        """

    @abstractmethod
    def guess(self, history: list[tuple[str, Feedback]]) -> str:
        """Return the next guess given the history of (guess, feedback) pairs."""
        ...

    def end_game(self, secret: str, solved: bool, num_guesses: int) -> None:
        """Called at the end of each game.

        The default implementation does nothing.
        """


# Anything that builds a fresh Strategy, usually the class itself.
StrategyFactory = Callable[[], Strategy]
