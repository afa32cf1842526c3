"""Wordle environment: feedback scoring and single-game state."""

from __future__ import annotations

import enum
import re
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from wordle_bench.errors import InvalidWord, LengthMismatch

DEFAULT_WORD_LENGTH = 5

_LETTERS = re.compile(r"^[a-z]+$")


class LetterJudgment(enum.IntEnum):
    """Per-letter verdict.

    The integer values keep the usual 0/1/2 encoding:
    2 = green (correct letter, correct position),
    1 = yellow (correct letter, wrong position),
    0 = gray (letter not present, or already consumed by greens/yellows).
    """

    ABSENT = 0
    PRESENT = 1
    CORRECT = 2


Feedback = tuple[LetterJudgment, ...]

_SYMBOLS = {LetterJudgment.ABSENT: "-", LetterJudgment.PRESENT: "Y", LetterJudgment.CORRECT: "G"}
_FROM_SYMBOL = {v: k for k, v in _SYMBOLS.items()}


@dataclass(frozen=True)
class GuessRecord:
    """One scored guess."""

    guess: str
    feedback: Feedback

    def __str__(self) -> str:
        return f"{self.guess} {feedback_to_str(self.feedback)}"


def normalize_word(raw: str, length: int = DEFAULT_WORD_LENGTH) -> str:
    """Lower-case *raw* and check it is *length* letters from a-z."""
    if not isinstance(raw, str):
        raise InvalidWord(f"expected a string, got {type(raw).__name__}")
    word = raw.strip().lower()
    if len(word) != length:
        raise InvalidWord(f"{raw!r} has length {len(word)}, expected {length}")
    if not _LETTERS.match(word):
        raise InvalidWord(f"{raw!r} contains characters outside a-z")
    return word


def feedback(secret: str, guess: str) -> Feedback:
    """Return feedback for *guess* against *secret* (any word length)."""
    n = len(secret)
    if len(guess) != n:
        raise LengthMismatch(len(guess), n)

    secret = secret.lower()
    guess = guess.lower()

    pat = [LetterJudgment.ABSENT] * n
    remaining = Counter(secret)

    # Pass 1 – greens
    for i, (s, g) in enumerate(zip(secret, guess)):
        if g == s:
            pat[i] = LetterJudgment.CORRECT
            remaining[g] -= 1

    # Pass 2 – yellows, earlier positions first
    for i, g in enumerate(guess):
        if pat[i] == LetterJudgment.CORRECT:
            continue
        if remaining[g] > 0:
            pat[i] = LetterJudgment.PRESENT
            remaining[g] -= 1

    return tuple(pat)


def feedback_to_str(pattern: Iterable[int]) -> str:
    return "".join(_SYMBOLS[LetterJudgment(p)] for p in pattern)


def feedback_from_str(text: str) -> Feedback:
    try:
        return tuple(_FROM_SYMBOL[c] for c in text.upper())
    except KeyError as exc:
        raise ValueError(f"invalid feedback symbol {exc.args[0]!r} in {text!r}") from None


def filter_candidates(
    candidates: Iterable[str],
    guess: str,
    pattern: tuple[int, ...],
) -> list[str]:
    """Keep only candidates consistent with the observed *pattern*."""
    pattern = tuple(pattern)
    return [w for w in candidates if feedback(w, guess) == pattern]


def hard_mode_violation(
    history: Iterable[tuple[str, tuple[int, ...]]],
    guess: str,
) -> str | None:
    """Return why *guess* breaks hard-mode rules, or None if it is allowed.

    Every green from an earlier guess must stay in place, and every letter
    revealed as green or yellow must appear in *guess* at least as often as
    it was revealed in that earlier guess.
    """
    counts = Counter(guess)
    for previous, pattern in history:
        revealed: Counter[str] = Counter()
        for i, (letter, judgment) in enumerate(zip(previous, pattern)):
            if judgment == LetterJudgment.CORRECT:
                if guess[i] != letter:
                    return f"position {i + 1} must be {letter!r} (green in {previous!r})"
                revealed[letter] += 1
            elif judgment == LetterJudgment.PRESENT:
                revealed[letter] += 1
        for letter, needed in sorted(revealed.items()):
            if counts[letter] < needed:
                return f"guess must contain {needed} x {letter!r} (revealed by {previous!r})"
    return None


class GameState(enum.Enum):
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"
    FAILED = "failed"


class WordleEnv:
    """A single Wordle game.

    Parameters
    ----------
    word_length : int
        Expected word length for secrets and guesses.
    max_turns : int
        Maximum allowed guesses before the game is lost.
    hard_mode : bool
        If True, every guess must respect the information revealed so far.
    """

    def __init__(
        self,
        word_length: int = DEFAULT_WORD_LENGTH,
        max_turns: int = 6,
        hard_mode: bool = False,
    ) -> None:
        if max_turns < 1:
            raise ValueError(f"max_turns must be >= 1, got {max_turns}")
        self._word_length = word_length
        self._max_turns = max_turns
        self._hard_mode = hard_mode

        # Game state (set by reset)
        self._secret: str | None = None
        self._history: list[GuessRecord] = []
        self._solved = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self, secret: str) -> None:
        """Start a new game against *secret*."""
        self._secret = normalize_word(secret, self._word_length)
        self._history = []
        self._solved = False

    def guess(self, word: str) -> Feedback:
        """Submit a guess and receive feedback.

        Raises
        ------
        RuntimeError
            If the game is over (solved or out of guesses).
        InvalidWord
            If *word* has the wrong length, contains characters outside
            a-z, or breaks hard-mode rules.
        """
        if self._secret is None:
            raise RuntimeError("Call reset() before guessing")
        if self.game_over():
            raise RuntimeError("Game is already over")
        word = normalize_word(word, self._word_length)
        if self._hard_mode:
            reason = hard_mode_violation(self.history, word)
            if reason is not None:
                raise InvalidWord(f"hard mode: {reason}")

        pat = feedback(self._secret, word)
        self._history.append(GuessRecord(word, pat))
        if word == self._secret:
            self._solved = True
        return pat

    @property
    def state(self) -> GameState:
        if self._solved:
            return GameState.SOLVED
        if len(self._history) >= self._max_turns:
            return GameState.FAILED
        return GameState.IN_PROGRESS

    def is_solved(self) -> bool:
        return self._solved

    def game_over(self) -> bool:
        return self.state is not GameState.IN_PROGRESS

    @property
    def turn(self) -> int:
        """Number of the next turn (1-based) while the game is in progress."""
        return len(self._history) + 1

    @property
    def turns_used(self) -> int:
        return len(self._history)

    @property
    def history(self) -> list[tuple[str, Feedback]]:
        return [(r.guess, r.feedback) for r in self._history]

    @property
    def trace(self) -> tuple[GuessRecord, ...]:
        return tuple(self._history)

    @property
    def secret(self) -> str:
        """Reveal the secret word (only after game over)."""
        if self._secret is None:
            raise RuntimeError("No game in progress")
        if not self.game_over():
            raise RuntimeError("Game is still in progress")
        return self._secret

    @property
    def word_length(self) -> int:
        return self._word_length

    @property
    def max_turns(self) -> int:
        return self._max_turns
