"""First-candidate strategy: always guess the first word still consistent with the feedback."""

from __future__ import annotations

from wordle_bench.strategy import GameConfig, Strategy
from wordle_bench.wordle_env import Feedback, filter_candidates


class FirstCandidateStrategy(Strategy):
    """Guess the first remaining candidate in vocabulary order.

    An optional fixed *opener* is played on turn one.  Deterministic, so
    it is a convenient baseline.
    """

    opener: str | None = None

    @property
    def name(self) -> str:
        return "FirstCandidate"

    @property
    def version(self) -> str:
        return "1.0.0"

    def begin_game(self, config: GameConfig) -> None:
        self._candidates = list(config.vocabulary)

    def guess(self, history: list[tuple[str, Feedback]]) -> str:
        if not history and self.opener:
            return self.opener
        # Re-filter from scratch (simple & correct)
        candidates = self._candidates
        for g, pat in history:
            candidates = filter_candidates(candidates, g, pat)
        if not candidates:
            # Secret is outside the vocabulary; keep guessing something valid
            return self._candidates[0]
        return candidates[0]


class SlateOpenerStrategy(FirstCandidateStrategy):
    """First-candidate strategy that always opens with ``slate``."""

    opener = "slate"

    @property
    def name(self) -> str:
        return "SlateOpener"


class HardModeFirstCandidateStrategy(FirstCandidateStrategy):
    """First-candidate strategy played under hard-mode rules.

    Every remaining candidate is consistent with all feedback, so it never
    breaks the rules.
    """

    @property
    def name(self) -> str:
        return "FirstCandidateHard"

    @property
    def hard_mode(self) -> bool:
        return True
