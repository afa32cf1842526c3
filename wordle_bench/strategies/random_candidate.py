"""Random strategy: pick uniformly at random from remaining candidates."""

from __future__ import annotations

import random

from wordle_bench.strategy import GameConfig, Strategy
from wordle_bench.wordle_env import Feedback, filter_candidates


class RandomCandidateStrategy(Strategy):
    """Guess a random word from the set of remaining candidates.

    Draws come from ``config.seed``, so a run is reproducible and does not
    depend on how the harness schedules games.
    """

    @property
    def name(self) -> str:
        return "RandomCandidate"

    @property
    def version(self) -> str:
        return "1.0.0"

    def begin_game(self, config: GameConfig) -> None:
        self._candidates = list(config.vocabulary)
        self._rng = random.Random(config.seed)

    def guess(self, history: list[tuple[str, Feedback]]) -> str:
        candidates = self._candidates
        for g, pat in history:
            candidates = filter_candidates(candidates, g, pat)
        if not candidates:
            return self._rng.choice(self._candidates)
        return self._rng.choice(candidates)
