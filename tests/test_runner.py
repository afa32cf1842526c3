import logging

import pytest

from conftest import ConstantStrategy, ExplodingStrategy, ScriptedStrategy
from wordle_bench.runner import GameOutcome, OutcomeStatus, play_game
from wordle_bench.strategies import FirstCandidateStrategy, SlateOpenerStrategy
from wordle_bench.strategy import Strategy
from wordle_bench.wordle_env import GuessRecord, feedback


def test_strategy_that_knows_the_answer_solves_in_one():
    outcome = play_game(FirstCandidateStrategy, "crane", vocabulary=["crane"])
    assert outcome.status is OutcomeStatus.SOLVED
    assert outcome.turns == 1
    assert outcome.ranked_turns == 1


@pytest.mark.parametrize("max_turns", [1, 3, 6, 10])
def test_constant_wrong_guess_fails_at_max_turns(max_turns):
    outcome = play_game(ConstantStrategy, "crane", vocabulary=["crane"], max_turns=max_turns)
    assert outcome.status is OutcomeStatus.FAILED
    assert outcome.turns == max_turns
    assert outcome.ranked_turns == max_turns + 1
    assert outcome.error is None


def test_opener_then_first_candidate():
    vocab = ["crane", "trace"]
    for secret in vocab:
        outcome = play_game(SlateOpenerStrategy, secret, vocabulary=vocab, retain_trace=True)
        assert outcome.status is OutcomeStatus.SOLVED
        assert outcome.turns == 2
        assert [r.guess for r in outcome.trace] == ["slate", secret]


def test_uppercase_guesses_are_normalized():
    class Shouting(ScriptedStrategy):
        script = ["SLATE", "CRANE"]

    outcome = play_game(Shouting, "crane", vocabulary=["crane"])
    assert outcome.solved and outcome.turns == 2


@pytest.mark.parametrize("bad_guess", ["cran", "cranes", "cr4ne", "", 12345])
def test_malformed_guess_is_a_strategy_error(bad_guess):
    class Bad(ScriptedStrategy):
        script = ["slate", bad_guess]

    outcome = play_game(Bad, "crane", vocabulary=["crane"])
    assert outcome.status is OutcomeStatus.STRATEGY_ERROR
    assert outcome.turns == 1
    assert "invalid guess on turn 2" in outcome.error
    assert outcome.failed and not outcome.solved


def test_exception_in_guess_is_contained(caplog):
    with caplog.at_level(logging.WARNING, logger="wordle_bench.runner"):
        outcome = play_game(ExplodingStrategy, "crane", vocabulary=["crane"])
    assert outcome.status is OutcomeStatus.STRATEGY_ERROR
    assert outcome.turns == 0
    assert "ZeroDivisionError" in outcome.error
    assert "boom" in caplog.text


def test_exception_in_factory_is_contained():
    def factory():
        raise RuntimeError("cannot build")

    outcome = play_game(factory, "crane", vocabulary=["crane"])
    assert outcome.status is OutcomeStatus.STRATEGY_ERROR
    assert "cannot build" in outcome.error


def test_hard_mode_violation_is_a_strategy_error():
    class HardCheater(ScriptedStrategy):
        script = ["props", "pinup", "crimp"]

        @property
        def hard_mode(self):
            return True

    outcome = play_game(HardCheater, "crimp", vocabulary=["crimp"])
    assert outcome.status is OutcomeStatus.STRATEGY_ERROR
    assert outcome.turns == 1
    assert "hard mode" in outcome.error


def test_same_guesses_are_fine_without_hard_mode():
    class EasyPlayer(ScriptedStrategy):
        script = ["props", "pinup", "crimp"]

    outcome = play_game(EasyPlayer, "crimp", vocabulary=["crimp"])
    assert outcome.solved and outcome.turns == 3


def test_each_game_gets_a_fresh_instance_and_lifecycle_hooks():
    calls = []

    class Recording(Strategy):
        def __init__(self):
            self.games = 0

        @property
        def name(self):
            return "Recording"

        def begin_game(self, config):
            self.games += 1
            calls.append(("begin", self.games, config.seed, config.max_turns, config.vocabulary))

        def guess(self, history):
            return "crane"

        def end_game(self, secret, solved, num_guesses):
            calls.append(("end", secret, solved, num_guesses))

    play_game(Recording, "crane", vocabulary=["crane"], seed=7, max_turns=4)
    play_game(Recording, "crane", vocabulary=["crane"], seed=8, max_turns=4)
    assert calls == [
        ("begin", 1, 7, 4, ("crane",)),
        ("end", "crane", True, 1),
        ("begin", 1, 8, 4, ("crane",)),
        ("end", "crane", True, 1),
    ]


def test_end_game_errors_do_not_change_the_outcome(caplog):
    class SoreLoser(ConstantStrategy):
        def end_game(self, secret, solved, num_guesses):
            raise ValueError("no")

    with caplog.at_level(logging.ERROR, logger="wordle_bench.runner"):
        outcome = play_game(SoreLoser, "crane", vocabulary=["crane"], max_turns=2)
    assert outcome.status is OutcomeStatus.FAILED
    assert "end_game()" in caplog.text


def test_traces_are_only_kept_on_request():
    outcome = play_game(ConstantStrategy, "crane", vocabulary=["crane"], max_turns=2)
    assert outcome.trace is None
    outcome = play_game(ConstantStrategy, "crane", vocabulary=["crane"], max_turns=2,
                        retain_trace=True)
    assert len(outcome.trace) == 2
    assert outcome.without_trace().trace is None


def test_outcome_invariants():
    with pytest.raises(ValueError):
        GameOutcome("crane", OutcomeStatus.SOLVED, 0, 6)
    with pytest.raises(ValueError):
        GameOutcome("crane", OutcomeStatus.FAILED, 7, 6)
    with pytest.raises(ValueError):
        GameOutcome("crane", OutcomeStatus.STRATEGY_ERROR, 1, 6)


def test_solved_trace_must_end_with_the_secret():
    good = (
        GuessRecord("slate", feedback("crane", "slate")),
        GuessRecord("crane", feedback("crane", "crane")),
    )
    assert GameOutcome("crane", OutcomeStatus.SOLVED, 2, 6, trace=good).solved
    with pytest.raises(ValueError):
        GameOutcome("crane", OutcomeStatus.SOLVED, 2, 6, trace=good[::-1])
    with pytest.raises(ValueError):
        GameOutcome("crane", OutcomeStatus.SOLVED, 1, 6, trace=good)
