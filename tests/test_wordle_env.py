import pytest

from wordle_bench.errors import InvalidWord, LengthMismatch
from wordle_bench.wordle_env import (
    GameState,
    LetterJudgment,
    WordleEnv,
    feedback,
    feedback_from_str,
    feedback_to_str,
    filter_candidates,
    hard_mode_violation,
    normalize_word,
)

C, P, A = LetterJudgment.CORRECT, LetterJudgment.PRESENT, LetterJudgment.ABSENT


# --- golden feedback cases (duplicates + placements) ---
@pytest.mark.parametrize("guess,secret,expected", [
    ("belle", "level", "-GYYY"),
    ("level", "level", "GGGGG"),
    ("lemon", "level", "GG---"),
    ("cools", "scoop", "YYG-Y"),
    ("raise", "crane", "YY--G"),
    ("stare", "crane", "--GYG"),
    ("spool", "sober", "G-Y--"),
    ("soaks", "sober", "GG---"),
    ("odors", "spoon", "Y-G-Y"),
    ("slate", "trace", "--GYG"),
])
def test_feedback_golden(guess, secret, expected):
    assert feedback_to_str(feedback(secret, guess)) == expected


def test_duplicate_priority_goes_to_earlier_positions():
    assert feedback("abba", "aabb") == (C, P, C, P)


@pytest.mark.parametrize("word", ["crane", "abbey", "mamma", "xylyl"])
def test_feedback_against_itself_is_all_correct(word):
    assert feedback(word, word) == (C,) * len(word)


def test_feedback_with_no_shared_letters_is_all_absent():
    assert feedback("crane", "ghost") == (A,) * 5
    assert feedback("abcde", "fghij") == (A,) * 5


def test_feedback_is_case_insensitive():
    assert feedback("CRANE", "crane") == (C,) * 5


def test_feedback_length_mismatch():
    with pytest.raises(LengthMismatch) as excinfo:
        feedback("crane", "cranes")
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.guess_len == 6


def test_feedback_values_keep_integer_encoding():
    assert feedback("crane", "slate") == (0, 0, 2, 0, 2)


def test_feedback_str_round_trip():
    pattern = feedback("level", "belle")
    assert feedback_from_str(feedback_to_str(pattern)) == pattern
    with pytest.raises(ValueError):
        feedback_from_str("GGQ--")


def test_filter_candidates():
    words = ["crane", "raise", "stare", "trace", "cared", "racer", "scoop"]
    pattern = feedback("crane", "raise")
    remaining = filter_candidates(words, "raise", pattern)
    assert "crane" in remaining
    assert "stare" not in remaining and "scoop" not in remaining


@pytest.mark.parametrize("raw,expected", [("CRANE", "crane"), ("  slate ", "slate")])
def test_normalize_word(raw, expected):
    assert normalize_word(raw) == expected


@pytest.mark.parametrize("raw", ["cran", "cranes", "cr4ne", "cra e", "", None])
def test_normalize_word_rejects_bad_shapes(raw):
    with pytest.raises(InvalidWord):
        normalize_word(raw)


# --- hard mode (cases from real puzzles) ---
@pytest.mark.parametrize("secret,previous,guess,allowed", [
    ("crimp", ["props"], "pinup", False),   # green r must stay in position 2
    ("crimp", ["props"], "primp", True),
    ("crimp", ["error", "order"], "right", False),
    ("crimp", ["error", "order"], "trier", True),
    ("spill", ["alloy"], "limes", False),   # two yellow l's need two l's
    ("spill", ["alloy"], "level", True),
    ("earth", ["alloy"], "drama", True),    # extra letters are fine
    ("spots", ["crass", "wisps"], "slots", False),
    ("spots", ["crass", "wisps"], "spots", True),
])
def test_hard_mode_violation(secret, previous, guess, allowed):
    history = [(p, feedback(secret, p)) for p in previous]
    reason = hard_mode_violation(history, guess)
    assert (reason is None) == allowed


def test_env_plays_to_solved():
    env = WordleEnv(max_turns=6)
    env.reset("crane")
    assert env.state is GameState.IN_PROGRESS
    assert env.turn == 1
    env.guess("slate")
    env.guess("CRANE")
    assert env.state is GameState.SOLVED
    assert env.turns_used == 2
    assert env.secret == "crane"
    assert [r.guess for r in env.trace] == ["slate", "crane"]


def test_env_fails_after_max_turns():
    env = WordleEnv(max_turns=2)
    env.reset("crane")
    env.guess("slate")
    env.guess("slate")
    assert env.state is GameState.FAILED
    with pytest.raises(RuntimeError):
        env.guess("crane")


def test_env_hides_secret_while_in_progress():
    env = WordleEnv()
    env.reset("crane")
    with pytest.raises(RuntimeError):
        env.secret


def test_env_rejects_invalid_guesses():
    env = WordleEnv(hard_mode=True)
    env.reset("crimp")
    with pytest.raises(InvalidWord):
        env.guess("crim")
    env.guess("props")
    with pytest.raises(InvalidWord, match="hard mode"):
        env.guess("pinup")
    assert env.turns_used == 1
