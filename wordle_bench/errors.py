"""Exception hierarchy for the evaluation harness.

Everything raised on purpose by ``wordle_bench`` derives from
:class:`WordleBenchError`, so callers can catch the whole family at once.
Errors that describe a bad argument also derive from :class:`ValueError`.
"""

from __future__ import annotations


class WordleBenchError(Exception):
    """Base class for all harness errors."""


# ------------------------------------------------------------------
# Words and feedback
# ------------------------------------------------------------------

class LengthMismatch(WordleBenchError, ValueError):
    """Guess and secret have different lengths."""

    def __init__(self, guess_len: int, secret_len: int) -> None:
        super().__init__(
            f"guess length ({guess_len}) != secret length ({secret_len})"
        )
        self.guess_len = guess_len
        self.secret_len = secret_len


class InvalidWord(WordleBenchError, ValueError):
    """A word has the wrong length or contains characters outside a-z."""


class StrategyError(WordleBenchError):
    """A strategy misbehaved during a game.

    The game runner catches this and records the game as failed; it never
    propagates out of a run.
    """


class InvalidConfig(WordleBenchError, ValueError):
    """A configuration value is out of range or inconsistent."""


# ------------------------------------------------------------------
# Harness
# ------------------------------------------------------------------

class HarnessError(WordleBenchError):
    """The harness cannot start a run."""


class EmptyCorpus(HarnessError):
    """No target words were selected."""

    def __init__(self, message: str = "no target words selected") -> None:
        super().__init__(message)


class NoStrategies(HarnessError):
    """No strategies were registered."""

    def __init__(self, message: str = "no strategies have been added to the harness") -> None:
        super().__init__(message)


# ------------------------------------------------------------------
# Baseline persistence
# ------------------------------------------------------------------

class BaselineError(WordleBenchError):
    """Base class for baseline store failures."""


class BaselineNotFound(BaselineError):
    """No baseline is stored under the requested key."""


class BaselineFormatError(BaselineError):
    """A stored baseline could not be decoded."""


class BaselineExists(BaselineError):
    """Refusing to overwrite an existing baseline without ``force``."""


# ------------------------------------------------------------------
# Statistics
# ------------------------------------------------------------------

class StatsError(WordleBenchError):
    """Base class for comparison failures."""


class InsufficientData(StatsError):
    """Not enough outcomes to run a meaningful comparison."""


class CorpusMismatch(InsufficientData):
    """The two records were produced on different corpora."""
