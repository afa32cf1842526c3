"""Evaluation harness for pluggable Wordle strategies.

Typical use::

    from wordle_bench import Harness, HarnessConfig, BaselineStore, compare

    harness = Harness(answers).add_strategy(MyStrategy)
    (record,) = harness.run()
    baseline = BaselineStore("baselines").load(BaselineKey("Mine", "v1"))
    print(compare(record, baseline).decision)
"""

from wordle_bench.baseline import BaselineKey, BaselineStore
from wordle_bench.config import ExecutionMode, HarnessConfig, WordSelection, load_config
from wordle_bench.errors import (
    BaselineError,
    BaselineExists,
    BaselineFormatError,
    BaselineNotFound,
    CorpusMismatch,
    EmptyCorpus,
    HarnessError,
    InsufficientData,
    InvalidConfig,
    InvalidWord,
    LengthMismatch,
    NoStrategies,
    StatsError,
    StrategyError,
    WordleBenchError,
)
from wordle_bench.harness import Harness
from wordle_bench.perf import Corpus, PerformanceRecord, PerformanceSummary
from wordle_bench.runner import GameOutcome, OutcomeStatus, play_game
from wordle_bench.stats import ComparisonResult, compare
from wordle_bench.strategy import GameConfig, Strategy
from wordle_bench.wordle_env import GuessRecord, LetterJudgment, WordleEnv, feedback

__version__ = "0.1.0"

__all__ = [
    "BaselineError",
    "BaselineExists",
    "BaselineFormatError",
    "BaselineKey",
    "BaselineNotFound",
    "BaselineStore",
    "ComparisonResult",
    "Corpus",
    "CorpusMismatch",
    "EmptyCorpus",
    "ExecutionMode",
    "GameConfig",
    "GameOutcome",
    "GuessRecord",
    "Harness",
    "HarnessConfig",
    "HarnessError",
    "InsufficientData",
    "InvalidConfig",
    "InvalidWord",
    "LengthMismatch",
    "LetterJudgment",
    "NoStrategies",
    "OutcomeStatus",
    "PerformanceRecord",
    "PerformanceSummary",
    "StatsError",
    "Strategy",
    "StrategyError",
    "WordSelection",
    "WordleBenchError",
    "WordleEnv",
    "compare",
    "feedback",
    "load_config",
    "play_game",
]
