"""Run registered strategies against a corpus of target words.

Features:
  - Any number of strategies, each rebuilt fresh for every game.
  - Serial execution on the calling thread, or parallel execution on a
    process pool (default) or thread pool.
  - Identical records regardless of execution mode: every (strategy, word)
    pair owns a fixed result slot, so completion order never matters.
"""

from __future__ import annotations

import logging
import math
import os
import pickle
import threading
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable, Sequence

from wordle_bench.config import ExecutionMode, HarnessConfig
from wordle_bench.errors import EmptyCorpus, InvalidConfig, NoStrategies
from wordle_bench.perf import Corpus, PerformanceRecord
from wordle_bench.runner import GameOutcome, OutcomeStatus, play_game
from wordle_bench.strategy import StrategyFactory
from wordle_bench.wordle_env import normalize_word

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Registration and work items
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Registration:
    name: str
    factory: StrategyFactory
    version: str
    hard_mode: bool
    vocabulary: tuple[str, ...] | None = None


@dataclass(frozen=True)
class _WorkItem:
    strategy: int
    start: int
    stop: int


def _game_seed(root: int, strategy: int, word: int) -> int:
    """Deterministic per-game seed; independent of the secret word itself."""
    return ((root * 1_000_003 + strategy) * 1_000_003 + word) & 0xFFFFFFFF


class ResultCollector:
    """Pre-assigned outcome slots, one per (strategy, word) pair.

    Writes are serialized with a lock, and each slot may be written once.
    Reading back in slot order makes assembly independent of the order in
    which games finish.
    """

    def __init__(self, num_strategies: int, num_words: int) -> None:
        self._slots: list[list[GameOutcome | None]] = [
            [None] * num_words for _ in range(num_strategies)
        ]
        self._lock = threading.Lock()

    def put(self, strategy: int, word: int, outcome: GameOutcome) -> None:
        with self._lock:
            if self._slots[strategy][word] is not None:
                raise RuntimeError(f"result slot ({strategy}, {word}) written twice")
            self._slots[strategy][word] = outcome

    def put_many(self, strategy: int, results: Iterable[tuple[int, GameOutcome]]) -> None:
        for word, outcome in results:
            self.put(strategy, word, outcome)

    def missing(self) -> list[tuple[int, int]]:
        with self._lock:
            return [
                (s, w)
                for s, row in enumerate(self._slots)
                for w, outcome in enumerate(row)
                if outcome is None
            ]

    def outcomes(self, strategy: int) -> tuple[GameOutcome, ...]:
        with self._lock:
            row = self._slots[strategy]
            if any(o is None for o in row):
                raise RuntimeError(f"strategy {strategy} has unfilled result slots")
            return tuple(row)  # type: ignore[arg-type]


# ------------------------------------------------------------------
# Worker function (may run in a child process)
# ------------------------------------------------------------------

def _run_chunk(
    factory: StrategyFactory,
    strategy_index: int,
    words: list[str],
    start: int,
    vocabulary: tuple[str, ...],
    word_length: int,
    max_turns: int,
    root_seed: int,
    retain_traces: bool,
) -> list[tuple[int, GameOutcome]]:
    """Play one strategy against ``words``, which start at corpus index *start*."""
    results: list[tuple[int, GameOutcome]] = []
    for offset, secret in enumerate(words):
        index = start + offset
        outcome = play_game(
            factory,
            secret,
            vocabulary=vocabulary,
            word_length=word_length,
            max_turns=max_turns,
            seed=_game_seed(root_seed, strategy_index, index),
            retain_trace=retain_traces,
        )
        results.append((index, outcome))
    return results


# ------------------------------------------------------------------
# Harness
# ------------------------------------------------------------------

class Harness:
    """Runs many strategies on many target words.

    Parameters
    ----------
    answers : sequence of str
        Ordered candidate secret words.  ``config.words_to_test`` picks the
        targets from this list.
    guesses : sequence of str or None
        Valid guess words exposed to strategies.  Defaults to *answers*.
    config : HarnessConfig or None
        Run configuration (immutable).
    corpus_tag : str
        Label stored on every record and used for baseline keys.
    """

    def __init__(
        self,
        answers: Sequence[str],
        guesses: Sequence[str] | None = None,
        config: HarnessConfig | None = None,
        corpus_tag: str = "default",
    ) -> None:
        self._config = config or HarnessConfig()
        length = self._config.word_length
        self._answers = tuple(normalize_word(w, length) for w in answers)
        self._guesses = (
            tuple(normalize_word(w, length) for w in guesses)
            if guesses is not None else self._answers
        )
        self._corpus_tag = corpus_tag
        self._strategies: list[Registration] = []

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> HarnessConfig:
        return self._config

    @property
    def strategies(self) -> tuple[Registration, ...]:
        return tuple(self._strategies)

    def add_strategy(
        self,
        factory: StrategyFactory,
        name: str | None = None,
        vocabulary: Sequence[str] | None = None,
    ) -> Harness:
        """Register a strategy factory (usually a Strategy subclass).

        The factory is called once here to read the strategy's name, version
        and hard-mode flag; games always get their own fresh instance.
        *vocabulary* replaces the guess list this strategy is shown.
        """
        try:
            probe = factory()
            name = name or probe.name
            version = probe.version
            hard_mode = bool(probe.hard_mode)
        except Exception as exc:
            raise InvalidConfig(f"cannot instantiate strategy {factory!r}: {exc}") from exc
        if any(r.name == name for r in self._strategies):
            raise InvalidConfig(f"a strategy named {name!r} is already registered")
        vocab = None
        if vocabulary is not None:
            vocab = tuple(normalize_word(w, self._config.word_length) for w in vocabulary)
        self._strategies.append(Registration(name, factory, version, hard_mode, vocab))
        logger.debug("registered strategy %s v%s (hard_mode=%s)", name, version, hard_mode)
        return self

    def add_strategies(self, factories: Iterable[StrategyFactory]) -> Harness:
        for factory in factories:
            self.add_strategy(factory)
        return self

    def with_config(self, **changes) -> Harness:
        """Return a copy of this harness with some config fields replaced."""
        other = Harness(
            self._answers,
            self._guesses,
            config=self._config.with_changes(**changes),
            corpus_tag=self._corpus_tag,
        )
        other._strategies = list(self._strategies)
        return other

    def select_words(self) -> list[str]:
        return self._config.words_to_test.apply(self._answers)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def run(self) -> list[PerformanceRecord]:
        """Play every strategy against every selected word.

        Returns one record per strategy, in registration order.

        Raises
        ------
        NoStrategies
            If no strategy has been registered.
        EmptyCorpus
            If the word selection is empty.
        InvalidConfig
            If parallel process execution was requested with a factory that
            cannot be pickled.
        """
        if not self._strategies:
            raise NoStrategies()
        words = self.select_words()
        if not words:
            raise EmptyCorpus()

        cfg = self._config
        corpus = Corpus(tuple(words), self._corpus_tag)
        collector = ResultCollector(len(self._strategies), len(words))

        if cfg.execution_mode is ExecutionMode.PARALLEL:
            workers = cfg.max_workers or os.cpu_count() or 4
            logger.info(
                "Running %d strategies on %d words (parallel, %s pool, workers: %d)",
                len(self._strategies), len(words), cfg.pool, workers,
            )
            self._run_parallel(words, collector, workers)
        else:
            logger.info(
                "Running %d strategies on %d words (serial)",
                len(self._strategies), len(words),
            )
            for item in self._work_items(len(words), len(words)):
                collector.put_many(item.strategy, self._execute(item, words))

        missing = collector.missing()
        if missing:
            raise RuntimeError(f"{len(missing)} games produced no outcome")

        records = []
        for idx, reg in enumerate(self._strategies):
            record = PerformanceRecord(
                strategy_name=reg.name,
                strategy_version=reg.version,
                hard_mode=reg.hard_mode,
                corpus=corpus,
                max_turns=cfg.max_turns,
                outcomes=collector.outcomes(idx),
            )
            records.append(record)
            self._log_done(record)
        return records

    def _work_items(self, num_words: int, chunk: int) -> list[_WorkItem]:
        items = []
        for s in range(len(self._strategies)):
            for start in range(0, num_words, chunk):
                items.append(_WorkItem(s, start, min(start + chunk, num_words)))
        return items

    def _args(self, item: _WorkItem, words: list[str]) -> tuple:
        reg = self._strategies[item.strategy]
        cfg = self._config
        return (
            reg.factory,
            item.strategy,
            words[item.start:item.stop],
            item.start,
            reg.vocabulary if reg.vocabulary is not None else self._guesses,
            cfg.word_length,
            cfg.max_turns,
            cfg.seed,
            cfg.retain_traces,
        )

    def _execute(self, item: _WorkItem, words: list[str]) -> list[tuple[int, GameOutcome]]:
        return _run_chunk(*self._args(item, words))

    def _run_parallel(self, words: list[str], collector: ResultCollector, workers: int) -> None:
        cfg = self._config
        if cfg.pool == "process":
            for reg in self._strategies:
                try:
                    pickle.dumps(reg.factory)
                except Exception as exc:
                    raise InvalidConfig(
                        f"strategy {reg.name!r} cannot be sent to a process pool "
                        f"({exc}); register a module-level class or use pool='thread'"
                    ) from exc

        # Several chunks per worker keeps the pool busy when strategies differ in speed.
        chunk = max(1, math.ceil(len(words) / (workers * 4)))
        items = self._work_items(len(words), chunk)
        executor_cls: type[Executor] = (
            ProcessPoolExecutor if cfg.pool == "process" else ThreadPoolExecutor
        )
        with executor_cls(max_workers=workers) as executor:
            futures = {
                executor.submit(_run_chunk, *self._args(item, words)): item
                for item in items
            }
            for fut in as_completed(futures):
                item = futures[fut]
                try:
                    results = fut.result()
                except Exception as exc:
                    # The worker itself died (e.g. a crashed process); the
                    # games in its chunk are charged to the strategy.
                    name = self._strategies[item.strategy].name
                    logger.error(
                        "worker for %s (words %d-%d) failed: %r",
                        name, item.start, item.stop - 1, exc,
                    )
                    results = [
                        (i, GameOutcome(
                            word=words[i],
                            status=OutcomeStatus.STRATEGY_ERROR,
                            turns=0,
                            max_turns=cfg.max_turns,
                            error=f"worker failed: {type(exc).__name__}: {exc}",
                        ))
                        for i in range(item.start, item.stop)
                    ]
                collector.put_many(item.strategy, results)

    @staticmethod
    def _log_done(record: PerformanceRecord) -> None:
        summary = record.summary()
        errors = f", strategy errors: {summary.num_errors}" if summary.num_errors else ""
        mean = "n/a" if summary.mean_turns is None else f"{summary.mean_turns:.2f}"
        logger.info(
            "  %-25s done - %d/%d solved, mean %s%s",
            record.strategy_name, summary.num_solved, summary.num_tried, mean, errors,
        )
