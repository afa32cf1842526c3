"""Command-line entry point: run strategies, save or compare baselines."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

from wordle_bench.baseline import BaselineKey, BaselineStore
from wordle_bench.config import ExecutionMode, HarnessConfig, WordSelection, load_config
from wordle_bench.errors import BaselineNotFound, WordleBenchError
from wordle_bench.harness import Harness
from wordle_bench.lexicon import load_words
from wordle_bench.report import format_comparison, format_record, plot_histograms, print_summaries
from wordle_bench.stats import compare
from wordle_bench.strategies import discover_strategies, load_strategy

logger = logging.getLogger("wordle_bench")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordle-bench",
        description="Evaluate Wordle strategies and compare them against saved baselines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  wordle-bench --answers answers.txt                               # built-in strategies, all words
  wordle-bench --answers answers.txt --num-words 100 --random      # 100 words drawn with --seed
  wordle-bench --answers answers.txt --parallel --workers 8
  wordle-bench --answers answers.txt --strategy mypkg.strat:Mine --save-baseline v1
  wordle-bench --answers answers.txt --strategy mypkg.strat:Mine --compare v1
""",
    )
    parser.add_argument("--answers", type=str, required=True,
                        help="Answer word list (.txt one per line, or .csv with a 'word' column)")
    parser.add_argument("--guesses", type=str, default=None,
                        help="Valid guess word list (default: the answer list)")
    parser.add_argument("--strategy", action="append", default=None, metavar="MODULE:CLASS",
                        help="Strategy to run (repeatable; built-in class names also work). "
                             "Default: every built-in strategy")
    parser.add_argument("--config", type=str, default=None,
                        help="JSON file with HarnessConfig fields; flags below override it")
    parser.add_argument("--num-words", type=int, default=None, help="Limit number of target words")
    parser.add_argument("--random", action="store_true",
                        help="With --num-words, sample words at random instead of taking the first N")
    parser.add_argument("--seed", type=int, default=None, help="Seed for sampling and strategies")
    parser.add_argument("--parallel", action="store_true", help="Run games on a worker pool")
    parser.add_argument("--workers", type=int, default=None, help="Max parallel workers (default: auto)")
    parser.add_argument("--thread-pool", action="store_true",
                        help="Use threads instead of processes in parallel mode")
    parser.add_argument("--max-turns", type=int, default=None, help="Max guesses per game (default: 6)")
    parser.add_argument("--length", type=int, default=None, help="Word length (default: 5)")
    parser.add_argument("--tag", type=str, default=None,
                        help="Corpus tag stored on records (default: answer file stem)")
    parser.add_argument("--baseline-dir", type=str, default="baselines",
                        help="Directory of saved baselines (default: ./baselines)")
    parser.add_argument("--save-baseline", type=str, default=None, metavar="TAG",
                        help="Save each strategy's record as a baseline under TAG")
    parser.add_argument("--force", action="store_true", help="Overwrite existing baselines")
    parser.add_argument("--compare", type=str, default=None, metavar="TAG",
                        help="Compare each strategy against its baseline saved under TAG")
    parser.add_argument("--against", type=str, default=None, metavar="STRATEGY",
                        help="With --compare, use this strategy's baseline for every comparison")
    parser.add_argument("--alpha", type=float, default=None,
                        help="Significance threshold (default: 0.05)")
    parser.add_argument("--histogram", action="store_true", help="Print a text histogram per strategy")
    parser.add_argument("--json", type=str, default=None, help="Save records (and comparisons) as JSON")
    parser.add_argument("--plot", type=str, default=None, help="Save histogram plot (needs matplotlib)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> HarnessConfig:
    cfg = load_config(args.config) if args.config else HarnessConfig()
    changes: dict = {}
    if args.num_words is not None:
        seed = args.seed if args.seed is not None else cfg.seed
        changes["words_to_test"] = (
            WordSelection.random(args.num_words, seed) if args.random
            else WordSelection.first(args.num_words)
        )
    if args.seed is not None:
        changes["seed"] = args.seed
    if args.parallel:
        changes["execution_mode"] = ExecutionMode.PARALLEL
    if args.workers is not None:
        changes["max_workers"] = args.workers
    if args.thread_pool:
        changes["pool"] = "thread"
    if args.max_turns is not None:
        changes["max_turns"] = args.max_turns
    if args.length is not None:
        changes["word_length"] = args.length
    if args.alpha is not None:
        changes["significance_threshold"] = args.alpha
    return cfg.with_changes(**changes) if changes else cfg


def run(args: argparse.Namespace) -> int:
    cfg = config_from_args(args)
    answers = load_words(args.answers, word_length=cfg.word_length)
    guesses = load_words(args.guesses, word_length=cfg.word_length) if args.guesses else None
    tag = args.tag or Path(args.answers).stem
    print(f"Answers: {len(answers)} words of length {cfg.word_length} (corpus {tag!r})")

    classes = [load_strategy(s) for s in args.strategy] if args.strategy else discover_strategies()
    harness = Harness(answers, guesses, config=cfg, corpus_tag=tag).add_strategies(classes)

    store = BaselineStore(args.baseline_dir)
    # Load baselines before scoring, so a missing one fails fast.
    baselines = {}
    if args.compare:
        for reg in harness.strategies:
            key = BaselineKey(args.against or reg.name, args.compare)
            baselines[reg.name] = store.load(key)

    t0 = time.time()
    records = harness.run()
    elapsed = time.time() - t0

    print_summaries(records)
    print(f"Elapsed: {elapsed:.1f}s")

    comparisons = {}
    for record in records:
        print()
        print(format_record(record, histogram=args.histogram))
        if record.strategy_name in baselines:
            result = compare(record, baselines[record.strategy_name], cfg.significance_threshold)
            comparisons[record.strategy_name] = result
            print(format_comparison(result))

    if args.save_baseline:
        for record in records:
            path = store.save(record, BaselineKey(record.strategy_name, args.save_baseline),
                              force=args.force)
            print(f"Baseline saved to {path}")

    if args.plot:
        plot_histograms(records, args.plot)

    if args.json:
        json_path = Path(args.json)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "config": cfg.to_dict(),
            "records": [r.to_dict() for r in records],
            "summaries": [r.summary().to_dict() for r in records],
            "comparisons": {k: v.to_dict() for k, v in comparisons.items()},
        }
        json_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"JSON saved to {json_path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except BaselineNotFound as exc:
        print(f"error: {exc} (run with --save-baseline first)", file=sys.stderr)
        return 1
    except (WordleBenchError, FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
