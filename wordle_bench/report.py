"""Plain-text and plot rendering of records and comparisons."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from wordle_bench.perf import PerformanceRecord, PerformanceSummary
from wordle_bench.stats import ComparisonResult

logger = logging.getLogger(__name__)

LINE_WIDTH = 80


def _fmt_mean(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.2f}"


def format_summaries(records: Sequence[PerformanceRecord]) -> str:
    """Table of all records, best mean ranked turns first."""
    lines = [
        f"{'Strategy':<25} {'Games':>6} {'Solved':>7} {'Rate':>6} "
        f"{'Mean':>6} {'Median':>7} {'Errors':>7}",
        "-" * 72,
    ]
    summaries = sorted((r.summary() for r in records), key=lambda s: s.mean_ranked_turns)
    for s in summaries:
        median = "n/a" if s.median_turns is None else f"{s.median_turns:.1f}"
        lines.append(
            f"{s.strategy_name:<25} {s.num_tried:>6} {s.num_solved:>6}  "
            f"{100 * s.solve_rate:>5.1f}% {_fmt_mean(s.mean_turns):>6} "
            f"{median:>7} {s.num_errors:>7}"
        )
    return "\n".join(lines)


def format_histogram(summary: PerformanceSummary, width: int = LINE_WIDTH) -> str:
    """Horizontal bar chart of solved turn counts; lines never exceed *width*."""
    bins = dict(summary.histogram)
    rows = [(str(k), v) for k, v in sorted(bins.items())]
    rows.append(("X", summary.num_missed))
    top = max((v for _, v in rows), default=0)
    digits = len(str(top))
    label_w = max(len(label) for label, _ in rows)
    room = width - label_w - digits - 5  # " |" + " (" + ")"
    per_mark = max(top / room, 1.0) if room > 0 else float(top or 1)
    out = []
    for label, count in rows:
        marks = int(count / per_mark)
        out.append(f"{label:>{label_w}} |{'■' * marks} ({count})")
    return "\n".join(out)


def format_record(record: PerformanceRecord, histogram: bool = False) -> str:
    s = record.summary()
    lines = [
        f"{' ' + record.label + ' ':-^{LINE_WIDTH}}",
        f"Ran {s.num_tried} words (corpus {record.corpus.tag!r}, max {record.max_turns} turns)",
        f"Guessed {s.num_solved} correctly, or {100 * s.solve_rate:.1f}%, "
        f"and {s.num_missed} incorrectly",
        f"Correct guesses took {_fmt_mean(s.mean_turns)} attempts on average",
    ]
    if s.num_errors:
        lines.append(f"{s.num_errors} games ended with a strategy error")
        for o in record.errors()[:5]:
            lines.append(f"  {o.word}: {o.error}")
    if histogram:
        lines.append(format_histogram(s))
    return "\n".join(lines)


def format_comparison(result: ComparisonResult) -> str:
    cur, base = result.current, result.baseline
    verdict = "a sig. diff." if result.significant else "not a sig. diff."
    solved_verdict = (
        "a sig. diff." if result.solve_rate_p_value < result.alpha else "not a sig. diff."
    )
    mean_diff = (
        "n/a" if result.mean_turns_diff is None else f"{result.mean_turns_diff:+.2f}"
    )
    lines = [
        f"{' ' + cur.strategy_name + ' vs ' + base.strategy_name + ' ':-^{LINE_WIDTH}}",
        f"Ran {cur.num_tried} words against baseline {base.strategy_name} "
        f"on {base.num_tried} words",
        f"Guessed {cur.num_solved} correctly, or {100 * cur.solve_rate:.1f}% "
        f"({100 * result.solve_rate_diff:+.1f}%), and {cur.num_missed} incorrectly, "
        f"{solved_verdict}",
        f"Correct guesses took {_fmt_mean(cur.mean_turns)} ({mean_diff}) attempts "
        f"on average",
        f"Turn counts (failures ranked last): {verdict} "
        f"(U={result.statistic:.1f}, p={result.p_value:.4g}, alpha={result.alpha}, "
        f"effect={result.effect_size:+.3f})",
    ]
    if result.welch_p_value is not None:
        lines.append(f"Welch's t-test p={result.welch_p_value:.4g}")
    return "\n".join(lines)


def print_summaries(records: Sequence[PerformanceRecord]) -> None:
    print()
    print(format_summaries(records))
    print()


def plot_histograms(records: Sequence[PerformanceRecord], path: str | Path) -> Path | None:
    """Save one guess-count histogram per record; needs matplotlib (``plot`` extra)."""
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        logger.warning("matplotlib not installed - skipping plot")
        return None

    n = len(records)
    if n == 0:
        return None

    cols = min(n, 4)
    rows = (n + cols - 1) // cols
    fig, axes = plt.subplots(rows, cols, figsize=(5 * cols, 4 * rows), squeeze=False)
    for idx, record in enumerate(records):
        ax = axes[idx // cols][idx % cols]
        ranked = record.ranked_turns()
        bins = list(range(1, record.max_turns + 3))
        ax.hist(ranked, bins=bins, edgecolor="black", align="left")
        ax.set_xticks(range(1, record.max_turns + 2))
        ax.set_xticklabels([str(t) for t in range(1, record.max_turns + 1)] + ["X"])
        ax.set_title(record.strategy_name, fontsize=10)
        ax.set_xlabel("Guesses")
        ax.set_ylabel("Count")

    # Hide unused axes
    for idx in range(n, rows * cols):
        axes[idx // cols][idx % cols].set_visible(False)

    fig.suptitle("Guess-count distribution by strategy")
    fig.tight_layout()
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(dest, dpi=150)
    plt.close(fig)
    logger.info("Histogram saved to %s", dest)
    return dest
