"""Statistical comparison of two performance records.

The primary test is a two-sided Mann-Whitney U test on per-game turn counts,
where unsolved games are censored at ``max_turns + 1`` so that they rank
behind every solved game.  Two secondary p-values are reported alongside:
Fisher's exact test on solved/missed counts and Welch's t-test on the same
censored turn counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
from scipy import stats as sps

from wordle_bench.errors import CorpusMismatch, InsufficientData, InvalidConfig
from wordle_bench.perf import PerformanceRecord, PerformanceSummary

logger = logging.getLogger(__name__)

DEFAULT_ALPHA = 0.05
MIN_SAMPLES = 2


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing ``current`` against ``baseline``.

    ``effect_size`` is the rank-biserial correlation in [-1, 1]; positive
    values mean the current strategy tends to need fewer turns.
    """

    current: PerformanceSummary
    baseline: PerformanceSummary
    alpha: float
    statistic: float
    p_value: float
    significant: bool
    effect_size: float
    mean_turns_diff: float | None
    mean_ranked_turns_diff: float
    solve_rate_diff: float
    solve_rate_p_value: float
    welch_p_value: float | None
    test: str = "mann-whitney-u"

    @property
    def decision(self) -> str:
        return "reject H0" if self.significant else "fail to reject H0"

    @property
    def improved(self) -> bool:
        """True when the difference is significant and favours ``current``."""
        return self.significant and self.effect_size > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "test": self.test,
            "alpha": self.alpha,
            "statistic": self.statistic,
            "p_value": self.p_value,
            "significant": self.significant,
            "decision": self.decision,
            "effect_size": self.effect_size,
            "mean_turns_diff": self.mean_turns_diff,
            "mean_ranked_turns_diff": self.mean_ranked_turns_diff,
            "solve_rate_diff": self.solve_rate_diff,
            "solve_rate_p_value": self.solve_rate_p_value,
            "welch_p_value": self.welch_p_value,
            "current": self.current.to_dict(),
            "baseline": self.baseline.to_dict(),
        }


def _check_comparable(current: PerformanceRecord, baseline: PerformanceRecord) -> None:
    for role, rec in (("current", current), ("baseline", baseline)):
        if rec.num_tried() < MIN_SAMPLES:
            raise InsufficientData(
                f"{role} record {rec.label!r} has {rec.num_tried()} outcomes, "
                f"need at least {MIN_SAMPLES}"
            )
    if not current.corpus.same_words(baseline.corpus):
        raise CorpusMismatch(
            f"corpus {current.corpus.tag!r} ({current.corpus.fingerprint}, "
            f"{len(current.corpus)} words) differs from baseline corpus "
            f"{baseline.corpus.tag!r} ({baseline.corpus.fingerprint}, "
            f"{len(baseline.corpus)} words)"
        )
    if current.max_turns != baseline.max_turns:
        logger.warning(
            "comparing records with different max_turns (%d vs %d); "
            "failures are censored at each record's own limit",
            current.max_turns, baseline.max_turns,
        )


def _mann_whitney(a: np.ndarray, b: np.ndarray) -> tuple[float, float]:
    """Return (U for *a*, two-sided p-value)."""
    if np.ptp(np.concatenate([a, b])) == 0:
        # Every game took the same number of turns: no evidence of a difference.
        return len(a) * len(b) / 2.0, 1.0
    res = sps.mannwhitneyu(a, b, alternative="two-sided")
    return float(res.statistic), min(float(res.pvalue), 1.0)


def _welch(a: np.ndarray, b: np.ndarray) -> float | None:
    if np.var(a) == 0 and np.var(b) == 0:
        return 1.0 if a.mean() == b.mean() else 0.0
    res = sps.ttest_ind(a, b, equal_var=False)
    p = float(res.pvalue)
    return None if np.isnan(p) else p


def _fisher(current: PerformanceSummary, baseline: PerformanceSummary) -> float:
    table = [
        [current.num_solved, baseline.num_solved],
        [current.num_missed, baseline.num_missed],
    ]
    _, p = sps.fisher_exact(table)
    return float(p)


def compare(
    current: PerformanceRecord,
    baseline: PerformanceRecord,
    alpha: float = DEFAULT_ALPHA,
) -> ComparisonResult:
    """Compare *current* against *baseline* over the same corpus.

    Raises
    ------
    InsufficientData
        If either record has fewer than ``MIN_SAMPLES`` outcomes.
    CorpusMismatch
        If the records were produced on different word lists (or orders).
    InvalidConfig
        If *alpha* is not in (0, 1).
    """
    if not 0.0 < alpha < 1.0:
        raise InvalidConfig(f"alpha must be in (0, 1), got {alpha}")
    _check_comparable(current, baseline)

    a = np.asarray(current.ranked_turns(), dtype=float)
    b = np.asarray(baseline.ranked_turns(), dtype=float)
    u, p = _mann_whitney(a, b)
    effect = 1.0 - 2.0 * u / (len(a) * len(b))

    cur_sum = current.summary()
    base_sum = baseline.summary()
    if cur_sum.mean_turns is None or base_sum.mean_turns is None:
        mean_diff = None
    else:
        mean_diff = cur_sum.mean_turns - base_sum.mean_turns

    result = ComparisonResult(
        current=cur_sum,
        baseline=base_sum,
        alpha=alpha,
        statistic=u,
        p_value=p,
        significant=p < alpha,
        effect_size=float(effect),
        mean_turns_diff=mean_diff,
        mean_ranked_turns_diff=float(a.mean() - b.mean()),
        solve_rate_diff=cur_sum.solve_rate - base_sum.solve_rate,
        solve_rate_p_value=_fisher(cur_sum, base_sum),
        welch_p_value=_welch(a, b),
    )
    logger.debug(
        "compare %s vs %s: U=%.1f p=%.4g effect=%.3f",
        current.label, baseline.label, u, p, effect,
    )
    return result
