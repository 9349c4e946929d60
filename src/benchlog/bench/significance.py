"""Wilcoxon signed-rank test for paired benchmark runs.

Each sample in the baseline run is paired with the sample at the same
position in the current run.  Small samples (fewer than 10 non-zero
differences) are checked against an exact table of critical values;
larger ones use the normal approximation.

References:
    Wilcoxon, F. (1945). "Individual comparisons by ranking methods."
        Biometrics Bulletin 1(6): 80-83.
    Lowry, R. "Concepts and Applications of Inferential Statistics",
        chapter 12a (critical values of W for n = 5..9).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from benchlog.bench.errors import UnpairedSamplesError

# Critical values of |W| for a two-tailed test, ascending, keyed by n.
# There are no entries below n = 5: no outcome is significant there.
CRITICAL_VALUES: dict[int, list[tuple[int, float]]] = {
    5: [(15, 0.05)],
    6: [(17, 0.05), (21, 0.025)],
    7: [(22, 0.05), (25, 0.025), (28, 0.01)],
    8: [(26, 0.05), (30, 0.025), (34, 0.01), (36, 0.005)],
    9: [(29, 0.05), (35, 0.025), (39, 0.01), (43, 0.005)],
}

# (z threshold, alpha), tightest first.
Z_THRESHOLDS: list[tuple[float, float]] = [
    (3.291, 0.0005),
    (2.576, 0.005),
    (2.326, 0.01),
    (1.960, 0.025),
    (1.645, 0.05),
]

# Below this many non-zero differences the exact table is used.
LARGE_SAMPLE_N = 10


@dataclass(frozen=True)
class RankedDifference:
    """One retained (baseline, current) pair after ranking."""

    difference: float  # baseline - current
    absolute: float
    sign: int  # -1 or +1
    rank: float  # 1-based, averaged across ties

    @property
    def signed_rank(self) -> float:
        return self.rank * self.sign


@dataclass(frozen=True)
class SignedRankResult:
    """Outcome of a signed-rank test."""

    w: float
    n: int
    alpha: float  # 0.0 when nothing was crossed
    z: float | None = None  # only set for the normal approximation
    ranks: list[RankedDifference] = field(default_factory=list)

    @property
    def significant(self) -> bool:
        return self.alpha > 0


def rank_differences(
    baseline: Sequence[float],
    current: Sequence[float],
) -> list[RankedDifference]:
    """Rank the non-zero paired differences by magnitude.

    Rows are returned in ascending order of absolute difference.  Rows
    sharing an absolute difference all receive the mean of the ranks
    they occupy, e.g. two values tied for ranks 2 and 3 both get 2.5.

    Raises:
        UnpairedSamplesError: If the two sequences differ in length.
    """
    if len(baseline) != len(current):
        raise UnpairedSamplesError(len(baseline), len(current))

    diffs = [b - c for b, c in zip(baseline, current)]
    diffs = sorted((d for d in diffs if d != 0), key=abs)

    ranked: list[RankedDifference] = []
    i = 0
    while i < len(diffs):
        # Find the run of rows tied with diffs[i].
        j = i
        while j + 1 < len(diffs) and abs(diffs[j + 1]) == abs(diffs[i]):
            j += 1
        # Positions i..j hold ranks i+1..j+1; their mean is the midpoint.
        rank = (i + 1 + j + 1) / 2
        for d in diffs[i : j + 1]:
            ranked.append(
                RankedDifference(
                    difference=d,
                    absolute=abs(d),
                    sign=1 if d > 0 else -1,
                    rank=rank,
                )
            )
        i = j + 1

    return ranked


def signed_rank_test(
    baseline: Sequence[float],
    current: Sequence[float],
) -> SignedRankResult:
    """Run a two-sided Wilcoxon signed-rank test on paired samples.

    Args:
        baseline: Samples from the previous run.
        current: Samples from this run, same length as *baseline*.

    Returns:
        SignedRankResult carrying W, n and the significance level
        reached (0.0 if none).

    Raises:
        UnpairedSamplesError: If the two sequences differ in length.
    """
    ranks = rank_differences(baseline, current)
    n = len(ranks)
    w = sum(r.signed_rank for r in ranks)

    if n < LARGE_SAMPLE_N:
        return SignedRankResult(w=w, n=n, alpha=_exact_alpha(w, n), ranks=ranks)

    sd = math.sqrt(n * (n + 1) * (2 * n + 1) / 6)
    z = abs((w - 0.5) / sd)
    alpha = 0.0
    for threshold, level in Z_THRESHOLDS:
        if z > threshold:
            alpha = level
            break
    return SignedRankResult(w=w, n=n, alpha=alpha, z=z, ranks=ranks)


def _exact_alpha(w: float, n: int) -> float:
    """Look up the tightest alpha whose critical value |w| exceeds."""
    for critical, level in reversed(CRITICAL_VALUES.get(n, [])):
        if abs(w) > critical:
            return level
    return 0.0


def is_significant(baseline: Sequence[float], current: Sequence[float]) -> bool:
    """True if the paired samples differ significantly (alpha <= 0.05).

    Raises:
        UnpairedSamplesError: If the two sequences differ in length.
    """
    return signed_rank_test(baseline, current).significant
