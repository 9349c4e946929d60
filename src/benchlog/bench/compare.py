"""Benchmark comparison analysis.

Compares the tests of the current run against the same tests in the
baseline run (the last entry of the history log), producing per-metric
statistics, percent-change deltas and significance flags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from benchlog.bench.errors import UnpairedSamplesError
from benchlog.bench.results import METRICS, HistoryEntry, TestResult
from benchlog.bench.significance import signed_rank_test
from benchlog.bench.stats import MetricStatistics, aggregate
from benchlog.logging import get_logger

log = get_logger("compare")


# ---------------------------------------------------------------------------
# Per-metric comparison result
# ---------------------------------------------------------------------------


@dataclass
class MetricComparison:
    """One metric of one test, compared against the baseline."""

    metric: str
    current: MetricStatistics
    baseline: MetricStatistics | None = None
    percent_change: float | None = None
    significant: bool | None = None
    alpha: float | None = None
    # Set when the runs had different repetition counts.
    unpaired: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "metric": self.metric,
            "current": _stats_dict(self.current),
            "baseline": _stats_dict(self.baseline) if self.baseline else None,
            "percent_change": self.percent_change,
            "significant": self.significant,
            "alpha": self.alpha,
            "unpaired": self.unpaired,
        }


def _stats_dict(stats: MetricStatistics) -> dict[str, Any]:
    d: dict[str, Any] = {"n": stats.n}
    d.update(stats.to_dict())
    return d


# ---------------------------------------------------------------------------
# Per-test comparison result
# ---------------------------------------------------------------------------


@dataclass
class ComparisonResult:
    """All metrics of one test compared against the baseline."""

    name: str
    metrics: dict[str, MetricComparison] = field(default_factory=dict)

    @property
    def has_baseline(self) -> bool:
        return any(m.baseline is not None for m in self.metrics.values())

    @property
    def has_unpaired(self) -> bool:
        return any(m.unpaired for m in self.metrics.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "metrics": {name: m.to_dict() for name, m in self.metrics.items()},
        }


# ---------------------------------------------------------------------------
# Comparison logic
# ---------------------------------------------------------------------------


def percent_change(current_mean: float, baseline_mean: float) -> float | None:
    """Change of the mean relative to the current mean, in percent.

    Negative when the current run is faster.  None when the current
    mean is zero, where the ratio is undefined.
    """
    if current_mean == 0:
        return None
    return (current_mean - baseline_mean) / current_mean * 100


def compare_metric(
    metric: str,
    current: TestResult,
    baseline: TestResult | None,
) -> MetricComparison | None:
    """Compare one metric of *current* against *baseline*.

    Returns None if the current run did not record *metric*.  A
    baseline that lacks the metric (an older log) yields a comparison
    with no baseline fields set.
    """
    current_samples = current.metric_samples(metric)
    if current_samples is None:
        return None

    stats = aggregate(current_samples)
    comparison = MetricComparison(metric=metric, current=stats)

    baseline_samples = baseline.metric_samples(metric) if baseline else None
    if not baseline_samples:
        return comparison

    baseline_stats = aggregate(baseline_samples)
    comparison.baseline = baseline_stats
    comparison.percent_change = percent_change(stats.mean, baseline_stats.mean)

    try:
        outcome = signed_rank_test(baseline_samples, current_samples)
    except UnpairedSamplesError as exc:
        log.warning(
            "Skipping significance test for '%s' (%s): %s",
            current.name,
            metric,
            exc,
        )
        comparison.unpaired = True
        return comparison

    comparison.significant = outcome.significant
    comparison.alpha = outcome.alpha
    log.debug(
        "%s (%s): W=%s n=%d alpha=%s",
        current.name,
        metric,
        outcome.w,
        outcome.n,
        outcome.alpha,
    )
    return comparison


def compare_test(current: TestResult, baseline: TestResult | None) -> ComparisonResult:
    """Compare every recorded metric of one test."""
    result = ComparisonResult(name=current.name)
    metric_names = list(METRICS) + [m for m in current.samples if m not in METRICS]
    for metric in metric_names:
        comparison = compare_metric(metric, current, baseline)
        if comparison is not None:
            result.metrics[metric] = comparison
    return result


def compare_to_baseline(
    results: dict[str, TestResult],
    baseline: HistoryEntry | None,
) -> dict[str, ComparisonResult]:
    """Compare a run's test results against a baseline entry.

    Args:
        results: Current test results, keyed by test name, in order.
        baseline: The previous run, or None if there is none.

    Returns:
        ComparisonResult per test, in the order of *results*.
    """
    comparisons: dict[str, ComparisonResult] = {}
    for name, current in results.items():
        previous = baseline.get(name) if baseline else None
        if baseline is not None and previous is None:
            log.info("Test '%s' has no baseline in the run from %s", name, baseline.time)
        comparisons[name] = compare_test(current, previous)
    return comparisons


def comparisons_to_dict(comparisons: dict[str, ComparisonResult]) -> dict[str, Any]:
    """Serialize comparison results for machine-readable output."""
    return {name: c.to_dict() for name, c in comparisons.items()}
