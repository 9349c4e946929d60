"""Benchmark result data structures and serialization.

Hierarchy::

    HistoryEntry (one benchmark run, as stored in the log)
      → results: dict[str, TestResult]
        → samples: dict[str, list[float]]   ("total", "real")
        → statistics(metric) → MetricStatistics

The history log stores each metric as its raw samples plus the derived
statistics.  On load, statistics are recomputed from the samples rather
than trusted, so a stored entry can never disagree with itself.  Loading
and validation live in :mod:`benchlog.bench.history`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from benchlog.bench.stats import MetricStatistics, aggregate
from benchlog.bench.timing import Timing

# Metrics recorded for every test, in display order.
METRICS: tuple[str, ...] = ("total", "real")


# ---------------------------------------------------------------------------
# Test-level result
# ---------------------------------------------------------------------------


@dataclass
class TestResult:
    """All samples recorded for one named test during one run."""

    __test__ = False  # not a pytest test class

    name: str
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, timing: Timing) -> None:
        """Record one timed execution."""
        for metric in METRICS:
            self.samples.setdefault(metric, []).append(timing.metric(metric))

    def metric_samples(self, metric: str) -> list[float] | None:
        """Samples for *metric*, or None if it was never recorded."""
        return self.samples.get(metric)

    def statistics(self, metric: str) -> MetricStatistics | None:
        """Statistics for *metric*, or None if it was never recorded.

        Raises:
            EmptyInputError: If the metric exists but holds no samples.
        """
        values = self.samples.get(metric)
        if values is None:
            return None
        return aggregate(values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dict of metric → samples and statistics."""
        d: dict[str, Any] = {}
        for metric, values in self.samples.items():
            entry: dict[str, Any] = {"samples": list(values)}
            if values:
                entry.update(aggregate(values).to_dict())
            d[metric] = entry
        return d


# ---------------------------------------------------------------------------
# Run-level entry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HistoryEntry:
    """One completed benchmark run as recorded in the history log."""

    time: str
    results: dict[str, TestResult] = field(default_factory=dict)

    def get(self, name: str) -> TestResult | None:
        return self.results.get(name)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a YAML-compatible dict."""
        return {
            "time": self.time,
            "results": {name: r.to_dict() for name, r in self.results.items()},
        }
