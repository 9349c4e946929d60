"""Summary statistics for repeated timing samples.

Variance uses the population divisor (N, not N - 1) so that newly
computed values stay comparable with those already stored in the
history log.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from typing import Any, Sequence

from benchlog.bench.errors import EmptyInputError


@dataclass(frozen=True)
class MetricStatistics:
    """Summary of the samples recorded for one metric of one test."""

    n: int
    min: float
    mean: float
    variance: float  # population variance

    @property
    def standard_deviation(self) -> float:
        return math.sqrt(self.variance)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dict for the history log."""
        return {
            "min": self.min,
            "mean": self.mean,
            "variance": self.variance,
            "sd": self.standard_deviation,
        }


def aggregate(samples: Sequence[float]) -> MetricStatistics:
    """Compute summary statistics for a non-empty sample sequence.

    Args:
        samples: Timing samples for one metric, in recording order.

    Returns:
        MetricStatistics with min, mean and population variance.

    Raises:
        EmptyInputError: If *samples* is empty.
    """
    if not samples:
        raise EmptyInputError("Cannot aggregate an empty sample sequence")

    values = [float(v) for v in samples]
    mean = statistics.mean(values)
    variance = statistics.pvariance(values, mu=mean)

    return MetricStatistics(
        n=len(values),
        min=min(values),
        mean=mean,
        variance=variance,
    )
