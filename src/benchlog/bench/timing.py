"""Timing capture for benchmark iterations.

Measures wall-clock time and total CPU time (user + system, including
reaped child processes) around a single call.  The clock is passed in
explicitly so tests can substitute a deterministic one.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Callable

# ---------------------------------------------------------------------------
# Timing sample
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Timing:
    """One timed execution: CPU ("total") and wall-clock ("real") seconds."""

    total: float
    real: float

    def metric(self, name: str) -> float:
        """Return the value of the metric called *name*."""
        if name == "total":
            return self.total
        if name == "real":
            return self.real
        raise KeyError(name)


# ---------------------------------------------------------------------------
# Clocks
# ---------------------------------------------------------------------------


class Clock:
    """Source of wall-clock and CPU readings, in seconds."""

    def wall(self) -> float:
        raise NotImplementedError

    def cpu(self) -> float:
        raise NotImplementedError


class SystemClock(Clock):
    """Clock backed by the process's own counters.

    CPU time includes terminated children so that command workloads,
    which do their work in a subprocess, are measured too.
    """

    def wall(self) -> float:
        return time.perf_counter()

    def cpu(self) -> float:
        t = os.times()
        return t.user + t.system + t.children_user + t.children_system


# ---------------------------------------------------------------------------
# Core timing implementation
# ---------------------------------------------------------------------------


def time_call(func: Callable[[], object], clock: Clock) -> Timing:
    """Call *func* once and measure it with *clock*.

    Exceptions raised by *func* propagate unchanged; no timing is
    returned for a failed call.
    """
    cpu_start = clock.cpu()
    wall_start = clock.wall()

    func()

    wall_time = clock.wall() - wall_start
    cpu_time = clock.cpu() - cpu_start

    return Timing(
        total=round(max(cpu_time, 0.0), 6),
        real=round(max(wall_time, 0.0), 6),
    )
