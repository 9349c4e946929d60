"""Benchmark execution engine.

Orchestrates:
1. Reading the latest run from the history log (the baseline)
2. Repeated, timed execution of every workload
3. Comparison of the aggregated samples against the baseline
4. Appending this run to the history log

Each repetition optionally starts with an untimed rehearsal pass over
all tests (followed by a garbage collection) so caches and lazily
initialized state are warm before measuring.  Tests run one at a time:
overlapping them would corrupt the wall-clock measurements.

A failing workload aborts the whole run and nothing is written to the
history log.
"""

from __future__ import annotations

import gc
import os
import time
from typing import Sequence

from benchlog.bench.compare import ComparisonResult, compare_to_baseline
from benchlog.bench.config import BenchConfig, validate_config
from benchlog.bench.errors import HistoryCorruptError, WorkloadFailure
from benchlog.bench.history import HistoryStore
from benchlog.bench.results import HistoryEntry, TestResult
from benchlog.bench.timing import Clock, SystemClock, Timing, time_call
from benchlog.bench.workloads import Workload, build_workloads
from benchlog.logging import get_logger

log = get_logger("runner")


# ---------------------------------------------------------------------------
# BenchRunner
# ---------------------------------------------------------------------------


class BenchRunner:
    """Runs a set of workloads and compares them with the previous run.

    Usage::

        runner = BenchRunner(workloads, 10, HistoryStore(path))
        comparisons = runner.run()
        runner.entry  # the HistoryEntry that was appended
    """

    def __init__(
        self,
        workloads: Sequence[Workload],
        repetitions: int,
        history: HistoryStore,
        *,
        clock: Clock | None = None,
        rehearse: bool = True,
    ) -> None:
        names = [w.name for w in workloads]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate test names: {', '.join(duplicates)}")
        if repetitions < 1:
            raise ValueError(f"Need at least 1 repetition (got {repetitions})")

        self.workloads = list(workloads)
        self.repetitions = repetitions
        self.history = history
        self.clock = clock or SystemClock()
        self.rehearse = rehearse
        self.entry: HistoryEntry | None = None
        self.baseline: HistoryEntry | None = None

    def run(self) -> dict[str, ComparisonResult]:
        """Execute the full benchmark.

        Returns:
            ComparisonResult per test name, in workload order.

        Raises:
            WorkloadFailure: If any workload raises.  The history log
                is left untouched.
        """
        log.info("Starting benchmark run (PID: %d)", os.getpid())
        now = time.strftime("%Y-%m-%dT%H:%M:%S%z")

        # Phase 1: Load the baseline.
        self.baseline = self._load_baseline()

        # Phase 2: Measure.
        results = self._measure()

        # Phase 3: Compare.
        comparisons = compare_to_baseline(results, self.baseline)

        # Phase 4: Record.
        self.entry = HistoryEntry(time=now, results=results)
        self.history.append(self.entry)
        log.info("Recorded run %s in %s", now, self.history.path)

        return comparisons

    def _measure(self) -> dict[str, TestResult]:
        results = {w.name: TestResult(name=w.name) for w in self.workloads}

        for rep in range(1, self.repetitions + 1):
            log.info("Repetition %d/%d", rep, self.repetitions)

            if self.rehearse:
                for workload in self.workloads:
                    self._rehearse(workload, rep)
                gc.collect()

            for workload in self.workloads:
                timing = self._time(workload, rep)
                results[workload.name].add(timing)
                log.debug(
                    "  %s: total=%.5fs real=%.5fs",
                    workload.name,
                    timing.total,
                    timing.real,
                )

        return results

    def _rehearse(self, workload: Workload, rep: int) -> None:
        try:
            workload.run_once()
        except Exception as exc:
            raise WorkloadFailure(workload.name, rep) from exc

    def _time(self, workload: Workload, rep: int) -> Timing:
        try:
            return time_call(workload.run_once, self.clock)
        except Exception as exc:
            raise WorkloadFailure(workload.name, rep) from exc

    def _load_baseline(self) -> HistoryEntry | None:
        try:
            baseline = self.history.latest()
        except HistoryCorruptError as exc:
            log.warning("%s; continuing without a baseline", exc)
            return None
        if baseline is None:
            log.info("No previous run in %s; nothing to compare against", self.history.path)
        else:
            log.info("Comparing against run from %s", baseline.time)
        return baseline


# ---------------------------------------------------------------------------
# Config entry point
# ---------------------------------------------------------------------------


def run_from_config(
    config: BenchConfig,
    *,
    clock: Clock | None = None,
) -> tuple[BenchRunner, dict[str, ComparisonResult]]:
    """Validate *config*, build its workloads and run them.

    Raises:
        ValueError: If the configuration is invalid.
        WorkloadFailure: If a workload fails.
    """
    errors = validate_config(config)
    fatal = [e for e in errors if e.severity == "error"]
    warnings = [e for e in errors if e.severity == "warning"]
    for w in warnings:
        log.warning("Config warning: %s: %s", w.field, w.message)
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ValueError("Invalid benchmark configuration:\n" + "\n".join(messages))

    runner = BenchRunner(
        build_workloads(config),
        config.repetitions,
        HistoryStore(config.history_path),
        clock=clock,
        rehearse=config.rehearse,
    )
    return runner, runner.run()
