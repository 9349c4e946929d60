"""Exception classes shared across the benchmark subsystem."""

from __future__ import annotations

from pathlib import Path


class BenchError(Exception):
    """Base class for benchlog benchmark errors."""


class EmptyInputError(BenchError, ValueError):
    """Raised when statistics are requested for zero samples."""


class UnpairedSamplesError(BenchError, ValueError):
    """Raised when baseline and current samples differ in length.

    This means the repetition count changed between the two runs, so
    positional pairing would silently bias the test statistic.
    """

    def __init__(self, baseline_len: int, current_len: int) -> None:
        self.baseline_len = baseline_len
        self.current_len = current_len
        super().__init__(
            f"Cannot pair {baseline_len} baseline samples with {current_len} current samples"
        )


class HistoryCorruptError(BenchError):
    """Raised when the history file cannot be read or fails validation."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"History file {path} is unreadable: {reason}")


class WorkloadFailure(BenchError, RuntimeError):
    """Raised when a workload fails while being timed.

    The underlying exception is available as ``__cause__``.
    """

    def __init__(self, test_name: str, repetition: int) -> None:
        self.test_name = test_name
        self.repetition = repetition
        super().__init__(f"Workload '{test_name}' failed during repetition {repetition}")
