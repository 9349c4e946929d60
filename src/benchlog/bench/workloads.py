"""Workloads: the operations a benchmark times.

Every workload exposes ``run_once()``, which performs one complete unit
of work (including its own internal repeat count).  The runner times
each call; anything raised by ``run_once()`` aborts the benchmark.
"""

from __future__ import annotations

import os
import subprocess
from typing import Callable, Sequence

from benchlog.bench.config import BenchConfig, TestDef
from benchlog.logging import get_logger
from benchlog.matcher import Matcher

log = get_logger("workloads")


class Workload:
    """A named operation that can be run repeatedly."""

    def __init__(self, name: str) -> None:
        self.name = name

    def run_once(self) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class CallableWorkload(Workload):
    """Wraps a plain Python callable."""

    def __init__(self, name: str, func: Callable[[], object]) -> None:
        super().__init__(name)
        self.func = func

    def run_once(self) -> None:
        self.func()


class MatcherWorkload(Workload):
    """Types each query one character at a time against a path set.

    Every prefix of every query is matched, mimicking a user typing
    into a fuzzy file finder.  The whole sequence repeats *times* times
    per call.
    """

    def __init__(
        self,
        name: str,
        paths: Sequence[str],
        queries: Sequence[str],
        *,
        times: int = 1,
        threads: int = 1,
        recurse: bool = True,
    ) -> None:
        super().__init__(name)
        self.matcher = Matcher(paths)
        self.queries = list(queries)
        self.times = times
        self.threads = threads
        self.recurse = recurse

    def run_once(self) -> None:
        for _ in range(self.times):
            for query in self.queries:
                for end in range(1, len(query) + 1):
                    self.matcher.sorted_matches_for(
                        query[:end],
                        threads=self.threads,
                        recurse=self.recurse,
                    )


class CommandWorkload(Workload):
    """Runs an external command *times* times per call.

    A non-zero exit status raises ``subprocess.CalledProcessError``.
    """

    def __init__(
        self,
        name: str,
        command: str | list[str],
        *,
        times: int = 1,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        super().__init__(name)
        self.command = command
        self.times = times
        self.cwd = cwd
        self.env = env or {}

    def run_once(self) -> None:
        run_env = dict(os.environ)
        run_env.update(self.env)
        for _ in range(self.times):
            subprocess.run(
                self.command,
                shell=isinstance(self.command, str),
                cwd=self.cwd,
                env=run_env,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                check=True,
            )


def build_workload(test: TestDef, config: BenchConfig) -> Workload:
    """Create the workload described by *test*."""
    if test.command:
        return CommandWorkload(
            test.name,
            test.command,
            times=test.times,
            cwd=test.cwd,
            env=test.env,
        )
    return MatcherWorkload(
        test.name,
        test.paths,
        test.queries,
        times=test.times,
        threads=config.resolved_threads,
        recurse=config.recurse,
    )


def build_workloads(config: BenchConfig) -> list[Workload]:
    """Create one workload per configured test, in order."""
    workloads = [build_workload(test, config) for test in config.tests]
    log.debug("Built workloads: %s", ", ".join(repr(w) for w in workloads))
    return workloads
