"""Benchmark configuration and profile loading.

Handles:
- Loading benchmark profiles from YAML files.
- Merging CLI options with profile defaults.
- Validating the final configuration before execution.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from benchlog.logging import get_logger

log = get_logger("config")


# ---------------------------------------------------------------------------
# Test definition
# ---------------------------------------------------------------------------


@dataclass
class TestDef:
    """Definition of one named benchmark test."""

    __test__ = False  # not a pytest test class

    name: str
    paths: list[str] = field(default_factory=list)
    queries: list[str] = field(default_factory=list)
    times: int = 1  # workload-internal repeat count per timed call
    command: str | None = None
    cwd: str | None = None
    env: dict[str, str] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        """``"command"`` or ``"matcher"``."""
        return "command" if self.command else "matcher"


# ---------------------------------------------------------------------------
# BenchConfig
# ---------------------------------------------------------------------------


@dataclass
class BenchConfig:
    """Resolved configuration for a benchmark run."""

    tests: list[TestDef] = field(default_factory=list)

    # Iteration control
    repetitions: int = 10
    rehearse: bool = True  # untimed pass over all tests before each repetition

    # Passed through to the matcher workload
    recurse: bool = True
    threads: int | None = None  # None = processor count

    # Paths
    history_path: Path = field(default_factory=lambda: Path("data") / "log.yml")

    @property
    def resolved_threads(self) -> int:
        """Thread count hint handed to workloads."""
        if self.threads:
            return self.threads
        return os.cpu_count() or 1


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: BenchConfig) -> list[ValidationError]:
    """Validate a benchmark configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not config.tests:
        errors.append(
            ValidationError(
                field="tests",
                message="No benchmark tests defined. Use --profile to define at least one.",
            )
        )

    if config.repetitions < 1:
        errors.append(
            ValidationError(
                field="repetitions",
                message=f"Need at least 1 repetition (got {config.repetitions}).",
            )
        )
    elif config.repetitions < 5:
        errors.append(
            ValidationError(
                field="repetitions",
                message=(
                    f"With {config.repetitions} repetitions no difference can be "
                    f"reported as significant (need at least 5)."
                ),
                severity="warning",
            )
        )

    if config.threads is not None and config.threads < 1:
        errors.append(
            ValidationError(
                field="threads",
                message=f"Thread count must be positive (got {config.threads}).",
            )
        )

    seen: set[str] = set()
    for i, test in enumerate(config.tests):
        where = f"tests[{i}]"
        if not test.name or not test.name.strip():
            errors.append(ValidationError(field=where, message="Test names must be non-empty."))
        elif test.name in seen:
            errors.append(
                ValidationError(
                    field=where,
                    message=f"Duplicate test name '{test.name}'.",
                )
            )
        seen.add(test.name)

        if test.times < 1:
            errors.append(
                ValidationError(
                    field=f"{where}.times",
                    message=f"Test '{test.name}' must run at least once (got {test.times}).",
                )
            )

        if test.command and (test.paths or test.queries):
            errors.append(
                ValidationError(
                    field=where,
                    message=f"Test '{test.name}' sets both a command and paths/queries.",
                )
            )
        elif not test.command and not (test.paths and test.queries):
            errors.append(
                ValidationError(
                    field=where,
                    message=(
                        f"Test '{test.name}' needs either a command or both paths and queries."
                    ),
                )
            )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        repetitions: 10
        history: data/log.yml
        recurse: true
        threads: 4

        tests:
          - name: big
            paths_file: data/paths.txt
            queries: [artpi, lsbp]
            times: 3
          - name: build
            command: "make -s"

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    log.debug("Loaded profile %s", profile_path)
    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    base_dir: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchConfig:
    """Build a BenchConfig from a parsed YAML profile.

    CLI overrides take precedence over profile values for:
    repetitions, history_path, recurse, threads, rehearse.

    Args:
        profile_data: Parsed YAML profile dict.
        base_dir: Directory that relative ``paths_file`` and ``history``
            entries are resolved against (usually the profile's own).
        cli_overrides: Dict of CLI option values; None means "not given".

    Returns:
        BenchConfig with tests and settings populated.
    """
    cli = cli_overrides or {}
    base = base_dir or Path(".")

    config = BenchConfig(
        repetitions=_pick(cli, profile_data, "repetitions", 10),
        rehearse=_pick(cli, profile_data, "rehearse", True),
        recurse=_pick(cli, profile_data, "recurse", True),
        threads=_pick(cli, profile_data, "threads", None),
    )

    if cli.get("history_path") is not None:
        config.history_path = Path(cli["history_path"])
    elif profile_data.get("history"):
        config.history_path = base / profile_data["history"]

    tests_data = profile_data.get("tests", [])
    if not isinstance(tests_data, list):
        raise ValueError("Profile 'tests' must be a list of test definitions")

    for i, test_data in enumerate(tests_data):
        if not isinstance(test_data, dict):
            raise ValueError(f"tests[{i}] must be a mapping, got {type(test_data).__name__}")
        config.tests.append(_parse_test(test_data, base))

    return config


def _pick(cli: dict[str, Any], profile: dict[str, Any], key: str, default: Any) -> Any:
    if cli.get(key) is not None:
        return cli[key]
    return profile.get(key, default)


def _parse_test(data: dict[str, Any], base: Path) -> TestDef:
    name = str(data.get("name", ""))

    paths = data.get("paths", [])
    if isinstance(paths, str):
        paths = [paths]
    paths = [str(p) for p in paths]
    if data.get("paths_file"):
        paths_file = base / data["paths_file"]
        paths.extend(
            line.strip()
            for line in paths_file.read_text(encoding="utf-8").splitlines()
            if line.strip()
        )

    queries = data.get("queries", [])
    if isinstance(queries, str):
        queries = [queries]

    env = data.get("env") or {}
    if not isinstance(env, dict):
        raise ValueError(f"Test '{name}': 'env' must be a mapping")

    return TestDef(
        name=name,
        paths=paths,
        queries=[str(q) for q in queries],
        times=int(data.get("times", 1)),
        command=data.get("command"),
        cwd=data.get("cwd"),
        env={str(k): str(v) for k, v in env.items()},
    )
