"""Append-only history of benchmark runs, stored as YAML.

File format (schema version 1)::

    schema_version: 1
    runs:
      - time: "2026-10-19 12:00:00 +0000"
        results:
          <test name>:
            total: {samples: [...], min: ..., mean: ..., variance: ..., sd: ...}
            real: {samples: [...], ...}

Logs written before the schema was versioned are a bare YAML list of
runs whose metrics are plain sample lists, alongside precomputed keys
such as ``"real (avg)"``.  They are read as schema version 0; the
precomputed keys are ignored and statistics are recomputed.

The file is read once and written once per benchmark run.  Nothing
guards against two processes writing the same file: run benchmarks
that share a log one at a time.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import yaml

from benchlog.bench.errors import HistoryCorruptError
from benchlog.bench.results import HistoryEntry, TestResult
from benchlog.logging import get_logger

log = get_logger("history")

SCHEMA_VERSION = 1


class HistoryStore:
    """A YAML history log on disk.

    Usage::

        store = HistoryStore(Path("data/log.yml"))
        baseline = store.latest()
        ...
        store.append(entry)
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._entries: list[HistoryEntry] | None = None
        self._corrupt = False

    def load(self) -> list[HistoryEntry]:
        """Read and validate every entry in the log.

        A missing or empty file is an empty history.  The result is
        cached; later calls do not touch the disk.

        Raises:
            HistoryCorruptError: If the file cannot be parsed or does not
                match a known schema.
        """
        if self._entries is not None:
            return list(self._entries)

        if not self.path.exists():
            self._entries = []
            return []

        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
            self._entries = _parse_document(self.path, data)
        except HistoryCorruptError:
            self._corrupt = True
            raise
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            self._corrupt = True
            raise HistoryCorruptError(self.path, str(exc)) from exc

        log.debug("Loaded %d history entries from %s", len(self._entries), self.path)
        return list(self._entries)

    def latest(self) -> HistoryEntry | None:
        """The most recent entry, or None for an empty history.

        Raises:
            HistoryCorruptError: As for :meth:`load`.
        """
        entries = self.load()
        return entries[-1] if entries else None

    def append(self, entry: HistoryEntry) -> None:
        """Add *entry* to the end of the log and write it to disk.

        If the existing file was found to be corrupt it is renamed to
        ``<name>.corrupt-<timestamp>`` first, and the new log starts
        with *entry* alone.
        """
        if self._entries is None and not self._corrupt:
            try:
                self.load()
            except HistoryCorruptError:
                pass

        if self._corrupt:
            self._set_aside_corrupt_file()
            self._entries = []
            self._corrupt = False

        entries = list(self._entries or [])
        entries.append(entry)

        document = {
            "schema_version": SCHEMA_VERSION,
            "runs": [e.to_dict() for e in entries],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            yaml.dump(document, default_flow_style=False, sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )
        self._entries = entries
        log.debug("Appended run %s to %s (%d entries)", entry.time, self.path, len(entries))

    def _set_aside_corrupt_file(self) -> None:
        if not self.path.exists():
            return
        backup = self.path.with_name(f"{self.path.name}.corrupt-{time.strftime('%Y%m%d_%H%M%S')}")
        self.path.rename(backup)
        log.warning("Moved unreadable history file %s to %s", self.path, backup)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _parse_document(path: Path, data: Any) -> list[HistoryEntry]:
    """Validate a parsed YAML document and build its entries."""
    if data is None:
        return []

    if isinstance(data, list):
        # Legacy, unversioned log.
        runs = data
    elif isinstance(data, dict):
        version = data.get("schema_version")
        if version != SCHEMA_VERSION:
            raise HistoryCorruptError(path, f"unsupported schema_version {version!r}")
        runs = data.get("runs") or []
        if not isinstance(runs, list):
            raise HistoryCorruptError(path, "'runs' must be a list")
    else:
        raise HistoryCorruptError(path, f"expected a mapping, got {type(data).__name__}")

    return [_parse_run(path, i, run) for i, run in enumerate(runs)]


def _parse_run(path: Path, index: int, run: Any) -> HistoryEntry:
    where = f"run {index}"
    if not isinstance(run, dict):
        raise HistoryCorruptError(path, f"{where} is not a mapping")
    if "time" not in run:
        raise HistoryCorruptError(path, f"{where} has no 'time'")

    results = run.get("results") or {}
    if not isinstance(results, dict):
        raise HistoryCorruptError(path, f"{where}: 'results' must be a mapping")

    parsed: dict[str, TestResult] = {}
    for name, metrics in results.items():
        if not isinstance(metrics, dict):
            raise HistoryCorruptError(path, f"{where}, test {name!r}: expected a mapping")
        test = TestResult(name=str(name))
        for metric, value in metrics.items():
            samples = _parse_samples(value)
            if samples is None and " (" in str(metric):
                # Derived legacy keys like "real (avg)" carry no samples.
                continue
            if not samples:
                raise HistoryCorruptError(
                    path, f"{where}, test {name!r}, metric {metric!r}: no samples"
                )
            test.samples[str(metric)] = samples
        parsed[str(name)] = test

    return HistoryEntry(time=str(run["time"]), results=parsed)


def _parse_samples(value: Any) -> list[float] | None:
    """Extract a sample list from a metric value, or None if it has none.

    Accepts both ``{samples: [...], ...}`` and a bare list (legacy).
    """
    if isinstance(value, dict):
        value = value.get("samples")
    if not isinstance(value, list):
        return None
    try:
        return [float(v) for v in value]
    except (TypeError, ValueError):
        return None
