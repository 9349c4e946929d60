"""Command-line interface for benchlog.

Subcommands:
    benchlog run       Time the configured tests and compare with the last run
    benchlog history   List the runs stored in a history log
    benchlog show      Re-display a stored run compared with the one before it
"""

from __future__ import annotations

import json
import time
from pathlib import Path

import click

from benchlog import __version__
from benchlog.bench.errors import HistoryCorruptError, WorkloadFailure
from benchlog.logging import setup_logging

_DEFAULT_HISTORY = Path("data") / "log.yml"


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """benchlog: time workloads and flag significant changes between runs."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="YAML profile defining the benchmark tests.",
)
@click.option(
    "--repetitions",
    type=int,
    default=None,
    help="Timed repetitions of every test (default: 10).",
)
@click.option(
    "--history",
    "history_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="History log to compare against and append to (default: data/log.yml).",
)
@click.option(
    "--recurse/--no-recurse",
    default=None,
    envvar="BENCHLOG_RECURSE",
    help="Exhaustive match scoring in matcher tests.",
)
@click.option(
    "--threads",
    type=int,
    default=None,
    help="Worker threads for matcher tests (default: processor count).",
)
@click.option(
    "--rehearse/--no-rehearse",
    default=None,
    help="Untimed pass over all tests before each repetition.",
)
@click.option("--json", "as_json", is_flag=True, help="Output the comparison as JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Show individual timings.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also append a DEBUG log to this file.",
)
def run(
    profile_path: Path,
    repetitions: int | None,
    history_path: Path | None,
    recurse: bool | None,
    threads: int | None,
    rehearse: bool | None,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run the benchmark tests and compare with the previous run.

    \b
    Examples:
        benchlog run --profile bench.yml
        benchlog run --profile bench.yml --repetitions 20 --no-recurse
        BENCHLOG_RECURSE=0 benchlog run --profile bench.yml --json
    """
    from benchlog.bench.compare import comparisons_to_dict
    from benchlog.bench.config import config_from_profile, load_profile
    from benchlog.bench.display import render
    from benchlog.bench.runner import run_from_config
    from benchlog.formatting import format_duration

    log = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "repetitions": repetitions,
        "history_path": history_path,
        "recurse": recurse,
        "threads": threads,
        "rehearse": rehearse,
    }

    try:
        profile_data = load_profile(profile_path)
        config = config_from_profile(
            profile_data,
            base_dir=profile_path.parent,
            cli_overrides=cli_overrides,
        )
    except (OSError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    start = time.monotonic()
    try:
        _runner, comparisons = run_from_config(config)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    except WorkloadFailure as exc:
        click.echo(f"Error: {exc}: {exc.__cause__}", err=True)
        click.echo("Nothing was recorded.", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted. Nothing was recorded.", err=True)
        raise SystemExit(130)  # noqa: B904

    log.info("Finished in %s", format_duration(time.monotonic() - start))

    if as_json:
        click.echo(json.dumps(comparisons_to_dict(comparisons), indent=2))
    else:
        click.echo()
        click.echo(render(comparisons))


# ---------------------------------------------------------------------------
# history
# ---------------------------------------------------------------------------


@main.command("history")
@click.option(
    "--history",
    "history_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=_DEFAULT_HISTORY,
    show_default=True,
)
def history_cmd(history_path: Path) -> None:
    """List the runs stored in a history log."""
    from benchlog.bench.display import render_history
    from benchlog.bench.history import HistoryStore

    try:
        entries = HistoryStore(history_path).load()
    except HistoryCorruptError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc
    click.echo(render_history(entries))


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@main.command("show")
@click.option(
    "--history",
    "history_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=_DEFAULT_HISTORY,
    show_default=True,
)
@click.option(
    "--index",
    type=int,
    default=-1,
    show_default=True,
    help="Run to show (negative counts from the end).",
)
@click.option("--json", "as_json", is_flag=True, help="Output the comparison as JSON.")
def show(history_path: Path, index: int, as_json: bool) -> None:
    """Show a stored run compared with the run before it.

    \b
    Examples:
        benchlog show                 # latest run vs. the one before
        benchlog show --index 0       # first run (no baseline)
    """
    from benchlog.bench.compare import compare_to_baseline, comparisons_to_dict
    from benchlog.bench.display import render
    from benchlog.bench.history import HistoryStore

    try:
        entries = HistoryStore(history_path).load()
    except HistoryCorruptError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    if not entries:
        click.echo(f"Error: No runs recorded in {history_path}", err=True)
        raise SystemExit(1)

    position = index if index >= 0 else len(entries) + index
    if not 0 <= position < len(entries):
        click.echo(
            f"Error: Run index {index} out of range ({len(entries)} runs recorded)",
            err=True,
        )
        raise SystemExit(1)

    entry = entries[position]
    baseline = entries[position - 1] if position > 0 else None
    comparisons = compare_to_baseline(entry.results, baseline)

    if as_json:
        click.echo(json.dumps(comparisons_to_dict(comparisons), indent=2))
    else:
        click.echo(f"Run from {entry.time}")
        click.echo()
        click.echo(render(comparisons))


if __name__ == "__main__":
    main()
