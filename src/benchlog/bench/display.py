"""Terminal display formatting for benchmark results.

Produces the comparison table printed after a run: CPU ("total") and
wall-clock ("real") statistics per test, with the change relative to
the baseline and a significance marker.
"""

from __future__ import annotations

from typing import Sequence

from benchlog.bench.compare import ComparisonResult, MetricComparison
from benchlog.bench.results import HistoryEntry
from benchlog.formatting import Cell, center, format_grid, left, right

PLACEHOLDER = "[-----]"
NO_BASELINE_MARKER = "-"
SIGNIFICANT_MARKER = "*"
UNPAIRED_MARKER = "?"

TITLE = "Summary of cpu time and (wall-clock time):"
SIGNIFICANCE_LEGEND = "*Significant difference indicated with a star."
UNPAIRED_LEGEND = "?Repetition count changed since the baseline; significance not tested."


# ---------------------------------------------------------------------------
# Cell formatting
# ---------------------------------------------------------------------------


def _format_seconds(value: float) -> str:
    return f"{value:.5f}"


def _format_change(comparison: MetricComparison | None) -> str:
    if comparison is None or comparison.percent_change is None:
        return PLACEHOLDER
    return f"[{comparison.percent_change:+0.1f}%]"


def _format_marker(comparison: MetricComparison | None) -> str:
    if comparison is None or comparison.baseline is None:
        return NO_BASELINE_MARKER
    if comparison.unpaired:
        return UNPAIRED_MARKER
    return SIGNIFICANT_MARKER if comparison.significant else ""


def _metric_cells(comparison: MetricComparison | None) -> list[Cell]:
    if comparison is None:
        return [right(PLACEHOLDER)] * 2 + [left(NO_BASELINE_MARKER)] + [right(PLACEHOLDER)] * 2
    stats = comparison.current
    return [
        right(_format_seconds(stats.mean)),
        right(_format_change(comparison)),
        left(_format_marker(comparison)),
        right(_format_seconds(stats.min)),
        right(_format_seconds(stats.standard_deviation)),
    ]


# ---------------------------------------------------------------------------
# Comparison table
# ---------------------------------------------------------------------------


def _header() -> list[Cell | str]:
    return [
        "",
        center("avg"),
        center("+/-"),
        "",
        center("best"),
        center("sd"),
        center("(avg)"),
        center("+/-"),
        "",
        center("(best)"),
        center("(sd)"),
    ]


def render(results: dict[str, ComparisonResult]) -> str:
    """Format comparison results as a table.

    Args:
        results: ComparisonResult per test name, in display order.

    Returns:
        The title, one row per test and, if any test had a baseline,
        a legend explaining the significance marker.
    """
    rows: list[Sequence[Cell | str]] = [_header()]
    for name, result in results.items():
        rows.append(
            [left(name)]
            + _metric_cells(result.metrics.get("total"))
            + _metric_cells(result.metrics.get("real"))
        )

    lines = [TITLE, "", format_grid(rows)]

    if any(r.has_baseline for r in results.values()):
        lines.append("")
        lines.append(SIGNIFICANCE_LEGEND)
        if any(r.has_unpaired for r in results.values()):
            lines.append(UNPAIRED_LEGEND)

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# History listing
# ---------------------------------------------------------------------------


def render_history(entries: Sequence[HistoryEntry]) -> str:
    """Format the runs stored in a history log, oldest first."""
    if not entries:
        return "No runs recorded."

    rows: list[Sequence[Cell | str]] = [
        [center("#"), center("time"), center("tests"), center("reps")]
    ]
    for i, entry in enumerate(entries):
        reps = {
            len(samples)
            for result in entry.results.values()
            for samples in result.samples.values()
        }
        rows.append(
            [
                right(str(i)),
                left(entry.time),
                right(str(len(entry.results))),
                right(",".join(str(r) for r in sorted(reps)) or "0"),
            ]
        )
    return format_grid(rows, separator="  ")
