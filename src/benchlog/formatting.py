"""Shared text formatting helpers for benchlog.

Provides justified table cells, grid layout and duration formatting
used across CLI commands and reports.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence


class Justify(enum.Enum):
    """How a cell is placed within its column."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    NONE = "none"  # grid default: padded on the left


@dataclass(frozen=True)
class Cell:
    """A table cell: text plus the justification it asks for."""

    text: str
    justify: Justify = Justify.NONE

    def __len__(self) -> int:
        return len(self.text)


def left(text: str) -> Cell:
    return Cell(text, Justify.LEFT)


def right(text: str) -> Cell:
    return Cell(text, Justify.RIGHT)


def center(text: str) -> Cell:
    return Cell(text, Justify.CENTER)


def align(cell: Cell, width: int) -> str:
    """Pad *cell* to exactly *width* characters.

    Centered text gets the same padding on both sides; when the spare
    width is odd the extra space goes on the left.
    """
    text = cell.text
    if cell.justify is Justify.LEFT:
        return text.ljust(width)
    if cell.justify is Justify.CENTER:
        pad = " " * ((width - len(text)) // 2)
        return (pad + text + pad).rjust(width)
    return text.rjust(width)


def format_grid(rows: Sequence[Sequence[Cell | str]], *, separator: str = " ") -> str:
    """Lay out *rows* as a grid of aligned columns.

    Each column is as wide as its widest cell, across all rows.  Plain
    strings are treated as cells with no justification.  Short rows are
    padded with empty cells.

    Args:
        rows: Rows of cells; the first row is usually the header.
        separator: Text placed between adjacent columns.

    Returns:
        The grid, one line per row, without a trailing newline.
    """
    if not rows:
        return ""

    ncols = max(len(row) for row in rows)
    grid: list[list[Cell]] = []
    for row in rows:
        cells = [c if isinstance(c, Cell) else Cell(c) for c in row]
        cells.extend(Cell("") for _ in range(ncols - len(cells)))
        grid.append(cells)

    widths = [max(len(row[i]) for row in grid) for i in range(ncols)]

    lines = [separator.join(align(cell, widths[i]) for i, cell in enumerate(row)) for row in grid]
    return "\n".join(lines)


def format_duration(seconds: float) -> str:
    """Format seconds as human-readable duration.

    Examples: ``'8s'``, ``'1m 23s'``, ``'1h 12m 34s'``. Always whole seconds
    (truncated, not rounded).
    """
    total = int(seconds)
    if total >= 3600:
        h = total // 3600
        m = (total % 3600) // 60
        s = total % 60
        return f"{h}h {m:2d}m {s:2d}s"
    if total >= 60:
        m = total // 60
        s = total % 60
        return f"{m}m {s:2d}s"
    return f"{total}s"
