"""Tests for benchlog.formatting."""

from __future__ import annotations

import unittest

from benchlog.formatting import (
    Cell,
    Justify,
    align,
    center,
    format_duration,
    format_grid,
    left,
    right,
)


class TestAlign(unittest.TestCase):
    def test_left(self) -> None:
        self.assertEqual(align(left("ab"), 5), "ab   ")

    def test_right(self) -> None:
        self.assertEqual(align(right("ab"), 5), "   ab")

    def test_default_pads_left(self) -> None:
        self.assertEqual(align(Cell("ab"), 4), "  ab")
        self.assertIs(Cell("ab").justify, Justify.NONE)

    def test_center_even(self) -> None:
        self.assertEqual(align(center("ab"), 6), "  ab  ")

    def test_center_odd_extra_on_left(self) -> None:
        self.assertEqual(align(center("ab"), 5), "  ab ")
        self.assertEqual(align(center("avg"), 8), "   avg  ")

    def test_exact_width(self) -> None:
        for cell in (left("abc"), right("abc"), center("abc"), Cell("abc")):
            with self.subTest(justify=cell.justify):
                self.assertEqual(align(cell, 3), "abc")


class TestFormatGrid(unittest.TestCase):
    def test_empty(self) -> None:
        self.assertEqual(format_grid([]), "")

    def test_column_widths(self) -> None:
        text = format_grid([[left("name"), "n"], [left("x"), "100"]])
        self.assertEqual(text.split("\n"), ["name   n", "x    100"])

    def test_short_rows_padded(self) -> None:
        lines = format_grid([["a", "b", "c"], ["d"]]).split("\n")
        self.assertEqual(lines, ["a b c", "d    "])

    def test_separator(self) -> None:
        self.assertEqual(format_grid([["a", "b"]], separator=" | "), "a | b")

    def test_cell_len(self) -> None:
        self.assertEqual(len(Cell("four")), 4)


class TestFormatDuration(unittest.TestCase):
    def test_seconds(self) -> None:
        self.assertEqual(format_duration(8.9), "8s")

    def test_minutes(self) -> None:
        self.assertEqual(format_duration(83), "1m 23s")

    def test_hours(self) -> None:
        self.assertEqual(format_duration(4354), "1h 12m 34s")

    def test_padded(self) -> None:
        self.assertEqual(format_duration(61), "1m  1s")


if __name__ == "__main__":
    unittest.main()
