"""Tests for benchlog.matcher: fuzzy path matching."""

from __future__ import annotations

import unittest

from benchlog.matcher import Matcher, score_path

PATHS = [
    "src/benchlog/cli.py",
    "src/benchlog/bench/runner.py",
    "src/benchlog/bench/display.py",
    "tests/test_bench_runner.py",
    "README.md",
    "lib/CommandTRunner.rb",
]


class TestScorePath(unittest.TestCase):
    """Tests for score_path()."""

    def test_no_match(self) -> None:
        self.assertEqual(score_path("src/cli.py", "xyz"), 0.0)
        self.assertEqual(score_path("src/cli.py", "xyz", recurse=False), 0.0)

    def test_out_of_order(self) -> None:
        self.assertEqual(score_path("abc", "cba"), 0.0)

    def test_query_longer_than_path(self) -> None:
        self.assertEqual(score_path("ab", "abc"), 0.0)

    def test_empty_query_matches(self) -> None:
        self.assertEqual(score_path("anything", ""), 1.0)

    def test_case_insensitive(self) -> None:
        self.assertGreater(score_path("README.md", "readme"), 0.0)

    def test_exact_match(self) -> None:
        # 0.9 for the first character, then 1.0 for each consecutive one.
        self.assertAlmostEqual(score_path("abc", "abc"), (0.9 + 1.0 + 1.0) / 3)

    def test_separator_boosts(self) -> None:
        """A match right after "/" beats one in the middle of a word."""
        self.assertGreater(score_path("xx/r", "r"), score_path("xxxr", "r"))

    def test_camel_case_hump(self) -> None:
        self.assertGreater(score_path("fooBar", "b"), score_path("foobar", "b"))

    def test_recurse_finds_better_placement(self) -> None:
        """The leftmost "r" is mid-word; the one after "/" scores higher."""
        path = "library/run"
        self.assertGreater(
            score_path(path, "run", recurse=True),
            score_path(path, "run", recurse=False),
        )

    def test_recurse_never_worse(self) -> None:
        for path in PATHS:
            for query in ("r", "bench", "rnr", "cli"):
                with self.subTest(path=path, query=query):
                    # Same placement can sum in a different order.
                    self.assertGreaterEqual(
                        score_path(path, query, recurse=True) + 1e-12,
                        score_path(path, query, recurse=False),
                    )


class TestMatcher(unittest.TestCase):
    """Tests for Matcher.sorted_matches_for()."""

    def test_filters_non_matches(self) -> None:
        matches = Matcher(PATHS).sorted_matches_for("display")
        self.assertEqual(matches, ["src/benchlog/bench/display.py"])

    def test_best_first(self) -> None:
        matches = Matcher(PATHS).sorted_matches_for("runner")
        self.assertIn("src/benchlog/bench/runner.py", matches)
        self.assertIn("tests/test_bench_runner.py", matches)
        scores = [score_path(p, "runner") for p in matches]
        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_ties_broken_by_path(self) -> None:
        matches = Matcher(["b/x", "a/x"]).sorted_matches_for("x")
        self.assertEqual(matches, ["a/x", "b/x"])

    def test_limit(self) -> None:
        matches = Matcher(PATHS).sorted_matches_for("s", limit=2)
        self.assertEqual(len(matches), 2)

    def test_threads_give_same_result(self) -> None:
        matcher = Matcher(PATHS * 3)
        for query in ("r", "bench", "md"):
            with self.subTest(query=query):
                self.assertEqual(
                    matcher.sorted_matches_for(query, threads=4),
                    matcher.sorted_matches_for(query, threads=1),
                )

    def test_empty_paths(self) -> None:
        self.assertEqual(Matcher([]).sorted_matches_for("a", threads=4), [])


if __name__ == "__main__":
    unittest.main()
