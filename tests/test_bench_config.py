"""Tests for benchlog.bench.config: profile loading and validation."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from benchlog.bench.config import (
    BenchConfig,
    TestDef,
    config_from_profile,
    load_profile,
    validate_config,
)


def _fatal(config: BenchConfig) -> list[str]:
    return [e.field for e in validate_config(config) if e.severity == "error"]


class TestBenchConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        config = BenchConfig()
        self.assertEqual(config.repetitions, 10)
        self.assertTrue(config.rehearse)
        self.assertTrue(config.recurse)
        self.assertIsNone(config.threads)
        self.assertEqual(config.history_path, Path("data") / "log.yml")

    def test_resolved_threads(self) -> None:
        self.assertEqual(BenchConfig(threads=3).resolved_threads, 3)
        self.assertGreaterEqual(BenchConfig().resolved_threads, 1)

    def test_test_kind(self) -> None:
        self.assertEqual(TestDef(name="a", command="true").kind, "command")
        self.assertEqual(TestDef(name="a", paths=["x"], queries=["x"]).kind, "matcher")


class TestValidateConfig(unittest.TestCase):
    """Tests for validate_config()."""

    def _matcher(self, name: str = "a", **kwargs) -> TestDef:
        return TestDef(name=name, paths=["src/a.py"], queries=["a"], **kwargs)

    def test_valid(self) -> None:
        config = BenchConfig(tests=[self._matcher(), TestDef(name="b", command="true")])
        self.assertEqual(validate_config(config), [])

    def test_no_tests(self) -> None:
        self.assertEqual(_fatal(BenchConfig()), ["tests"])

    def test_zero_repetitions(self) -> None:
        self.assertEqual(_fatal(BenchConfig(tests=[self._matcher()], repetitions=0)), ["repetitions"])

    def test_few_repetitions_is_warning(self) -> None:
        errors = validate_config(BenchConfig(tests=[self._matcher()], repetitions=4))
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].severity, "warning")
        self.assertIn("at least 5", errors[0].message)

    def test_five_repetitions_no_warning(self) -> None:
        self.assertEqual(validate_config(BenchConfig(tests=[self._matcher()], repetitions=5)), [])

    def test_bad_threads(self) -> None:
        self.assertEqual(_fatal(BenchConfig(tests=[self._matcher()], threads=0)), ["threads"])

    def test_duplicate_names(self) -> None:
        config = BenchConfig(tests=[self._matcher("a"), self._matcher("a")])
        errors = validate_config(config)
        self.assertEqual([e.field for e in errors], ["tests[1]"])
        self.assertIn("Duplicate", errors[0].message)

    def test_empty_name(self) -> None:
        self.assertEqual(_fatal(BenchConfig(tests=[self._matcher("  ")])), ["tests[0]"])

    def test_times_must_be_positive(self) -> None:
        config = BenchConfig(tests=[self._matcher(times=0)])
        self.assertEqual(_fatal(config), ["tests[0].times"])

    def test_command_and_paths(self) -> None:
        config = BenchConfig(tests=[self._matcher(command="true")])
        self.assertEqual(_fatal(config), ["tests[0]"])

    def test_neither_command_nor_queries(self) -> None:
        config = BenchConfig(tests=[TestDef(name="a", paths=["x"])])
        errors = validate_config(config)
        self.assertEqual(len(errors), 1)
        self.assertIn("needs either a command", errors[0].message)


class TestProfiles(unittest.TestCase):
    """Tests for load_profile() and config_from_profile()."""

    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.base = Path(self.tmpdir.name)

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_load_profile(self) -> None:
        path = self.base / "bench.yml"
        path.write_text("repetitions: 3\ntests:\n  - name: build\n    command: make\n")
        data = load_profile(path)
        self.assertEqual(data["repetitions"], 3)
        self.assertEqual(data["tests"][0]["name"], "build")

    def test_load_profile_missing(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_profile(self.base / "nope.yml")

    def test_load_profile_not_mapping(self) -> None:
        path = self.base / "bench.yml"
        path.write_text("- just\n- a list\n")
        with self.assertRaises(ValueError):
            load_profile(path)

    def test_profile_values(self) -> None:
        config = config_from_profile(
            {
                "repetitions": 20,
                "rehearse": False,
                "recurse": False,
                "threads": 2,
                "history": "out/log.yml",
                "tests": [{"name": "build", "command": "make -s", "times": 3}],
            },
            base_dir=self.base,
        )
        self.assertEqual(config.repetitions, 20)
        self.assertFalse(config.rehearse)
        self.assertFalse(config.recurse)
        self.assertEqual(config.threads, 2)
        self.assertEqual(config.history_path, self.base / "out" / "log.yml")
        self.assertEqual(config.tests[0].command, "make -s")
        self.assertEqual(config.tests[0].times, 3)

    def test_cli_overrides_profile(self) -> None:
        config = config_from_profile(
            {"repetitions": 20, "recurse": True, "history": "log.yml", "tests": []},
            base_dir=self.base,
            cli_overrides={
                "repetitions": 4,
                "recurse": False,
                "threads": None,
                "history_path": "/tmp/other.yml",
            },
        )
        self.assertEqual(config.repetitions, 4)
        self.assertFalse(config.recurse)
        self.assertIsNone(config.threads)
        self.assertEqual(config.history_path, Path("/tmp/other.yml"))

    def test_paths_file_relative_to_base(self) -> None:
        (self.base / "paths.txt").write_text("src/a.py\n\n  src/b.py  \n")
        config = config_from_profile(
            {
                "tests": [
                    {"name": "big", "paths": ["README"], "paths_file": "paths.txt", "queries": "ab"}
                ]
            },
            base_dir=self.base,
        )
        test = config.tests[0]
        self.assertEqual(test.paths, ["README", "src/a.py", "src/b.py"])
        self.assertEqual(test.queries, ["ab"])
        self.assertEqual(test.kind, "matcher")

    def test_env_values_stringified(self) -> None:
        config = config_from_profile(
            {"tests": [{"name": "c", "command": "true", "env": {"LEVEL": 3}}]}
        )
        self.assertEqual(config.tests[0].env, {"LEVEL": "3"})

    def test_tests_must_be_list(self) -> None:
        with self.assertRaises(ValueError):
            config_from_profile({"tests": {"name": "a"}})

    def test_test_must_be_mapping(self) -> None:
        with self.assertRaises(ValueError):
            config_from_profile({"tests": ["a"]})


if __name__ == "__main__":
    unittest.main()
