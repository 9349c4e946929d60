"""Logging setup for benchlog.

Progress and diagnostics go to stderr so that stdout carries only the
report (or its JSON form).  An optional log file receives everything at
DEBUG, including per-repetition timings, and is appended to across runs
just like the history log.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "benchlog"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the benchlog logger.

    Args:
        verbose: If True, show DEBUG messages (individual timings) on stderr.
        quiet: If True, only show warnings and errors. Ignored if *verbose* is True.
        log_file: If provided, append DEBUG-level records to this file.

    Returns:
        The configured ``benchlog`` logger.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Allow reconfiguration, e.g. by repeated CLI invocations in tests.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    if verbose:
        console.setLevel(logging.DEBUG)
    elif quiet:
        console.setLevel(logging.WARNING)
    else:
        console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a named child logger, e.g. ``benchlog.history``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
