"""benchlog: a performance-regression harness with a run history."""

__version__ = "0.1.0"
