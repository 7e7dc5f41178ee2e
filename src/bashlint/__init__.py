"""bashlint - heuristic line-by-line linter for shell scripts."""

__version__ = "0.3.0"
