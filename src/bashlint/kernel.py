"""bashlint kernel - drives one lint run over a stream of script lines.

A run moves through AWAITING_FIRST_LINE -> STREAMING -> RECONCILING -> DONE.
Line 1 gets the shebang check (when enabled) on its raw text and then goes
through the regular line rules like every other line. After the last line
the symbol table is reconciled into unused-variable (when enabled) and
unused-function issues.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from fnmatch import fnmatchcase
from pathlib import Path

from bashlint.config import LintConfig, get_default_config
from bashlint.fileio import iter_lines, open_script
from bashlint.issues import NO_LINE, IssueSink, create_issue
from bashlint.rules import Rule, ScriptLine, Stage, rules_for_stage
from bashlint.symbols import SymbolTable

logger = logging.getLogger(__name__)

UNUSED_VARIABLE_RULE = "SH-U001-UNUSED-VARIABLE"


class RunState(str, Enum):
    AWAITING_FIRST_LINE = "awaiting-first-line"
    STREAMING = "streaming"
    RECONCILING = "reconciling"
    DONE = "done"


def should_report_rule(rule_id: str, config: LintConfig) -> bool:
    """
    Check if issues of a rule are reported under the config's rule filters.

    Patterns are fnmatch-style and case-insensitive ("SH-X*", "sh-p003-*").
    Disable patterns win over enable patterns.

    Examples:
        >>> should_report_rule("SH-X403-EVAL", LintConfig(enabled_rules=["SH-X*"]))
        True
        >>> should_report_rule("SH-X403-EVAL", LintConfig(disabled_rules=["sh-x403-eval"]))
        False
    """
    rule_id = rule_id.upper()
    if any(fnmatchcase(rule_id, pattern.upper()) for pattern in config.disabled_rules):
        return False
    if not config.enabled_rules:
        return True
    return any(fnmatchcase(rule_id, pattern.upper()) for pattern in config.enabled_rules)


class LintRun:
    """
    State of a single lint run.

    The symbol table and issue sink belong to this run only; a fresh LintRun
    is created for every script.
    """

    def __init__(self, config: LintConfig | None = None, file: str = "<stdin>") -> None:
        self.config = config or get_default_config()
        self.file = file
        self.state = RunState.AWAITING_FIRST_LINE
        self.symbols = SymbolTable()
        self.sink = IssueSink(file=file)
        self.lines_read = 0
        self.read_error: str | None = None

        self._first_line_rules = rules_for_stage(Stage.FIRST_LINE)
        self._line_rules = rules_for_stage(Stage.LINE)
        self._end_rules = rules_for_stage(Stage.END)

    def _emit(self, rule: Rule, line_number: int | None, messages: list[str]) -> None:
        if not messages or not should_report_rule(rule.rule_id, self.config):
            return
        for message in messages:
            self.sink.report(create_issue(self.file, line_number, rule.rule_id, rule.severity, message))

    def feed(self, raw: str) -> None:
        """Evaluate the next raw line of the script."""
        if self.state not in (RunState.AWAITING_FIRST_LINE, RunState.STREAMING):
            raise RuntimeError(f"cannot feed lines to a run in state {self.state.value}")

        self.lines_read += 1
        line = ScriptLine.from_raw(self.lines_read, raw)

        if self.state is RunState.AWAITING_FIRST_LINE:
            if self.config.check_shebang:
                for rule in self._first_line_rules:
                    self._emit(rule, line.number, rule.check(line, self.symbols))
            self.state = RunState.STREAMING

        if line.is_blank_or_comment:
            return

        for rule in self._line_rules:
            self._emit(rule, line.number, rule.check(line, self.symbols))

    def finish(self) -> IssueSink:
        """Reconcile declarations into unused-symbol issues and close the run."""
        if self.state is RunState.DONE:
            return self.sink

        self.state = RunState.RECONCILING
        for rule in self._end_rules:
            if rule.rule_id == UNUSED_VARIABLE_RULE and not self.config.check_unused_vars:
                continue
            self._emit(rule, NO_LINE, rule.check(self.symbols))

        self.state = RunState.DONE
        logger.debug(
            "linted %s: %d line(s), %d issue(s)", self.file, self.lines_read, self.sink.count
        )
        return self.sink

    def consume(self, lines: Iterable[str]) -> IssueSink:
        """
        Stream every line, then reconcile.

        An OSError raised by the line source mid-stream is recorded in
        ``read_error``; the lines already read are still reconciled.
        """
        try:
            for raw in lines:
                self.feed(raw)
        except OSError as e:
            self.read_error = f"Error reading file: {e}"
            logger.error("%s (%s, after line %d)", self.read_error, self.file, self.lines_read)
        return self.finish()


def run_lint(
    lines: Iterable[str],
    config: LintConfig | None = None,
    file: str = "<stdin>",
) -> IssueSink:
    """
    Lint a sequence of raw script lines.

    Args:
        lines: Raw lines (line endings optional; they are stripped with the
            rest of the surrounding whitespace)
        config: Lint configuration (default: all checks on)
        file: Name recorded on every issue

    Returns:
        Finalized IssueSink
    """
    return LintRun(config, file).consume(lines)


def lint_file(file_path: Path | str, config: LintConfig | None = None) -> LintRun:
    """
    Lint a script on disk.

    Args:
        file_path: Path to the shell script
        config: Lint configuration

    Returns:
        The completed LintRun (issues in ``run.sink``)

    Raises:
        OperationalError: If the file cannot be opened; no issues are produced
    """
    path = Path(file_path)
    run = LintRun(config, str(path))
    with open_script(path) as handle:
        run.consume(iter_lines(handle))
    return run
