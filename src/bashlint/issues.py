"""Issue records and the per-run issue sink."""

import zlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from bashlint.suggestions import suggest_fix

# Line number of issues that describe the whole script (unused symbols).
NO_LINE = None


class Severity(str, Enum):
    """Severity levels for lint issues."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


@dataclass(slots=True, frozen=True)
class Issue:
    """
    One detected problem in a shell script.

    Attributes:
        file: Script path the issue belongs to
        line: 1-based line number, or NO_LINE for script-wide issues
        rule: Rule identifier (e.g., "SH-Q101-UNQUOTED-VARIABLE")
        severity: Severity level
        message: Human-readable issue description
        suggestion: Suggested fix resolved from the message
    """

    file: str
    line: int | None
    rule: str
    severity: Severity
    message: str
    suggestion: str = ""

    def render(self) -> str:
        """
        Render the issue the way it is shown on the console.

        Examples:
            >>> create_issue("a.sh", 3, "R", "low", "Oops").render()
            'Line 3: Oops'
            >>> create_issue("a.sh", NO_LINE, "R", "low", "Unused function: f").render()
            'Unused function: f'
        """
        if self.line is NO_LINE:
            return self.message
        return f"Line {self.line}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """
        Convert issue to JSON-serializable dictionary.

        Returns:
            Dictionary with all issue fields plus its stable_id
        """
        return {
            "file": self.file,
            "line": self.line,
            "rule": self.rule,
            "severity": self.severity.value,
            "message": self.message,
            "suggestion": self.suggestion,
            "stable_id": stable_id(self.file, self.rule, self.message),
        }


def stable_id(file: str, rule: str, message: str) -> str:
    """
    Generate deterministic stable ID for an issue.

    Format: <file_crc32>-<rule_crc32>-<message_crc32>

    Args:
        file: Script path
        rule: Rule identifier
        message: Issue message

    Returns:
        Stable ID as hex string (e.g., "a1b2c3d4-e5f6a7b8-c9d0e1f2")
    """
    file_crc = zlib.crc32(file.encode("utf-8", errors="surrogateescape")) & 0xFFFFFFFF
    rule_crc = zlib.crc32(rule.encode("utf-8")) & 0xFFFFFFFF
    message_crc = zlib.crc32(message.encode("utf-8", errors="surrogateescape")) & 0xFFFFFFFF

    return f"{file_crc:08x}-{rule_crc:08x}-{message_crc:08x}"


def create_issue(
    file: str,
    line: int | None,
    rule: str,
    severity: str | Severity,
    message: str,
    suggestion: str | None = None,
) -> Issue:
    """
    Create an issue, resolving the suggested fix from the message.

    Args:
        file: Script path
        line: Line number (or NO_LINE)
        rule: Rule identifier
        severity: Severity level (string or Severity enum)
        message: Issue description
        suggestion: Explicit fix text; looked up from the message when None

    Returns:
        Issue instance

    Examples:
        >>> issue = create_issue("run.sh", 4, "SH-X403-EVAL", "high", "eval")
        >>> issue.severity
        <Severity.HIGH: 'high'>
    """
    if isinstance(severity, str):
        severity = Severity(severity)

    if suggestion is None:
        suggestion = suggest_fix(message)

    return Issue(
        file=file,
        line=line,
        rule=rule,
        severity=severity,
        message=message,
        suggestion=suggestion,
    )


@dataclass
class IssueSink:
    """
    Ordered, append-only log of the issues found in one lint run.

    Issues are never deduplicated. ``suggestions`` maps the message text (not
    the rendered "Line N: ..." form) to its fix, so identical messages on
    different lines share one entry.
    """

    file: str = "<stdin>"
    issues: list[Issue] = field(default_factory=list)
    suggestions: dict[str, str] = field(default_factory=dict)

    def report(self, issue: Issue) -> None:
        """Append an issue and record its suggestion."""
        self.issues.append(issue)
        self.suggestions[issue.message] = issue.suggestion

    @property
    def count(self) -> int:
        return len(self.issues)

    def suggestion_for(self, message: str) -> str:
        """Look up the fix for a message, falling back to the catalog."""
        if message in self.suggestions:
            return self.suggestions[message]
        return suggest_fix(message)

    def by_severity(self) -> dict[str, int]:
        """Count issues per severity, in severity order, omitting zeros."""
        counts: dict[str, int] = {}
        for severity in Severity:
            total = sum(1 for issue in self.issues if issue.severity is severity)
            if total:
                counts[severity.value] = total
        return counts

    def rendered(self) -> list[str]:
        return [issue.render() for issue in self.issues]
