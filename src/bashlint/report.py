"""Console rendering of lint results."""

from collections.abc import Sequence

from rich.console import Console
from rich.text import Text

from bashlint.issues import Issue, IssueSink


def display_text(text: str) -> str:
    """
    Make script-derived text safe to print.

    Undecodable bytes kept as lone surrogates become U+FFFD. Only the printed
    form changes; issues in the sink and the JSON report keep the exact text.
    """
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def make_console(color: bool = True, stderr: bool = False) -> Console:
    return Console(no_color=not color, highlight=False, stderr=stderr, soft_wrap=True)


def render_summary(sink: IssueSink, console: Console) -> None:
    if sink.count == 0:
        console.print(Text("No issues found.", style="green"))
    else:
        console.print(Text(f"{sink.count} issue(s) found.", style="red"))


def render_text(sink: IssueSink, console: Console) -> None:
    """
    Print every issue in detection order, then the summary line.

    Issues print as "Line <N>: <message>", or the bare message for
    script-wide issues.
    """
    for issue in sink.issues:
        console.print(Text(display_text(issue.render()), style="red"))
    render_summary(sink, console)


def render_details(issues: Sequence[Issue], sink: IssueSink, console: Console) -> None:
    """Print issues with their suggested fixes."""
    for issue in issues:
        console.print(Text(display_text(issue.render()), style="yellow"))
        line = Text("  Suggestion: ")
        line.append(display_text(sink.suggestion_for(issue.message)), style="cyan")
        console.print(line)


def render_severity_breakdown(sink: IssueSink, console: Console) -> None:
    counts = sink.by_severity()
    if not counts:
        return
    parts = [f"{severity}: {count}" for severity, count in counts.items()]
    console.print(Text("  " + ", ".join(parts), style="dim"))
