"""bashlint issue browser - interactive review of a finished lint run.

The list holds "All Issues" followed by every issue in detection order.
Moving the highlight previews the entry and its suggested fix; Enter picks
it and closes the browser, returning the picked issues to the caller.

Commands:
- Up/Down: Move through issues
- Enter: Pick the highlighted entry
- a: Preview all issues
- q: Quit without picking
"""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Label, OptionList, Static
from textual.widgets.option_list import Option

from bashlint.issues import Issue, IssueSink
from bashlint.report import display_text

ALL_ISSUES_ID = "all"
ALL_ISSUES_LABEL = "All Issues"


def _option_id(index: int) -> str:
    return f"issue-{index}"


class IssueDetail(Static):
    """Detail pane - shows issues with their suggestions."""

    def __init__(self, sink: IssueSink, **kwargs) -> None:
        super().__init__(**kwargs)
        self.sink = sink
        self.shown: list[Issue] = []
        self.plain_text = ""

    def show(self, issues: list[Issue]) -> None:
        self.shown = list(issues)
        text = Text()
        if not issues:
            text.append("No issues found.", style="green")
        for position, issue in enumerate(issues):
            if position:
                text.append("\n\n")
            text.append(display_text(issue.render()), style="bold yellow")
            text.append("\n  Suggestion: ")
            text.append(display_text(self.sink.suggestion_for(issue.message)), style="cyan")
        self.plain_text = text.plain
        self.update(text)


class IssueBrowser(App[list[Issue] | None]):
    """Interactive issue browser for one lint run."""

    TITLE = "bashlint"

    CSS = """
    Screen {
        background: $surface;
    }

    .panel-title {
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
        width: 100%;
    }

    #issue-list {
        width: 1fr;
        height: 1fr;
        border: solid $primary;
    }

    #detail-pane {
        width: 1fr;
        height: 1fr;
        border: solid $accent;
        padding: 0 1;
    }

    #summary {
        height: 1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("a", "show_all", "All Issues", show=True),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(self, sink: IssueSink) -> None:
        super().__init__()
        self.sink = sink

    def compose(self) -> ComposeResult:
        yield Header()

        options = [Option(ALL_ISSUES_LABEL, id=ALL_ISSUES_ID)]
        options.extend(
            Option(Text(display_text(issue.render())), id=_option_id(index))
            for index, issue in enumerate(self.sink.issues)
        )

        with Horizontal():
            yield OptionList(*options, id="issue-list")
            with VerticalScroll(id="detail-pane"):
                yield Label("Suggestion", classes="panel-title")
                yield IssueDetail(self.sink, id="issue-detail")

        yield Static(self.summary_text(), id="summary")
        yield Footer()

    def on_mount(self) -> None:
        self.sub_title = display_text(self.sink.file)
        option_list = self.query_one(OptionList)
        option_list.highlighted = 0
        option_list.focus()
        self.query_one(IssueDetail).show(self.sink.issues)

    def summary_text(self) -> str:
        if self.sink.count == 0:
            return "No issues found."
        return f"{self.sink.count} issue(s) found."

    def issues_for(self, option_id: str | None) -> list[Issue]:
        """Map an option id back to the issues it stands for."""
        if option_id is None or option_id == ALL_ISSUES_ID:
            return list(self.sink.issues)
        index = int(option_id.removeprefix("issue-"))
        return [self.sink.issues[index]]

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        self.query_one(IssueDetail).show(self.issues_for(event.option.id))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(self.issues_for(event.option.id))

    def action_show_all(self) -> None:
        self.query_one(IssueDetail).show(self.sink.issues)


def run_browser(sink: IssueSink) -> list[Issue] | None:
    """
    Run the issue browser.

    Returns:
        Picked issues, or None when the user quit without picking
    """
    return IssueBrowser(sink).run()
