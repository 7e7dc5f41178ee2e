#!/usr/bin/env python3
"""bashlint CLI - lint one shell script and report issues."""

import argparse
import logging
import sys

from bashlint import __version__
from bashlint.config import OUTPUT_FORMATS, load_config
from bashlint.errors import BashlintError, ExitCode, format_error
from bashlint.export import issues_to_json
from bashlint.kernel import lint_file
from bashlint.report import make_console, render_details, render_severity_breakdown, render_text
from bashlint.rules import RULES

USAGE_LINE = "Usage: bashlint [options] <script.sh>"
DETAILS_HINT = (
    "To view more details about each issue, refer to the documentation "
    "or use the linter with detailed output enabled."
)


def _split_rules(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bashlint",
        description="bashlint - heuristic style, portability and safety linter for shell scripts",
    )
    parser.add_argument("script", nargs="?", help="Shell script to lint")
    parser.add_argument(
        "--version", action="version", version=f"bashlint v{__version__}"
    )
    parser.add_argument(
        "--check-shebang",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable/disable shebang check (default: enabled)",
    )
    parser.add_argument(
        "--check-unused-vars",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable/disable unused variable check (default: enabled)",
    )
    parser.add_argument(
        "--rules", help="Comma-separated rule IDs or patterns to report (default: all)"
    )
    parser.add_argument(
        "--disable", help="Comma-separated rule IDs or patterns to suppress"
    )
    parser.add_argument(
        "--format", choices=OUTPUT_FORMATS, default=None, help="Output format (default: text)"
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Disable colored output"
    )
    parser.add_argument(
        "--details", action="store_true", help="Print every issue with its suggested fix"
    )
    parser.add_argument(
        "-i", "--interactive", action="store_true", help="Browse issues in an interactive terminal UI"
    )
    parser.add_argument(
        "--list-rules", action="store_true", help="List all rule IDs and exit"
    )
    parser.add_argument(
        "--config", help="Path to bashlint.toml configuration file"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging and verbose error output"
    )
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_list_rules() -> int:
    for rule in RULES:
        print(f"{rule.rule_id:<40} {rule.severity.value:<9} {rule.name}")
    return ExitCode.SUCCESS


def cmd_lint(args) -> int:
    """Lint one script and render the results."""
    try:
        cli_overrides = {
            "check_shebang": args.check_shebang,
            "check_unused_vars": args.check_unused_vars,
            "enabled_rules": _split_rules(args.rules),
            "disabled_rules": _split_rules(args.disable),
            "output_format": args.format,
            "color": False if args.no_color else None,
        }
        config = load_config(args.config, cli_overrides)

        run = lint_file(args.script, config)
        sink = run.sink

        if config.output_format == "json":
            sys.stdout.write(issues_to_json(sink, run.read_error))
        else:
            console = make_console(color=config.color)
            render_text(sink, console)
            if args.verbose:
                render_severity_breakdown(sink, console)
            if args.details:
                render_details(sink.issues, sink, console)

        if args.interactive:
            from bashlint.tui.app import run_browser

            # stdout carries only the JSON document in json mode
            to_stderr = config.output_format == "json"
            picked = run_browser(sink)
            if picked:
                render_details(picked, sink, make_console(color=config.color, stderr=to_stderr))
            print(DETAILS_HINT, file=sys.stderr if to_stderr else sys.stdout)

        return ExitCode.SUCCESS

    except BashlintError as e:
        print(format_error(e), file=sys.stderr)
        return e.exit_code
    except Exception as e:
        print(format_error(e, verbose=args.verbose), file=sys.stderr)
        return ExitCode.OPERATIONAL_ERROR


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits 0 for --help/--version and 2 for bad flags
        if e.code == 0:
            return ExitCode.SUCCESS
        return ExitCode.INVALID_ARGS

    configure_logging(args.verbose)

    if args.list_rules:
        return cmd_list_rules()

    if not args.script:
        print(USAGE_LINE, file=sys.stderr)
        parser.print_help(sys.stderr)
        return ExitCode.OPERATIONAL_ERROR

    try:
        return cmd_lint(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return ExitCode.OPERATIONAL_ERROR


if __name__ == "__main__":
    sys.exit(main())
