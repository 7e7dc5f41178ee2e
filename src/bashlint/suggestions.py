"""Suggested fixes for lint messages.

Fixes are looked up by substring of the issue message. The catalog is
ordered: the first key found in the message wins, so more specific keys
must stay ahead of broader ones.
"""

DEFAULT_SUGGESTION = "Refer to best practices for resolving this issue."

SUGGESTION_CATALOG: tuple[tuple[str, str], ...] = (
    ("unquoted variable", "Quote the variable using \"${VAR}\" or '$VAR'."),
    ("command substitution", "Use $(...) instead of backticks."),
    ("double square brackets", "Use [[ ... ]] instead of [ ... ] for conditionals."),
    ("unused variable", "Remove the unused variable or use it appropriately."),
    (
        "dangerous command",
        "Add safeguards and ensure commands like 'rm -rf' are used with caution and proper checks.",
    ),
    ("inconsistent indentation", "Use either spaces or tabs consistently for indentation."),
    ("function naming", "Prefix function names with 'f_' for consistency."),
    ("shell built-in", "Ensure the usage of the shell built-in command is intentional and necessary."),
    ("exit code", "Specify an exit code (e.g., 'exit 0' for success, 'exit 1' for failure)."),
    ("hard-coded path", "Use variables or environment variables instead of hard-coded paths."),
    ("logical operators", "Use brackets around && and || for better readability."),
    ("empty variable declaration", "Initialize variables at the time of declaration."),
    ("loops and conditionals", "Use { } or ; do/done for better readability in loops and conditionals."),
    ("non-portable command", "Replace non-portable commands with more portable alternatives."),
    ("missing keyword", "Ensure that 'if' statements have a matching 'fi', and loops have matching 'done'."),
    ("documentation", "Add comments to explain the purpose of the function."),
    ("error handling", "Add error handling (e.g., '|| exit') to critical commands."),
    ("script header", "Add a script header with metadata like author, date, and purpose."),
    ("security vulnerability", "Refactor to avoid using potentially dangerous commands like 'eval'."),
)


def suggest_fix(message: str) -> str:
    """
    Resolve the suggested fix for an issue message.

    Matching is a case-insensitive substring test against each catalog key.

    Args:
        message: Issue message (without any "Line N:" prefix)

    Returns:
        Fix text, or DEFAULT_SUGGESTION when no key matches

    Examples:
        >>> suggest_fix("Unused variable: FOO")
        'Remove the unused variable or use it appropriately.'
        >>> suggest_fix("Something else entirely")
        'Refer to best practices for resolving this issue.'
    """
    lowered = message.lower()
    for key, fix in SUGGESTION_CATALOG:
        if key in lowered:
            return fix
    return DEFAULT_SUGGESTION
