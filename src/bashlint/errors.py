"""bashlint error taxonomy and exit codes."""

from enum import IntEnum


class ExitCode(IntEnum):
    """
    Uniform exit codes for the bashlint CLI.

    The number of issues found never changes the exit code:
    - 0: Lint run completed (with or without issues)
    - 1: Operational error (no script given, script unreadable)
    - 3: Invalid arguments or configuration
    """

    SUCCESS = 0
    OPERATIONAL_ERROR = 1
    INVALID_ARGS = 3


class BashlintError(Exception):
    """Base exception for all bashlint errors."""

    def __init__(self, message: str, exit_code: ExitCode = ExitCode.OPERATIONAL_ERROR):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class OperationalError(BashlintError):
    """Runtime errors: missing script, unreadable file."""

    def __init__(self, message: str):
        super().__init__(message, ExitCode.OPERATIONAL_ERROR)


class InvalidArgsError(BashlintError):
    """Invalid CLI arguments or configuration."""

    def __init__(self, message: str):
        super().__init__(message, ExitCode.INVALID_ARGS)


def format_error(error: Exception, verbose: bool = False) -> str:
    """
    Format error for CLI output.

    Args:
        error: Exception to format
        verbose: If True, include stack trace

    Returns:
        Formatted error message

    Examples:
        >>> err = OperationalError("Error opening file: test.sh")
        >>> format_error(err)
        'Error: Error opening file: test.sh'
    """
    if isinstance(error, BashlintError):
        return f"Error: {error.message}"

    if verbose:
        import traceback
        return f"Unexpected error: {error}\n{traceback.format_exc()}"

    return f"Unexpected error: {error}"
