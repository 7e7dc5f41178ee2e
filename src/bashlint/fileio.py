"""File I/O utilities with robust encoding and newline handling."""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from bashlint.errors import OperationalError

logger = logging.getLogger(__name__)


def open_script(file_path: Path | str) -> BinaryIO:
    """
    Open a script for line-by-line reading.

    The file is opened in binary mode; decoding happens per line in
    iter_lines() so undecodable bytes never abort a run.

    Args:
        file_path: Path to the shell script

    Returns:
        Open binary file handle (caller closes it)

    Raises:
        OperationalError: If the file is missing, a directory, or unreadable
    """
    path = Path(file_path)
    try:
        return open(path, "rb")
    except OSError as e:
        logger.debug("cannot open %s: %s", path, e)
        raise OperationalError(f"Error opening file: {e}") from e


def decode_line(raw_bytes: bytes) -> str:
    """
    Decode one line and strip its line ending.

    Uses utf-8 with surrogateescape so invalid bytes survive as lone
    surrogates instead of raising. One trailing ``\\n`` is removed, then one
    ``\\r`` before it; a ``\\r`` inside the line is kept.

    Examples:
        >>> decode_line(b"echo hi\\r\\n")
        'echo hi'
        >>> decode_line(b"done")
        'done'
    """
    text = raw_bytes.decode("utf-8", errors="surrogateescape")
    if text.endswith("\n"):
        text = text[:-1]
    if text.endswith("\r"):
        text = text[:-1]
    return text


def iter_lines(handle: BinaryIO) -> Iterator[str]:
    """
    Yield decoded lines from an open binary handle.

    Lines are split on ``\\n`` only. OSError raised by the underlying read
    propagates to the caller.

    Args:
        handle: Binary file handle

    Yields:
        Lines without their line endings
    """
    for raw in handle:
        yield decode_line(raw)
