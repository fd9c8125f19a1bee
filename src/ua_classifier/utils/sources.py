"""Line-oriented User-Agent sources.

Reads one User-Agent per line from plain text files, bz2 archives or stdin.
"""

from __future__ import annotations

import bz2
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

STDIN = Path("-")


def validate_source(path: Path) -> None:
    """Ensure ``path`` is stdin or an existing regular file."""
    if path == STDIN:
        return
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")


@contextmanager
def open_source(path: Path) -> Iterator[TextIO]:
    """Open a source for reading text, decompressing ``.bz2`` files on the fly.

    Parameters
    ----------
    path : Path
        Source path; ``-`` reads from stdin.

    Yields
    ------
    TextIO
        Text stream over the source.
    """
    validate_source(path)
    if path == STDIN:
        yield sys.stdin
        return

    try:
        if path.suffix.lower() == ".bz2":
            handle = bz2.open(path, "rt", encoding="utf-8", errors="replace")
        else:
            handle = path.open("r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise RuntimeError(f"Failed to open {path}: {e}") from e

    with handle:
        yield handle


def iter_user_agents(stream: TextIO) -> Iterator[str]:
    """Yield User-Agent strings, one per line, skipping blank lines."""
    for line in stream:
        value = line.rstrip("\r\n")
        if value.strip():
            yield value


def count_lines(path: Path) -> int | None:
    """Count non-blank lines for progress display; None for stdin."""
    if path == STDIN:
        return None
    with open_source(path) as stream:
        return sum(1 for _ in iter_user_agents(stream))
