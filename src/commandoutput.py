"""Terminal output: status lines, error boxes and the execution header."""

from __future__ import annotations

import shlex
import sys
from typing import TextIO

RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
NC = "\033[0m"


def _paint(text: str, color: str, stream: TextIO) -> str:
    """Color text only when writing to a terminal."""
    if hasattr(stream, "isatty") and stream.isatty():
        return f"{color}{text}{NC}"
    return text


def info(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(f"{_paint('[INFO]', GREEN, stream)} {message}", file=stream)


def warn(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stderr
    print(f"{_paint('[WARN]', YELLOW, stream)} {message}", file=stream)


def error(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stderr
    print(f"{_paint('[ERROR]', RED, stream)} {message}", file=stream)


def print_error_box(title: str, *lines: str) -> None:
    """Print a formatted error box to stderr.

    Args:
        title: The error title (will be prefixed with "Error: ")
        *lines: Additional lines to print in the box
    """
    print("=" * 60, file=sys.stderr)
    print(_paint(f"Error: {title}", RED, sys.stderr), file=sys.stderr)
    print("", file=sys.stderr)
    for line in lines:
        print(line, file=sys.stderr)
    print("=" * 60, file=sys.stderr)


def print_execution_header(cmd: list[str], summary: str | None = None, dry_run: bool = False) -> None:
    """Print the distrobox command about to run and what it grants.

    Args:
        cmd: The distrobox command
        summary: Optional plain-text permission summary
        dry_run: Say the command is shown but not executed
    """
    print("=" * 60)
    print("Would execute:" if dry_run else "Executing:")
    print(shlex.join(cmd))

    if summary:
        print()
        print(summary)

    print("=" * 60 + "\n")
