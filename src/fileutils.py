"""File utilities for the permissions file."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def write_file_atomic(path: Path, content: str, mode: int) -> None:
    """Create a new file with its permissions set at creation time.

    Uses os.open() with O_CREAT | O_EXCL so the file never exists with
    looser permissions than requested.

    Args:
        path: Path to write to
        content: File content
        mode: File permission mode (e.g., 0o644)

    Raises:
        FileExistsError: If the file already exists
        OSError: If file creation fails
    """
    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
    try:
        os.write(fd, content.encode())
    finally:
        os.close(fd)


def replace_file_atomic(path: Path, content: str) -> None:
    """Replace a file's content via a temp file in the same directory + rename.

    Readers see either the old file or the new one, never a half-written
    file. The original file mode is kept.
    """
    mode = path.stat().st_mode & 0o777 if path.exists() else 0o644
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def append_line(path: Path, line: str) -> None:
    """Append one line, first terminating a partial last line if there is one.

    A crash during an earlier append can leave the file without a trailing
    newline; writing straight after it would glue two records together.
    """
    needs_newline = False
    if path.exists() and path.stat().st_size > 0:
        with path.open("rb") as f:
            f.seek(-1, os.SEEK_END)
            needs_newline = f.read(1) != b"\n"

    with path.open("a") as f:
        if needs_newline:
            f.write("\n")
        f.write(line + "\n")
        f.flush()
        os.fsync(f.fileno())
