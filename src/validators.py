"""Validation of host paths named by grants."""

from __future__ import annotations

from pathlib import Path

from compiler import split_mount
from model.permission import PermKind, parse_kind


def grant_host_path(kind: str | PermKind, value: str) -> str | None:
    """Return the host path a grant would bind into the container.

    Only home_folder and mount grants expose host paths. For a mount that is
    the source side of `src:dst`. Returns None for every other kind and for
    mount values that don't split.
    """
    perm_kind = parse_kind(kind)
    if perm_kind is PermKind.HOME_FOLDER:
        return value.strip() or None
    if perm_kind is PermKind.MOUNT:
        parts = split_mount(value)
        return parts[0] if parts else None
    return None


def validate_host_path(path: str) -> str | None:
    """Check a host path before it is granted.

    Args:
        path: Host path from a home_folder or mount grant

    Returns:
        None if the path is usable, otherwise a message describing the problem
    """
    resolved = Path(path).expanduser()
    if not resolved.is_absolute():
        return f"{path} is not an absolute path"
    if not resolved.exists():
        return f"{path} does not exist on the host"
    return None
