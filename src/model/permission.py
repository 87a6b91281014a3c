"""Permission records: one declarative grant per line of the config file."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from constants import CONTAINER_NAME_PATTERN


class PermKind(Enum):
    """Every kind of grant a container can receive."""

    HOME_FOLDER = "home_folder"
    MOUNT = "mount"
    NETWORK = "network"
    X11 = "x11"
    WAYLAND = "wayland"
    AUDIO = "audio"
    GPU = "gpu"
    USB = "usb"
    WEBCAM = "webcam"
    UNSHARE_NETNS = "unshare_netns"
    UNSHARE_DEVSYS = "unshare_devsys"
    UNSHARE_GROUPS = "unshare_groups"
    UNSHARE_IPC = "unshare_ipc"
    UNSHARE_PROCESS = "unshare_process"
    UNSHARE_ALL = "unshare_all"
    PRIVILEGED = "privileged"
    ROOT = "root"
    INIT = "init"
    HOSTNAME = "hostname"
    CAP_ADD = "cap_add"
    SECURITY_OPT = "security_opt"

    @classmethod
    def names(cls) -> list[str]:
        """Kind names in declaration order (as written in the config file)."""
        return [kind.value for kind in cls]


class PermissionStoreError(Exception):
    """Base class for rejected grants."""


class InvalidPermissionKind(PermissionStoreError):
    """Raised when a grant names a kind outside PermKind."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"Invalid permission kind: {kind!r} (expected one of: {', '.join(PermKind.names())})"
        )
        self.kind = kind


class InvalidContainerName(PermissionStoreError):
    """Raised when a container name cannot be used as a record key."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Invalid container name: {name!r} "
            "(letters, digits, '_', '.' and '-' only; must start with a letter or digit)"
        )
        self.name = name


class InvalidPermissionValue(PermissionStoreError):
    """Raised when a value would break the line-oriented file format."""


_CONTAINER_NAME_RE = re.compile(CONTAINER_NAME_PATTERN)


def validate_container_name(name: str) -> str:
    """Return name unchanged, or raise InvalidContainerName."""
    if not _CONTAINER_NAME_RE.fullmatch(name):
        raise InvalidContainerName(name)
    return name


def parse_kind(kind: str | PermKind) -> PermKind:
    """Resolve a kind name, raising InvalidPermissionKind for unknown names."""
    if isinstance(kind, PermKind):
        return kind
    try:
        return PermKind(kind)
    except ValueError:
        raise InvalidPermissionKind(kind) from None


@dataclass(frozen=True)
class PermissionRecord:
    """One grant: `container:kind:value`."""

    container: str
    kind: PermKind
    value: str

    def to_line(self) -> str:
        return f"{self.container}:{self.kind.value}:{self.value}"

    @classmethod
    def from_line(cls, line: str) -> PermissionRecord | None:
        """Parse one config line.

        Returns None for comments and blank lines. The value is everything
        after the second colon, so mount values keep their own colons.

        Raises:
            ValueError: the line has fewer than three fields
            InvalidPermissionKind: the kind is not a PermKind
        """
        body = line.rstrip("\r\n").lstrip()
        if not body.strip() or body.startswith("#"):
            return None
        # Only the line ending is removed; the value keeps its own whitespace
        parts = body.split(":", 2)
        if len(parts) != 3:
            raise ValueError(f"Expected container:kind:value, got {body!r}")
        container, kind, value = parts
        return cls(container=container, kind=parse_kind(kind), value=value)
