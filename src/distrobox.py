"""Invocation shim: builds and runs distrobox commands."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from model.flags import PermissionFlag

log = logging.getLogger(__name__)

DISTROBOX = "distrobox"
PASSTHROUGH_FLAG = "--additional-flags"

# Appended after every permission flag. The engine's own parser still lets
# a later duplicate (e.g. a security_opt grant) win; that is its behaviour,
# not something this block can prevent.
HARDENING_FLAGS: tuple[tuple[str, ...], ...] = (
    ("--security-opt", "no-new-privileges"),
    ("--cap-drop", "ALL"),
    ("--read-only-tmpfs",),
)


class ExternalToolFailure(Exception):
    """Raised when a distrobox invocation exits non-zero or cannot start."""

    def __init__(self, command: list[str], returncode: int | None, detail: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.detail = detail
        status = f"exit code {returncode}" if returncode is not None else "could not be started"
        message = f"{shlex.join(command[:2])} failed ({status})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


@dataclass(frozen=True)
class ContainerInfo:
    """One row of `distrobox list`."""

    id: str
    name: str
    status: str
    image: str


def wrap_passthrough(tokens: tuple[str, ...] | list[str]) -> list[str]:
    """Wrap a container-engine flag so distrobox hands it to podman/docker."""
    return [PASSTHROUGH_FLAG, shlex.join(tokens)]


def build_create_command(
    name: str,
    image: str,
    home: Path | str,
    unshare_flags: list[str],
    permission_flags: list[PermissionFlag],
) -> list[str]:
    """Build the full `distrobox create` argument vector.

    Order: identity flags, unshare flags, permission flags, hardening block.
    The hardening block is always last.
    """
    args = [
        DISTROBOX, "create",
        "--name", name,
        "--image", image,
        "--home", str(home),
        "--no-entry",
    ]

    args.extend(unshare_flags)

    for flag in permission_flags:
        if flag.native:
            args.extend(flag.tokens)
        else:
            args.extend(wrap_passthrough(flag.tokens))

    for tokens in HARDENING_FLAGS:
        args.extend(wrap_passthrough(tokens))

    return args


def _run(cmd: list[str], capture: bool = False) -> subprocess.CompletedProcess:
    log.debug(f"Running: {shlex.join(cmd)}")
    try:
        return subprocess.run(cmd, capture_output=capture, text=True)
    except FileNotFoundError as e:
        raise ExternalToolFailure(cmd, None, f"{cmd[0]} not found on PATH") from e


def create_container(cmd: list[str]) -> None:
    """Run a create command built by build_create_command.

    No retry and no rollback: on failure the container may exist in a
    half-created state and must be removed before trying again.
    """
    result = _run(cmd)
    if result.returncode != 0:
        raise ExternalToolFailure(cmd, result.returncode)
    log.info(f"Created container via: {shlex.join(cmd)}")


def parse_list_output(output: str) -> list[ContainerInfo]:
    """Parse `distrobox list --no-color` output.

    Format:
        ID           | NAME     | STATUS        | IMAGE
        0123456789ab | dev      | Up 2 hours    | registry.fedoraproject.org/fedora-toolbox:40
    """
    containers = []
    for line in output.splitlines():
        if "|" not in line:
            continue
        cells = [cell.strip() for cell in line.split("|")]
        if len(cells) < 4 or cells[0].upper() == "ID":
            continue
        containers.append(ContainerInfo(id=cells[0], name=cells[1], status=cells[2], image=cells[3]))
    return containers


def list_containers() -> list[ContainerInfo]:
    cmd = [DISTROBOX, "list", "--no-color"]
    result = _run(cmd, capture=True)
    if result.returncode != 0:
        raise ExternalToolFailure(cmd, result.returncode, (result.stderr or "").strip())
    return parse_list_output(result.stdout)


def find_container(name: str) -> ContainerInfo | None:
    for container in list_containers():
        if container.name == name:
            return container
    return None


def stop_container(name: str) -> bool:
    """Best-effort stop. Returns True if distrobox reported success."""
    try:
        result = _run([DISTROBOX, "stop", "--yes", name], capture=True)
    except ExternalToolFailure as e:
        log.warning(f"Could not stop {name}: {e}")
        return False
    if result.returncode != 0:
        log.warning(f"distrobox stop {name} exited {result.returncode}: {(result.stderr or '').strip()}")
        return False
    return True


def remove_container(name: str) -> bool:
    """Best-effort removal. Returns True if distrobox reported success."""
    try:
        result = _run([DISTROBOX, "rm", "--force", name], capture=True)
    except ExternalToolFailure as e:
        log.warning(f"Could not remove {name}: {e}")
        return False
    if result.returncode != 0:
        log.warning(f"distrobox rm {name} exited {result.returncode}: {(result.stderr or '').strip()}")
        return False
    return True


def teardown_container(name: str) -> ContainerInfo | None:
    """Stop and remove an existing container before it is rebuilt.

    Failures are logged and tolerated. Returns the container's listing (if
    it could be found) so the caller can reuse its image.
    """
    try:
        existing = find_container(name)
    except ExternalToolFailure as e:
        log.warning(f"Could not list containers: {e}")
        existing = None

    stop_container(name)
    remove_container(name)
    return existing
