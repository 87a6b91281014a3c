"""Create and recreate flows: store -> compiler -> distrobox."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from commandoutput import print_execution_header
from compiler import FlagCompiler
from containers import ensure_home_dir, get_home_dir
from distrobox import (
    ExternalToolFailure,
    build_create_command,
    create_container,
    find_container,
    teardown_container,
)
from summary import PermissionSummarizer

if TYPE_CHECKING:
    from detection import HostEnvironment
    from model.flags import CompiledFlags
    from store import PermissionStore

log = logging.getLogger(__name__)


@dataclass
class CreatePlan:
    """Everything needed to create one container."""

    name: str
    image: str
    command: list[str]
    compiled: CompiledFlags

    def summary(self) -> str:
        return PermissionSummarizer(self.compiled).summarize()


def plan_create(
    store: PermissionStore,
    name: str,
    image: str,
    host: HostEnvironment | None = None,
) -> CreatePlan:
    """Compile the container's current records into a create command.

    Pure: touches neither the filesystem nor distrobox.
    """
    records = store.list(name)
    compiled = FlagCompiler(host).compile(records)
    cmd = build_create_command(
        name,
        image,
        get_home_dir(name),
        compiled.unshare_flags,
        compiled.permission_flags,
    )
    log.debug(f"{name}: {len(records)} record(s), {len(compiled.permission_flags)} permission flag(s)")
    return CreatePlan(name=name, image=image, command=cmd, compiled=compiled)


def execute_create(plan: CreatePlan, dry_run: bool = False) -> None:
    """Bootstrap the isolated home and run distrobox create.

    Raises:
        ExternalToolFailure: distrobox exited non-zero (no rollback)
    """
    print_execution_header(plan.command, plan.summary(), dry_run=dry_run)
    if dry_run:
        return
    ensure_home_dir(plan.name)
    create_container(plan.command)


def execute_recreate(
    store: PermissionStore,
    name: str,
    image: str | None,
    default_image: str,
    host: HostEnvironment | None = None,
    dry_run: bool = False,
) -> CreatePlan:
    """Tear down the existing container and rebuild it with current records.

    The image comes from the command line, then from the existing
    container's listing, then default_image. Teardown is best-effort.
    """
    if dry_run:
        try:
            existing = find_container(name)
        except ExternalToolFailure as e:
            log.warning(f"Could not list containers: {e}")
            existing = None
    else:
        existing = teardown_container(name)

    if image is None:
        image = existing.image if existing and existing.image else default_image

    plan = plan_create(store, name, image, host)
    execute_create(plan, dry_run=dry_run)
    return plan
