"""Command-line interface for distrobox-secure."""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path

from command_execution import execute_create, execute_recreate, plan_create
from commandoutput import error, info, print_error_box, warn
from completion import bash_completion
from constants import APP_NAME, APP_VERSION, LOG_FILENAME, get_default_image, get_state_dir
from containers import list_homes
from distrobox import ExternalToolFailure
from model.permission import PermissionStoreError, validate_container_name
from store import PermissionStore
from summary import PermissionSummarizer
from validators import grant_host_path, validate_host_path

log = logging.getLogger(__name__)


class SecureHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter that shows our structured help."""

    def format_help(self) -> str:
        lines = [
            "distrobox-secure - secure-by-default distrobox containers.",
            f"Version: {APP_VERSION}",
            "",
            "Containers start with every namespace isolated and no host access.",
            "Each grant opts into one capability.",
            "",
            "Containers:",
            "  distrobox-secure create <name> [image]        Create a container from its grants",
            "  distrobox-secure recreate <name> [image]      Remove and rebuild with current grants",
            "",
            "Permissions:",
            "  distrobox-secure grant <name> <kind> <value>  Add a grant",
            "  distrobox-secure revoke <name> <kind>         Remove all grants of a kind",
            "  distrobox-secure list [name]                  Show grants (or all containers)",
            "  distrobox-secure edit [name] [--raw]          Edit grants (TUI, or $EDITOR with --raw)",
            "",
            "Other:",
            "  distrobox-secure completion bash              Print bash completion script",
            "  distrobox-secure help                         Show this help",
            "",
            "Global options:",
            "  --config <path>                               Permissions file to use",
            "  --dry-run                                     Print distrobox commands, don't run them",
            "  --verbose                                     Also log to stderr",
            "",
            "Permission kinds:",
            "  home_folder <path>       Bind a host folder at the same path (read-write)",
            "  mount <src>:<dst>        Bind src at dst (read-write)",
            "  network host|bridge      Network access (shares the network namespace)",
            "  x11|wayland enable       Display access",
            "  audio|gpu|webcam enable  Hardware passthrough",
            "  usb enable               USB bus (shares /dev and /sys)",
            "  unshare_netns|unshare_devsys|unshare_groups|unshare_ipc|unshare_process false",
            "                           Stop isolating one namespace",
            "  unshare_all false|true   Share everything, or add --unshare-all",
            "  privileged|root|init enable",
            "  hostname <name>  cap_add <CAP>  security_opt <opt>",
            "",
            "Examples:",
            "  distrobox-secure grant dev home_folder ~/projects",
            "  distrobox-secure grant dev network host",
            "  distrobox-secure create dev",
        ]
        return "\n".join(lines) + "\n"


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        formatter_class=SecureHelpFormatter,
    )
    parser.add_argument("--config", metavar="PATH", type=Path, help=argparse.SUPPRESS)
    parser.add_argument("--dry-run", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--verbose", "-v", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("create")
    p.add_argument("name")
    p.add_argument("image", nargs="?")

    p = sub.add_parser("grant")
    p.add_argument("name")
    p.add_argument("kind")
    p.add_argument("value")

    p = sub.add_parser("revoke")
    p.add_argument("name")
    p.add_argument("kind")

    p = sub.add_parser("list")
    p.add_argument("name", nargs="?")
    p.add_argument("--names", action="store_true", help="Print container names only")

    p = sub.add_parser("recreate")
    p.add_argument("name")
    p.add_argument("image", nargs="?")

    p = sub.add_parser("edit")
    p.add_argument("name", nargs="?")
    p.add_argument("--raw", action="store_true", help="Open the permissions file in $EDITOR")

    p = sub.add_parser("completion")
    p.add_argument("shell", choices=["bash"])

    sub.add_parser("help")

    return parser


def setup_logging(verbose: bool = False) -> Path:
    """Log to $XDG_STATE_HOME/distrobox-secure/distrobox-secure.log."""
    log_dir = get_state_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME
    logging.basicConfig(
        filename=str(log_path),
        level=logging.DEBUG,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        force=True,
    )
    if verbose:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logging.getLogger().addHandler(handler)
    return log_path


# =============================================================================
# Commands
# =============================================================================

def cmd_create(store: PermissionStore, args: argparse.Namespace) -> int:
    validate_container_name(args.name)
    store.ensure_exists()
    image = args.image or get_default_image()
    plan = plan_create(store, args.name, image)
    execute_create(plan, dry_run=args.dry_run)
    if not args.dry_run:
        info(f"Container '{args.name}' created. Enter it with: distrobox enter {args.name}")
    return 0


def cmd_recreate(store: PermissionStore, args: argparse.Namespace) -> int:
    validate_container_name(args.name)
    store.ensure_exists()
    execute_recreate(
        store,
        args.name,
        args.image,
        get_default_image(),
        dry_run=args.dry_run,
    )
    if not args.dry_run:
        info(f"Container '{args.name}' recreated with current permissions")
    return 0


def cmd_grant(store: PermissionStore, args: argparse.Namespace) -> int:
    store.ensure_exists()
    record = store.grant(args.name, args.kind, args.value)
    info(f"Granted {record.kind.value}={record.value} to {record.container}")
    host_path = grant_host_path(record.kind, record.value)
    problem = validate_host_path(host_path) if host_path else None
    if problem:
        warn(f"{problem} (grant recorded anyway)")
    info(f"Run '{APP_NAME} recreate {record.container}' to apply")
    return 0


def cmd_revoke(store: PermissionStore, args: argparse.Namespace) -> int:
    removed = store.revoke(args.name, args.kind)
    if removed:
        info(f"Revoked {removed} {args.kind} grant(s) from {args.name}")
        info(f"Run '{APP_NAME} recreate {args.name}' to apply")
    else:
        warn(f"{args.name} has no {args.kind} grants")
    return 0


def cmd_list(store: PermissionStore, args: argparse.Namespace) -> int:
    if args.name is None:
        names = list(dict.fromkeys(store.containers() + list_homes()))
        if args.names:
            for name in names:
                print(name)
            return 0
        if not names:
            print("No containers configured.")
            return 0
        print("Containers:")
        for name in names:
            print(f"  {name} ({len(store.list(name))} grant(s))")
        return 0

    records = store.list(args.name)
    print(f"Permissions for {args.name}:")
    if not records:
        print("  (none - maximum isolation)")
    for record in records:
        print(f"  {record.kind.value}: {record.value}")
    print()
    plan = plan_create(store, args.name, get_default_image())
    print(PermissionSummarizer(plan.compiled).summarize())
    return 0


def cmd_edit(store: PermissionStore, args: argparse.Namespace) -> int:
    store.ensure_exists()
    if args.raw:
        editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"
        result = subprocess.run([*shlex.split(editor), str(store.path)])
        return result.returncode

    if args.name is not None:
        validate_container_name(args.name)

    from app import PermissionEditor
    PermissionEditor(store, container=args.name).run()
    return 0


def cmd_completion(store: PermissionStore, args: argparse.Namespace) -> int:
    sys.stdout.write(bash_completion())
    return 0


COMMANDS = {
    "create": cmd_create,
    "recreate": cmd_recreate,
    "grant": cmd_grant,
    "revoke": cmd_revoke,
    "list": cmd_list,
    "edit": cmd_edit,
    "completion": cmd_completion,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command in (None, "help"):
        parser.print_help()
        return 0

    log_path = setup_logging(args.verbose)
    log.debug(f"{APP_NAME} {APP_VERSION}: {args.command} (log: {log_path})")

    store = PermissionStore(args.config.expanduser() if args.config else None)

    try:
        return COMMANDS[args.command](store, args)
    except PermissionStoreError as e:
        error(str(e))
        return 1
    except ExternalToolFailure as e:
        log.error(str(e))
        print_error_box(
            str(e),
            "The container may be partially created.",
            f"Clean up and retry with: {APP_NAME} recreate <name>",
        )
        # Killed by a signal gives a negative code
        return e.returncode if e.returncode and e.returncode > 0 else 1


if __name__ == "__main__":
    sys.exit(main())
