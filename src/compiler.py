"""Permission-to-flag compiler.

Folds the ordered permission records of one container, starting from full
namespace isolation, into the unshare flags and permission flags passed to
`distrobox create`. Values that make no sense for their kind are dropped
without emitting a flag, so partially written configs keep working.
"""

from __future__ import annotations

import logging
from typing import Callable

from detection import HostEnvironment, detect_host_environment
from model.flags import CompiledFlags, PermissionFlag
from model.isolation import IsolationState
from model.permission import PermissionRecord, PermKind

log = logging.getLogger(__name__)

ENABLE_VALUES = {"enable", "enabled", "true", "yes", "1"}
DISABLE_VALUES = {"false", "no", "0", "disable", "disabled"}
NETWORK_MODES = {"host", "bridge"}

X11_SOCKET_DIR = "/tmp/.X11-unix"
USB_BUS_DIR = "/dev/bus/usb"
SOUND_DEVICE = "/dev/snd"
DRI_DEVICE = "/dev/dri"
NVIDIA_DEVICE = "nvidia.com/gpu=all"
WEBCAM_DEVICE = "/dev/video0"


def is_enable(value: str) -> bool:
    return value.strip().lower() in ENABLE_VALUES


def is_disable(value: str) -> bool:
    return value.strip().lower() in DISABLE_VALUES


def split_mount(value: str) -> tuple[str, str] | None:
    """Split `src:dst` on the first colon; dst keeps any further colons.

    Returns None when there is no colon or either side is empty.
    """
    src, sep, dst = value.partition(":")
    if not sep or not src or not dst:
        return None
    return src, dst


def _volume(src: str, dst: str) -> tuple[str, ...]:
    return ("--volume", f"{src}:{dst}:rw")


# =============================================================================
# Handlers
# =============================================================================
# Each handler gets the record, the isolation state to mutate, and the host
# environment. It returns the flags to append, or None if the value is
# malformed for the kind.

Handler = Callable[[PermissionRecord, IsolationState, HostEnvironment], list[PermissionFlag] | None]


def _home_folder(record, state, host):
    path = record.value.strip()
    if not path:
        return None
    return [PermissionFlag(record.kind, _volume(path, path))]


def _mount(record, state, host):
    parts = split_mount(record.value)
    if parts is None:
        return None
    src, dst = parts
    return [PermissionFlag(record.kind, _volume(src, dst))]


def _network(record, state, host):
    mode = record.value.strip().lower()
    if mode not in NETWORK_MODES:
        return None
    # A network grant always shares the host network namespace
    state.netns = False
    return [PermissionFlag(record.kind, ("--network", mode))]


def _x11(record, state, host):
    if not is_enable(record.value):
        return None
    return [
        PermissionFlag(record.kind, _volume(X11_SOCKET_DIR, X11_SOCKET_DIR)),
        PermissionFlag(record.kind, ("--env", f"DISPLAY={host.display}")),
        PermissionFlag(record.kind, ("--env", f"XAUTHORITY={host.xauthority}")),
    ]


def _wayland(record, state, host):
    if not is_enable(record.value):
        return None
    return [
        PermissionFlag(record.kind, _volume(host.wayland_socket, host.wayland_socket)),
        PermissionFlag(record.kind, ("--env", f"WAYLAND_DISPLAY={host.wayland_display}")),
    ]


def _audio(record, state, host):
    if not is_enable(record.value):
        return None
    return [
        PermissionFlag(record.kind, _volume(host.pulse_socket, host.pulse_socket)),
        PermissionFlag(record.kind, ("--device", SOUND_DEVICE)),
    ]


def _gpu(record, state, host):
    if not is_enable(record.value):
        return None
    return [
        PermissionFlag(record.kind, ("--device", DRI_DEVICE)),
        PermissionFlag(record.kind, ("--device", NVIDIA_DEVICE)),
    ]


def _usb(record, state, host):
    if not is_enable(record.value):
        return None
    # USB passthrough needs host device nodes
    state.devsys = False
    return [PermissionFlag(record.kind, _volume(USB_BUS_DIR, USB_BUS_DIR))]


def _webcam(record, state, host):
    if not is_enable(record.value):
        return None
    return [PermissionFlag(record.kind, ("--device", WEBCAM_DEVICE))]


def _unshare(namespace: str) -> Handler:
    def handler(record, state, host):
        if not is_disable(record.value):
            return None
        state.share(namespace)
        return []
    return handler


def _unshare_all(record, state, host):
    if is_disable(record.value):
        state.share_everything()
        return []
    if is_enable(record.value):
        state.all = True
        return []
    return None


def _switch(*tokens: str, native: bool = False) -> Handler:
    def handler(record, state, host):
        if not is_enable(record.value):
            return None
        return [PermissionFlag(record.kind, tokens, native=native)]
    return handler


def _with_value(flag: str, native: bool = False) -> Handler:
    def handler(record, state, host):
        value = record.value.strip()
        if not value:
            return None
        return [PermissionFlag(record.kind, (flag, value), native=native)]
    return handler


HANDLERS: dict[PermKind, Handler] = {
    PermKind.HOME_FOLDER: _home_folder,
    PermKind.MOUNT: _mount,
    PermKind.NETWORK: _network,
    PermKind.X11: _x11,
    PermKind.WAYLAND: _wayland,
    PermKind.AUDIO: _audio,
    PermKind.GPU: _gpu,
    PermKind.USB: _usb,
    PermKind.WEBCAM: _webcam,
    PermKind.UNSHARE_NETNS: _unshare("netns"),
    PermKind.UNSHARE_DEVSYS: _unshare("devsys"),
    PermKind.UNSHARE_GROUPS: _unshare("groups"),
    PermKind.UNSHARE_IPC: _unshare("ipc"),
    PermKind.UNSHARE_PROCESS: _unshare("process"),
    PermKind.UNSHARE_ALL: _unshare_all,
    PermKind.PRIVILEGED: _switch("--privileged"),
    PermKind.ROOT: _switch("--root", native=True),
    PermKind.INIT: _switch("--init", native=True),
    PermKind.HOSTNAME: _with_value("--hostname", native=True),
    PermKind.CAP_ADD: _with_value("--cap-add"),
    PermKind.SECURITY_OPT: _with_value("--security-opt"),
}

_unhandled = set(PermKind) - set(HANDLERS)
if _unhandled:
    raise RuntimeError(f"No compiler handler for: {sorted(k.value for k in _unhandled)}")


# =============================================================================
# Compiler
# =============================================================================

class FlagCompiler:
    """Compiles permission records into distrobox flags."""

    def __init__(self, host: HostEnvironment | None = None) -> None:
        self.host = host if host is not None else detect_host_environment()

    def compile(self, records: list[PermissionRecord]) -> CompiledFlags:
        """Fold records in order and emit flags from the final state.

        Unshare flags come from the state after every record has been
        applied, so a later record can't resurrect isolation that an
        earlier network or usb grant removed.
        """
        result = CompiledFlags()
        state = result.isolation

        for record in records:
            flags = HANDLERS[record.kind](record, state, self.host)
            if flags is None:
                log.warning(
                    f"Ignoring {record.kind.value} value {record.value!r} for {record.container}"
                )
                result.ignored.append(record)
                continue
            result.permission_flags.extend(flags)

        result.unshare_flags = state.to_args()
        return result


def compile_permissions(
    records: list[PermissionRecord], host: HostEnvironment | None = None
) -> tuple[list[str], list[PermissionFlag]]:
    """Return (unshare_flags, permission_flags) for one container's records."""
    compiled = FlagCompiler(host).compile(records)
    return compiled.unshare_flags, compiled.permission_flags
