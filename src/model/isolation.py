"""Namespace isolation state folded from unshare_* records."""

from __future__ import annotations

from dataclasses import dataclass

# Emission order matters: netns, devsys, groups, ipc, process, then all
NAMESPACES = ("netns", "devsys", "groups", "ipc", "process")

UNSHARE_FLAGS = {
    "netns": "--unshare-netns",
    "devsys": "--unshare-devsys",
    "groups": "--unshare-groups",
    "ipc": "--unshare-ipc",
    "process": "--unshare-process",
    "all": "--unshare-all",
}

NAMESPACE_SUMMARIES = {
    "netns": "Network namespace (own network stack, no host sockets)",
    "devsys": "Devices and /sys (no host device nodes)",
    "groups": "Supplementary groups (host groups not visible)",
    "ipc": "IPC namespace (no host shared memory or semaphores)",
    "process": "PID namespace (cannot see or signal host processes)",
}


@dataclass
class IsolationState:
    """Five per-namespace switches plus the unshare-all master switch.

    The five and the master are independent: setting the master does not
    touch the five, and only an explicit unshare_all:false clears them.
    """

    netns: bool = True
    devsys: bool = True
    groups: bool = True
    ipc: bool = True
    process: bool = True
    all: bool = False

    def share(self, namespace: str) -> None:
        """Stop isolating one namespace."""
        if namespace not in NAMESPACES:
            raise KeyError(namespace)
        setattr(self, namespace, False)

    def share_everything(self) -> None:
        for namespace in NAMESPACES:
            setattr(self, namespace, False)
        self.all = False

    def isolated(self) -> list[str]:
        """Namespaces still isolated, in emission order."""
        return [ns for ns in NAMESPACES if getattr(self, ns)]

    def to_args(self) -> list[str]:
        args = [UNSHARE_FLAGS[ns] for ns in self.isolated()]
        if self.all:
            args.append(UNSHARE_FLAGS["all"])
        return args
