"""Human-readable summaries of compiled permissions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from distrobox import HARDENING_FLAGS
from model.isolation import NAMESPACE_SUMMARIES, NAMESPACES
from model.permission import PermKind

if TYPE_CHECKING:
    from model.flags import CompiledFlags


# Tailwind CSS 400-level palette - designed for dark backgrounds
COLORS = [
    "#F472B6",  # pink-400 (warm)
    "#FBBF24",  # amber-400 (warm)
    "#34D399",  # emerald-400 (cool)
    "#A78BFA",  # violet-400 (cool)
]
DEFAULT_COLOR = "#6B7280"  # gray-500 (clearly inactive)

KIND_LABELS: dict[PermKind, str] = {
    PermKind.HOME_FOLDER: "Host folder (read-write)",
    PermKind.MOUNT: "Mount (read-write)",
    PermKind.NETWORK: "Network",
    PermKind.X11: "X11 display",
    PermKind.WAYLAND: "Wayland display",
    PermKind.AUDIO: "Audio",
    PermKind.GPU: "GPU",
    PermKind.USB: "USB devices",
    PermKind.WEBCAM: "Webcam",
    PermKind.PRIVILEGED: "Privileged container",
    PermKind.ROOT: "Rootful container",
    PermKind.INIT: "Init system",
    PermKind.HOSTNAME: "Hostname",
    PermKind.CAP_ADD: "Extra capability",
    PermKind.SECURITY_OPT: "Security option",
}

HARDENING_SUMMARIES = {
    "no-new-privileges": "Cannot gain privileges through setuid binaries",
    "ALL": "All Linux capabilities dropped",
    "--read-only-tmpfs": "Temporary filesystems mounted fresh, discarded on exit",
}


class PermissionSummarizer:
    """Explains what a compiled permission set lets the container do."""

    def __init__(self, compiled: CompiledFlags) -> None:
        self.compiled = compiled

    def _sections(self) -> list[tuple[str, list[str], bool]]:
        """(heading, lines, active) per section, in command order."""
        sections = []
        state = self.compiled.isolation

        isolated = [NAMESPACE_SUMMARIES[ns] for ns in NAMESPACES if getattr(state, ns)]
        shared = [NAMESPACE_SUMMARIES[ns] for ns in NAMESPACES if not getattr(state, ns)]
        if state.all:
            isolated.append("Everything else distrobox can unshare (--unshare-all)")
        if isolated:
            sections.append(("Isolated from host:", isolated, True))
        if shared:
            sections.append(("Shared with host:", shared, False))

        granted = []
        for flag in self.compiled.permission_flags:
            label = KIND_LABELS.get(flag.kind, flag.kind.value)
            granted.append(f"{label}: {flag.as_text()}")
        if granted:
            sections.append((f"Granted ({len(granted)}):", granted, True))

        hardening = [HARDENING_SUMMARIES[tokens[-1]] for tokens in HARDENING_FLAGS]
        sections.append(("Always enforced:", hardening, True))

        if self.compiled.ignored:
            ignored = [r.to_line() for r in self.compiled.ignored]
            sections.append(("Ignored (value not understood):", ignored, False))

        return sections

    def summarize(self) -> str:
        """Plain-text summary for the terminal."""
        lines: list[str] = []
        for heading, items, _active in self._sections():
            lines.append(f"• {heading}")
            for item in items:
                lines.append(f"  - {item}")
        return "\n".join(lines)

    def summarize_colored(self) -> str:
        """Summary with Rich color markup, rotating colors by section."""
        lines: list[str] = []
        color_idx = 0
        for heading, items, active in self._sections():
            if active:
                color = COLORS[color_idx % len(COLORS)]
                color_idx += 1
            else:
                color = DEFAULT_COLOR
            lines.append(f"[{color}]• {heading}[/]")
            for item in items:
                lines.append(f"[{color}]  - {_escape(item)}[/]")
        return "\n".join(lines)


def _escape(text: str) -> str:
    """Escape Rich markup brackets in user-supplied values."""
    return text.replace("[", r"\[")
