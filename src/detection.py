"""Host detection: the display/audio environment forwarded by grants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

DEFAULT_DISPLAY = ":0"
DEFAULT_WAYLAND_DISPLAY = "wayland-0"


@dataclass(frozen=True)
class HostEnvironment:
    """Snapshot of the host values the x11/wayland/audio grants need.

    Taken once per invocation so compiling the same records twice in one
    run gives the same flags.
    """

    display: str = DEFAULT_DISPLAY
    xauthority: str = ""
    wayland_display: str = DEFAULT_WAYLAND_DISPLAY
    runtime_dir: str = "/run/user/1000"

    @property
    def wayland_socket(self) -> str:
        return str(Path(self.runtime_dir) / self.wayland_display)

    @property
    def pulse_socket(self) -> str:
        return str(Path(self.runtime_dir) / "pulse" / "native")


def detect_host_environment(environ: Mapping[str, str] | None = None) -> HostEnvironment:
    """Read the display/audio environment, falling back to common defaults.

    XAUTHORITY may legitimately be empty (e.g. under Wayland with XWayland
    auth disabled); it is forwarded as an empty string in that case.
    """
    env = os.environ if environ is None else environ
    uid = os.getuid()
    return HostEnvironment(
        display=env.get("DISPLAY") or DEFAULT_DISPLAY,
        xauthority=env.get("XAUTHORITY", ""),
        wayland_display=env.get("WAYLAND_DISPLAY") or DEFAULT_WAYLAND_DISPLAY,
        runtime_dir=env.get("XDG_RUNTIME_DIR") or f"/run/user/{uid}",
    )
