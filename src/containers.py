"""Per-container state on the host: isolated home directories."""

from __future__ import annotations

import logging
from pathlib import Path

from constants import get_data_dir
from model.permission import validate_container_name

log = logging.getLogger(__name__)


def get_homes_dir() -> Path:
    """Root of all isolated homes: ~/.local/share/distrobox-secure/homes/."""
    return get_data_dir() / "homes"


def get_home_dir(name: str) -> Path:
    """Isolated home for one container.

    The container never sees the real $HOME unless a home_folder or mount
    grant exposes part of it.
    """
    validate_container_name(name)
    return get_homes_dir() / name


def ensure_home_dir(name: str) -> Path:
    """Create the isolated home (mode 0700) if needed and return it."""
    home = get_home_dir(name)
    if not home.exists():
        home.mkdir(parents=True, mode=0o700)
        log.info(f"Created isolated home {home}")
    return home


def list_homes() -> list[str]:
    homes = get_homes_dir()
    if not homes.exists():
        return []
    return sorted(p.name for p in homes.iterdir() if p.is_dir())
