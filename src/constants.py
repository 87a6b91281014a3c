"""Shared constants and XDG paths for distrobox-secure."""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "distrobox-secure"
APP_VERSION = "1.0.0"

DEFAULT_IMAGE = "registry.fedoraproject.org/fedora-toolbox:latest"

# Environment overrides
CONFIG_ENV_VAR = "DISTROBOX_SECURE_CONFIG"
IMAGE_ENV_VAR = "DISTROBOX_SECURE_IMAGE"

CONFIG_FILENAME = "permissions.conf"
LOG_FILENAME = "distrobox-secure.log"

# Container names become podman names and directory names
CONTAINER_NAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_.-]*$"

CONFIG_HEADER = """\
# distrobox-secure permissions
#
# One grant per line: container:kind:value
# Containers start fully isolated; each line opts into one capability.
#
# Examples:
#   dev:home_folder:/home/me/projects
#   dev:mount:/srv/data:/data
#   dev:network:host
#   dev:gpu:enable
#   dev:unshare_ipc:false
"""


def _xdg_dir(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    return Path(value) if value else fallback


def get_config_dir() -> Path:
    """~/.config/distrobox-secure (honours XDG_CONFIG_HOME)."""
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config") / APP_NAME


def get_data_dir() -> Path:
    """~/.local/share/distrobox-secure (honours XDG_DATA_HOME)."""
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share") / APP_NAME


def get_state_dir() -> Path:
    """~/.local/state/distrobox-secure (honours XDG_STATE_HOME)."""
    return _xdg_dir("XDG_STATE_HOME", Path.home() / ".local" / "state") / APP_NAME


def get_config_path() -> Path:
    """Location of the permissions file, $DISTROBOX_SECURE_CONFIG first."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / CONFIG_FILENAME


def get_default_image() -> str:
    return os.environ.get(IMAGE_ENV_VAR) or DEFAULT_IMAGE
