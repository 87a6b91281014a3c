"""Shared fixtures for distrobox-secure tests."""

import pytest

from detection import HostEnvironment
from store import PermissionStore


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path, monkeypatch):
    """Point every XDG directory at tmp_path so tests never touch $HOME."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.delenv("DISTROBOX_SECURE_CONFIG", raising=False)
    monkeypatch.delenv("DISTROBOX_SECURE_IMAGE", raising=False)
    return tmp_path


@pytest.fixture
def mock_env(monkeypatch):
    """Clean display environment for detection tests."""
    monkeypatch.delenv("DISPLAY", raising=False)
    monkeypatch.delenv("WAYLAND_DISPLAY", raising=False)
    monkeypatch.delenv("XDG_RUNTIME_DIR", raising=False)
    monkeypatch.delenv("XAUTHORITY", raising=False)


@pytest.fixture
def host():
    """Fixed host environment so compiled flags are deterministic."""
    return HostEnvironment(
        display=":1",
        xauthority="/run/user/1000/xauth_abc",
        wayland_display="wayland-1",
        runtime_dir="/run/user/1000",
    )


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "permissions.conf"


@pytest.fixture
def store(config_path):
    """Empty store backed by a temp file."""
    return PermissionStore(config_path)


@pytest.fixture
def populated_store(store):
    """Store with records for two containers, interleaved."""
    store.grant("dev", "home_folder", "/home/user/projects")
    store.grant("web", "network", "host")
    store.grant("dev", "network", "host")
    store.grant("dev", "gpu", "enable")
    store.grant("web", "unshare_ipc", "false")
    store.grant("dev", "mount", "/srv/data:/data")
    return store

