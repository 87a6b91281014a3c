"""Tests for the create and recreate flows."""

from unittest.mock import patch

import pytest

from command_execution import execute_create, execute_recreate, plan_create
from distrobox import ContainerInfo, ExternalToolFailure


class TestPlanCreate:
    """Test plan_create() function."""

    def test_command_uses_isolated_home(self, populated_store, host, isolated_xdg):
        plan = plan_create(populated_store, "dev", "fedora:40", host)
        home = plan.command[plan.command.index("--home") + 1]
        assert home == str(isolated_xdg / "data" / "distrobox-secure" / "homes" / "dev")

    def test_records_compiled_in_order(self, populated_store, host):
        plan = plan_create(populated_store, "dev", "fedora:40", host)
        wrapped = [a for a in plan.command if a.startswith("--volume") or a.startswith("--network")]
        assert wrapped == [
            "--volume /home/user/projects:/home/user/projects:rw",
            "--network host",
            "--volume /srv/data:/data:rw",
        ]

    def test_network_grant_drops_netns(self, populated_store, host):
        plan = plan_create(populated_store, "dev", "img", host)
        assert "--unshare-netns" not in plan.command
        assert "--unshare-process" in plan.command

    def test_unknown_container_fully_isolated(self, store, host):
        plan = plan_create(store, "fresh", "img", host)
        assert plan.compiled.unshare_flags == [
            "--unshare-netns",
            "--unshare-devsys",
            "--unshare-groups",
            "--unshare-ipc",
            "--unshare-process",
        ]
        assert plan.compiled.permission_flags == []

    def test_plan_touches_nothing(self, store, host, isolated_xdg):
        plan_create(store, "fresh", "img", host)
        assert not (isolated_xdg / "data").exists()

    def test_summary(self, populated_store, host):
        plan = plan_create(populated_store, "web", "img", host)
        assert "IPC namespace" in plan.summary()


class TestExecuteCreate:
    """Test execute_create() function."""

    @patch("command_execution.create_container")
    def test_creates_home_then_runs(self, mock_create, store, host, isolated_xdg, capsys):
        plan = plan_create(store, "dev", "img", host)
        execute_create(plan)
        home = isolated_xdg / "data" / "distrobox-secure" / "homes" / "dev"
        assert home.is_dir()
        assert home.stat().st_mode & 0o777 == 0o700
        mock_create.assert_called_once_with(plan.command)
        assert "Executing:" in capsys.readouterr().out

    @patch("command_execution.create_container")
    def test_dry_run_prints_only(self, mock_create, store, host, isolated_xdg, capsys):
        plan = plan_create(store, "dev", "img", host)
        execute_create(plan, dry_run=True)
        mock_create.assert_not_called()
        assert not (isolated_xdg / "data").exists()
        out = capsys.readouterr().out
        assert "Would execute:" in out
        assert "distrobox create --name dev" in out

    @patch("command_execution.create_container")
    def test_failure_propagates(self, mock_create, store, host):
        mock_create.side_effect = ExternalToolFailure(["distrobox", "create"], 1)
        with pytest.raises(ExternalToolFailure):
            execute_create(plan_create(store, "dev", "img", host))


class TestExecuteRecreate:
    """Test execute_recreate() image selection and teardown."""

    @patch("command_execution.create_container")
    @patch("command_execution.teardown_container")
    def test_reuses_existing_image(self, mock_teardown, mock_create, store, host):
        mock_teardown.return_value = ContainerInfo("abc", "dev", "Up", "debian:12")
        plan = execute_recreate(store, "dev", None, "fedora:40", host)
        assert plan.image == "debian:12"
        mock_teardown.assert_called_once_with("dev")
        mock_create.assert_called_once()

    @patch("command_execution.create_container")
    @patch("command_execution.teardown_container", return_value=None)
    def test_falls_back_to_default_image(self, mock_teardown, mock_create, store, host):
        plan = execute_recreate(store, "dev", None, "fedora:40", host)
        assert plan.image == "fedora:40"

    @patch("command_execution.create_container")
    @patch("command_execution.teardown_container")
    def test_explicit_image_wins(self, mock_teardown, mock_create, store, host):
        mock_teardown.return_value = ContainerInfo("abc", "dev", "Up", "debian:12")
        plan = execute_recreate(store, "dev", "arch:latest", "fedora:40", host)
        assert plan.image == "arch:latest"

    @patch("command_execution.create_container")
    @patch("command_execution.teardown_container")
    def test_picks_up_new_grants(self, mock_teardown, mock_create, store, host):
        mock_teardown.return_value = None
        store.grant("dev", "gpu", "enable")
        plan = execute_recreate(store, "dev", None, "img", host)
        assert "--device /dev/dri" in plan.command

    @patch("command_execution.create_container")
    @patch("command_execution.teardown_container")
    @patch("command_execution.find_container")
    def test_dry_run_does_not_tear_down(self, mock_find, mock_teardown, mock_create, store, host):
        mock_find.return_value = ContainerInfo("abc", "dev", "Up", "debian:12")
        plan = execute_recreate(store, "dev", None, "img", host, dry_run=True)
        assert plan.image == "debian:12"
        mock_teardown.assert_not_called()
        mock_create.assert_not_called()

    @patch("command_execution.create_container")
    @patch("command_execution.find_container")
    def test_dry_run_tolerates_list_failure(self, mock_find, mock_create, store, host):
        mock_find.side_effect = ExternalToolFailure(["distrobox", "list"], None)
        plan = execute_recreate(store, "dev", None, "img", host, dry_run=True)
        assert plan.image == "img"
