"""Tests for the permission editor TUI.

These drive the app through Textual's test pilot and check that each control
reaches the store, catching wiring problems where handlers never fire.
"""

import pytest

from textual.containers import VerticalScroll
from textual.widgets import Button, Input, Select, Static

from app import PermissionEditor
from model import PermKind
from ui.widgets import ContainerItem, RecordItem
import ui.ids as ids
from ui.ids import css


def make_app(store, host, container=None):
    return PermissionEditor(store, container=container, host=host, image="fedora:40")


class TestInitialState:
    """Test what the editor shows on startup."""

    @pytest.mark.asyncio
    async def test_shows_records_for_container(self, populated_store, host):
        app = make_app(populated_store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            items = app.query(RecordItem)
            assert [item.record.kind for item in items] == [
                PermKind.HOME_FOLDER,
                PermKind.NETWORK,
                PermKind.GPU,
                PermKind.MOUNT,
            ]

    @pytest.mark.asyncio
    async def test_defaults_to_first_known_container(self, populated_store, host):
        app = make_app(populated_store, host)
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.container == "dev"
            names = [item.container_name for item in app.query(ContainerItem)]
            assert names == ["dev", "web"]

    @pytest.mark.asyncio
    async def test_empty_store(self, store, host):
        app = make_app(store, host)
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.container is None
            assert len(app.query(RecordItem)) == 0
            assert app.plan is None

    @pytest.mark.asyncio
    async def test_new_container_shows_isolation_notice(self, store, host):
        app = make_app(store, host, container="fresh")
        async with app.run_test() as pilot:
            await pilot.pause()
            assert len(app.query(css(ids.NO_RECORDS))) == 1

    @pytest.mark.asyncio
    async def test_preview_contains_command(self, populated_store, host):
        app = make_app(populated_store, host, container="web")
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.plan.command[:4] == ["distrobox", "create", "--name", "web"]
            assert "--unshare-netns" not in app.plan.command


class TestGrantEvents:
    """Test the grant form."""

    @pytest.mark.asyncio
    async def test_grant_button_writes_record(self, store, host):
        app = make_app(store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one(css(ids.KIND_SELECT), Select).value = "network"
            app.query_one(css(ids.VALUE_INPUT), Input).value = "host"
            app.query_one(css(ids.GRANT_BTN), Button).press()
            await pilot.pause()
            await pilot.pause()

            assert [(r.kind, r.value) for r in store.list("dev")] == [(PermKind.NETWORK, "host")]
            assert app.query_one(css(ids.VALUE_INPUT), Input).value == ""
            assert len(app.query(RecordItem)) == 1

    @pytest.mark.asyncio
    async def test_value_enter_grants(self, store, host):
        app = make_app(store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            value_input = app.query_one(css(ids.VALUE_INPUT), Input)
            value_input.value = "/srv/projects"
            await value_input.action_submit()
            await pilot.pause()

            records = store.list("dev")
            assert records[0].kind is PermKind.HOME_FOLDER
            assert records[0].value == "/srv/projects"

    @pytest.mark.asyncio
    async def test_empty_value_rejected(self, store, host):
        app = make_app(store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one(css(ids.GRANT_BTN), Button).press()
            await pilot.pause()
            assert store.list("dev") == []
            assert app.query_one(css(ids.STATUS_BAR), Static).has_class("error")

    @pytest.mark.asyncio
    async def test_grant_without_container_rejected(self, store, host):
        app = make_app(store, host)
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one(css(ids.VALUE_INPUT), Input).value = "enable"
            await app.action_grant()
            assert store.containers() == []
            assert app.query_one(css(ids.STATUS_BAR), Static).has_class("error")


class TestRevokeEvents:
    """Test revoke buttons on record rows."""

    @pytest.mark.asyncio
    async def test_revoke_button_removes_kind(self, populated_store, host):
        populated_store.grant("dev", "network", "bridge")
        app = make_app(populated_store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            network_item = next(i for i in app.query(RecordItem) if i.record.kind is PermKind.NETWORK)
            network_item.query_one(".record-revoke-btn", Button).press()
            await pilot.pause()
            await pilot.pause()

            kinds = [r.kind for r in populated_store.list("dev")]
            assert PermKind.NETWORK not in kinds
            assert [i.record.kind for i in app.query(RecordItem)] == kinds


class TestContainerEvents:
    """Test switching containers."""

    @pytest.mark.asyncio
    async def test_container_input_switches(self, populated_store, host):
        app = make_app(populated_store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            container_input = app.query_one(css(ids.CONTAINER_INPUT), Input)
            container_input.value = "web"
            await container_input.action_submit()
            await pilot.pause()

            assert app.container == "web"
            assert len(app.query(RecordItem)) == 2
            assert app.plan.name == "web"

    @pytest.mark.asyncio
    async def test_invalid_container_name_rejected(self, populated_store, host):
        app = make_app(populated_store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            container_input = app.query_one(css(ids.CONTAINER_INPUT), Input)
            container_input.value = "bad name"
            await container_input.action_submit()
            await pilot.pause()

            assert app.container == "dev"
            assert app.query_one(css(ids.STATUS_BAR), Static).has_class("error")

    @pytest.mark.asyncio
    async def test_container_button_selects(self, populated_store, host):
        app = make_app(populated_store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            web_item = next(i for i in app.query(ContainerItem) if i.container_name == "web")
            web_item.query_one(".container-btn", Button).press()
            await pilot.pause()
            await pilot.pause()

            assert app.container == "web"
            container_list = app.query_one(css(ids.CONTAINER_LIST), VerticalScroll)
            assert len(container_list.query(ContainerItem)) == 2


class TestMarkupInValues:
    """User values are shown literally, never parsed as markup."""

    @pytest.mark.asyncio
    async def test_bracketed_value_renders(self, store, host):
        store.grant("dev", "security_opt", "label=[/x]")
        app = make_app(store, host, container="dev")
        async with app.run_test() as pilot:
            await pilot.pause()
            value_input = app.query_one(css(ids.VALUE_INPUT), Input)
            value_input.value = "[/bold]box"
            app.query_one(css(ids.KIND_SELECT), Select).value = "hostname"
            app.query_one(css(ids.GRANT_BTN), Button).press()
            await pilot.pause()
            await pilot.pause()

            assert [r.value for r in store.list("dev")] == ["label=[/x]", "[/bold]box"]
            assert len(app.query(RecordItem)) == 2
            assert not app.query_one(css(ids.STATUS_BAR), Static).has_class("error")
