"""Permission editor TUI, opened by `distrobox-secure edit`."""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Input, Label, Select, Static

from command_execution import CreatePlan, plan_create
from constants import APP_NAME, get_default_image
from detection import HostEnvironment, detect_host_environment
from model.permission import (
    PermissionRecord,
    PermissionStoreError,
    PermKind,
    validate_container_name,
)
from store import PermissionStore
from summary import PermissionSummarizer
from ui.ids import css
from ui.widgets import ContainerItem, RecordItem
import ui.ids as ids

log = logging.getLogger(__name__)

APP_CSS = (Path(__file__).parent / "ui" / "styles.css").read_text()


class PermissionEditor(App):
    """Browse, grant and revoke permissions, with a live command preview."""

    TITLE = "distrobox-secure"
    ENABLE_COMMAND_PALETTE = False
    CSS = APP_CSS

    BINDINGS = [
        Binding("escape", "quit", "Quit", show=True),
        Binding("ctrl+g", "grant", "Grant", show=True),
    ]

    def __init__(
        self,
        store: PermissionStore,
        container: str | None = None,
        host: HostEnvironment | None = None,
        image: str | None = None,
    ) -> None:
        super().__init__()
        self.store = store
        self.host = host if host is not None else detect_host_environment()
        self.image = image or get_default_image()
        known = store.containers()
        self.container: str | None = container or (known[0] if known else None)
        self.plan: CreatePlan | None = None

    def compose(self) -> ComposeResult:
        yield Label(f"{APP_NAME}: permission editor", id=ids.HEADER_TITLE)
        with Horizontal(id=ids.MAIN_CONTENT):
            with Vertical(id=ids.CONTAINER_PANEL):
                yield Input(
                    value=self.container or "",
                    placeholder="Container name...",
                    id=ids.CONTAINER_INPUT,
                )
                yield VerticalScroll(id=ids.CONTAINER_LIST)
            with Vertical(id=ids.RECORDS_PANEL):
                yield Label("", id=ids.RECORDS_TITLE)
                yield VerticalScroll(id=ids.RECORDS_LIST)
                with Horizontal(id=ids.GRANT_ROW):
                    yield Select(
                        [(name, name) for name in PermKind.names()],
                        value=PermKind.HOME_FOLDER.value,
                        allow_blank=False,
                        id=ids.KIND_SELECT,
                    )
                    yield Input(placeholder="Value (e.g. enable, host, /src:/dst)", id=ids.VALUE_INPUT)
                    yield Button("Grant", id=ids.GRANT_BTN, variant="success")
                yield Static("", id=ids.PREVIEW)
        yield Static("", id=ids.STATUS_BAR, markup=False)

    async def on_mount(self) -> None:
        await self.refresh_view()

    # -- state ----------------------------------------------------------------

    def set_status(self, message: str, error: bool = False) -> None:
        status = self.query_one(css(ids.STATUS_BAR), Static)
        status.update(message)
        status.set_class(error, "error")

    async def select_container(self, name: str) -> None:
        self.container = name
        self.query_one(css(ids.CONTAINER_INPUT), Input).value = name
        await self.refresh_view()

    async def refresh_view(self) -> None:
        """Rebuild the container list, record list and preview from the store."""
        names = self.store.containers()
        if self.container and self.container not in names:
            names.append(self.container)

        container_list = self.query_one(css(ids.CONTAINER_LIST), VerticalScroll)
        await container_list.remove_children()
        await container_list.mount_all(
            [ContainerItem(name, self._on_container_selected) for name in names]
        )

        records_list = self.query_one(css(ids.RECORDS_LIST), VerticalScroll)
        await records_list.remove_children()
        title = self.query_one(css(ids.RECORDS_TITLE), Label)
        preview = self.query_one(css(ids.PREVIEW), Static)

        if not self.container:
            title.update("No container selected")
            self.plan = None
            preview.update("")
            return

        records = self.store.list(self.container)
        title.update(f"{self.container}: {len(records)} record(s)")
        if records:
            await records_list.mount_all([RecordItem(r, self._on_revoke) for r in records])
        else:
            await records_list.mount(
                Static("No grants: maximum isolation", id=ids.NO_RECORDS)
            )

        self.plan = plan_create(self.store, self.container, self.image, self.host)
        summary = PermissionSummarizer(self.plan.compiled).summarize_colored()
        preview.update(_preview_text(self.plan.command, summary))

    # -- handlers -------------------------------------------------------------

    def _on_container_selected(self, name: str) -> None:
        self.run_worker(self.select_container(name), exclusive=True)

    def _on_revoke(self, record: PermissionRecord) -> None:
        removed = self.store.revoke(record.container, record.kind)
        self.set_status(f"Revoked {removed} {record.kind.value} record(s) from {record.container}")
        self.run_worker(self.refresh_view(), exclusive=True)

    @on(Input.Submitted, css(ids.CONTAINER_INPUT))
    async def on_container_submitted(self, event: Input.Submitted) -> None:
        name = event.value.strip()
        try:
            validate_container_name(name)
        except PermissionStoreError as e:
            self.set_status(str(e), error=True)
            return
        await self.select_container(name)
        self.set_status(f"Editing {name}")

    @on(Input.Submitted, css(ids.VALUE_INPUT))
    async def on_value_submitted(self, event: Input.Submitted) -> None:
        await self.action_grant()

    @on(Button.Pressed, css(ids.GRANT_BTN))
    async def on_grant_pressed(self, event: Button.Pressed) -> None:
        await self.action_grant()

    async def action_grant(self) -> None:
        if not self.container:
            self.set_status("Enter a container name first", error=True)
            return
        kind = self.query_one(css(ids.KIND_SELECT), Select).value
        value_input = self.query_one(css(ids.VALUE_INPUT), Input)
        value = value_input.value.strip()
        if not value:
            self.set_status("Enter a value to grant", error=True)
            return
        try:
            record = self.store.grant(self.container, str(kind), value)
        except PermissionStoreError as e:
            log.info(f"Grant rejected: {e}")
            self.set_status(str(e), error=True)
            return
        value_input.value = ""
        self.set_status(f"Granted {record.to_line()}")
        await self.refresh_view()


def _preview_text(command: list[str], summary: str) -> str:
    quoted = shlex.join(command).replace("[", r"\[")
    return f"{summary}\n\n[bold]Command:[/bold]\n[dim]{quoted}[/dim]"
