"""Permission editor widgets: RecordItem and ContainerItem."""

from typing import Callable

from textual import on
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, Label

from model.permission import PermissionRecord


class RecordItem(Container):
    """One permission record with a revoke button.

    Revoking removes every record of the same kind for the container, so
    the button is labelled with the kind.
    """

    def __init__(self, record: PermissionRecord, on_revoke: Callable[[PermissionRecord], None]) -> None:
        super().__init__()
        self.record = record
        self._on_revoke = on_revoke

    def compose(self) -> ComposeResult:
        with Horizontal(classes="record-row"):
            yield Label(self.record.kind.value, classes="record-kind")
            yield Label(self.record.value, classes="record-value", markup=False)
            yield Button(f"revoke {self.record.kind.value}", classes="record-revoke-btn", variant="error")

    @on(Button.Pressed, ".record-revoke-btn")
    def on_revoke_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self._on_revoke(self.record)


class ContainerItem(Container):
    """A container name in the picker."""

    def __init__(self, name: str, on_select: Callable[[str], None]) -> None:
        super().__init__()
        self.container_name = name
        self._on_select = on_select

    def compose(self) -> ComposeResult:
        yield Button(self.container_name, classes="container-btn", variant="primary")

    @on(Button.Pressed, ".container-btn")
    def on_select_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self._on_select(self.container_name)
