"""UI module containing the permission editor widgets and styles."""

from ui.widgets import ContainerItem, RecordItem
from ui import ids

__all__ = [
    # Widgets
    "ContainerItem",
    "RecordItem",
]
