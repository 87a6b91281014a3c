"""Widget ID constants for the permission editor.

Using constants prevents typos and makes refactoring easier.
"""


def css(widget_id: str) -> str:
    """Return a CSS selector for a widget ID.

    Usage:
        from ui.ids import css, STATUS_BAR
        self.query_one(css(STATUS_BAR), Static)
    """
    return f"#{widget_id}"

# Layout
HEADER_TITLE = "header-title"
MAIN_CONTENT = "main-content"
STATUS_BAR = "status-bar"

# Container picker
CONTAINER_PANEL = "container-panel"
CONTAINER_INPUT = "container-input"
CONTAINER_LIST = "container-list"

# Records
RECORDS_PANEL = "records-panel"
RECORDS_TITLE = "records-title"
RECORDS_LIST = "records-list"
NO_RECORDS = "no-records"

# Grant form
GRANT_ROW = "grant-row"
KIND_SELECT = "kind-select"
VALUE_INPUT = "value-input"
GRANT_BTN = "grant-btn"

# Preview
PREVIEW = "preview"
