from __future__ import annotations

__all__ = ["IDs", "header_column_id"]


class IDs:
    class Store:
        REVISION = "dataset-revision"

    class Control:
        # Toolbar
        FILE_PATH_INPUT = "file-path-input"
        SAVE_BTN = "save-btn"
        LOAD_BTN = "load-btn"
        RESET_BTN = "reset-btn"
        ADD_COLUMN_BTN = "add-column-btn"
        ADD_ROW_BTN = "add-row-btn"

        # Table
        DATA_TABLE = "data-table"

        # Row actions (selected row)
        ROW_PREV_MONTH_BTN = "row-prev-month-btn"
        ROW_NEXT_MONTH_BTN = "row-next-month-btn"
        ROW_TOGGLE_HIDDEN_BTN = "row-toggle-hidden-btn"
        ROW_DELETE_BTN = "row-delete-btn"
        ROW_SELECTION_TEXT = "row-selection-text"

        # Column actions
        COLUMN_SELECT = "column-select"
        COLUMN_RENAME_INPUT = "column-rename-input"
        COLUMN_RENAME_BTN = "column-rename-btn"
        COLUMN_REMOVE_BTN = "column-remove-btn"

        # Chart + messages
        MAIN_GRAPH = "main-graph"
        MESSAGES = "messages"


DATE_COLUMN_ID = "date"


def header_column_id(position: int) -> str:
    """DataTable column id for the header at `position` (names may clash with 'date')."""
    return f"h{position}"
