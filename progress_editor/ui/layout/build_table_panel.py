from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dash_table, dcc, html

from progress_editor.services.persistence import DEFAULT_SAVE_FILENAME
from progress_editor.ui.ids import IDs

_FONT = 'system-ui, -apple-system, BlinkMacSystemFont, "SF Pro Text", "Segoe UI", sans-serif'


def _toolbar() -> html.Div:
    return html.Div(
        [
            dbc.Input(
                id=IDs.Control.FILE_PATH_INPUT,
                type="text",
                placeholder=DEFAULT_SAVE_FILENAME,
                size="sm",
                style={"maxWidth": "320px"},
            ),
            dbc.Button("Save", id=IDs.Control.SAVE_BTN, color="secondary", outline=True, size="sm"),
            dbc.Button("Load", id=IDs.Control.LOAD_BTN, color="secondary", outline=True, size="sm"),
            dbc.Button("Reset", id=IDs.Control.RESET_BTN, color="secondary", outline=True, size="sm"),
            dbc.Button("Add Column", id=IDs.Control.ADD_COLUMN_BTN, color="secondary", outline=True, size="sm"),
            dbc.Button("Add Row", id=IDs.Control.ADD_ROW_BTN, color="secondary", outline=True, size="sm"),
        ],
        className="d-flex gap-2 align-items-center ms-auto",
    )


def _data_table() -> dash_table.DataTable:
    return dash_table.DataTable(
        id=IDs.Control.DATA_TABLE,
        data=[],
        columns=[],
        editable=True,
        row_selectable="single",
        selected_rows=[],
        style_table={"overflowX": "auto"},
        style_as_list_view=True,
        style_cell={
            "fontFamily": _FONT,
            "fontSize": "13px",
            "padding": "6px 8px",
            "border": "none",
            "textAlign": "left",
            "minWidth": "90px",
        },
        style_header={
            "fontFamily": _FONT,
            "fontSize": "13px",
            "fontWeight": "600",
            "backgroundColor": "#f3f4f6",
            "borderBottom": "1px solid #e5e7eb",
        },
        style_data={"borderBottom": "1px solid #e5e7eb"},
        style_data_conditional=[],
    )


def _row_actions() -> html.Div:
    return html.Div(
        [
            html.Small("No row selected", id=IDs.Control.ROW_SELECTION_TEXT, className="text-muted me-2"),
            dbc.Button("‹ Month", id=IDs.Control.ROW_PREV_MONTH_BTN, size="sm", outline=True, disabled=True),
            dbc.Button("Month ›", id=IDs.Control.ROW_NEXT_MONTH_BTN, size="sm", outline=True, disabled=True),
            dbc.Button("Hide / Show", id=IDs.Control.ROW_TOGGLE_HIDDEN_BTN, size="sm", outline=True, disabled=True),
            dbc.Button(
                "Delete row", id=IDs.Control.ROW_DELETE_BTN, size="sm", color="danger", outline=True, disabled=True
            ),
        ],
        className="d-flex gap-2 align-items-center mt-2",
    )


def _column_actions() -> html.Div:
    return html.Div(
        [
            dcc.Dropdown(
                id=IDs.Control.COLUMN_SELECT,
                options=[],
                placeholder="Column",
                clearable=True,
                style={"minWidth": "180px"},
            ),
            dbc.Input(
                id=IDs.Control.COLUMN_RENAME_INPUT,
                type="text",
                placeholder="New name",
                size="sm",
                style={"maxWidth": "220px"},
            ),
            dbc.Button("Rename", id=IDs.Control.COLUMN_RENAME_BTN, size="sm", outline=True),
            dbc.Button("Remove column", id=IDs.Control.COLUMN_REMOVE_BTN, size="sm", color="danger", outline=True),
        ],
        className="d-flex gap-2 align-items-center mt-2",
    )


def build_table_panel(title: str) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [html.Strong(title), _toolbar()],
                    className="d-flex align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    html.Div(id=IDs.Control.MESSAGES),
                    _data_table(),
                    _row_actions(),
                    _column_actions(),
                ]
            ),
        ],
        className="pe-tablecard mt-3",
    )
