from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

import dash
from dash import Input, Output, State, exceptions

from progress_editor.ui.helpers import find_edited_cell, header_for_column_id
from progress_editor.ui.ids import IDs

if TYPE_CHECKING:
    from progress_editor.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _bump(revision: Optional[int]) -> int:
    return (revision or 0) + 1


def _selected_index(selected_rows: Optional[List[int]]) -> Optional[int]:
    return selected_rows[0] if selected_rows else None


def register_table_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    editor = ctx.editor

    # ---------------------------------------------------------
    # 1. Toolbar: add row / add column
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.ADD_ROW_BTN, "n_clicks"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def add_row(n_clicks, revision):
        if not n_clicks:
            raise exceptions.PreventUpdate
        editor.add_row()
        return _bump(revision)

    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.ADD_COLUMN_BTN, "n_clicks"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def add_column(n_clicks, revision):
        if not n_clicks:
            raise exceptions.PreventUpdate
        editor.add_column()
        return _bump(revision)

    # ---------------------------------------------------------
    # 2. Cell edits
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.DATA_TABLE, "data_timestamp"),
        State(IDs.Control.DATA_TABLE, "data"),
        State(IDs.Control.DATA_TABLE, "data_previous"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def edit_cell(_timestamp, data, data_previous, revision):
        edited = find_edited_cell(data, data_previous)
        if edited is None:
            raise exceptions.PreventUpdate

        row_index, col_id, value = edited
        header = header_for_column_id(editor.dataset, col_id)
        if header is None:
            logger.warning("Edit on unknown table column %r", col_id)
            raise exceptions.PreventUpdate

        editor.set_cell_value(row_index, header, "" if value is None else str(value))
        return _bump(revision)

    # ---------------------------------------------------------
    # 3. Row actions on the selected row
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.ROW_PREV_MONTH_BTN, "n_clicks"),
        Input(IDs.Control.ROW_NEXT_MONTH_BTN, "n_clicks"),
        Input(IDs.Control.ROW_TOGGLE_HIDDEN_BTN, "n_clicks"),
        Input(IDs.Control.ROW_DELETE_BTN, "n_clicks"),
        State(IDs.Control.DATA_TABLE, "selected_rows"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def row_action(_prev, _next, _toggle, _delete, selected_rows, revision):
        index = _selected_index(selected_rows)
        if index is None:
            raise exceptions.PreventUpdate

        trigger = dash.ctx.triggered_id
        if trigger == IDs.Control.ROW_PREV_MONTH_BTN:
            editor.shift_row_date(index, -1)
        elif trigger == IDs.Control.ROW_NEXT_MONTH_BTN:
            editor.shift_row_date(index, 1)
        elif trigger == IDs.Control.ROW_TOGGLE_HIDDEN_BTN:
            editor.toggle_row_hidden(index)
        elif trigger == IDs.Control.ROW_DELETE_BTN:
            editor.remove_row(index)
        else:
            raise exceptions.PreventUpdate
        return _bump(revision)

    # ---------------------------------------------------------
    # 4. Column actions
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Output(IDs.Control.COLUMN_RENAME_INPUT, "value"),
        Input(IDs.Control.COLUMN_RENAME_BTN, "n_clicks"),
        State(IDs.Control.COLUMN_SELECT, "value"),
        State(IDs.Control.COLUMN_RENAME_INPUT, "value"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def rename_column(n_clicks, column, new_name, revision):
        if not n_clicks or not column or new_name is None:
            raise exceptions.PreventUpdate
        result = editor.rename_column(column, new_name.strip())
        # keep the typed name around if the rename was rejected
        return _bump(revision), ("" if result is not None else dash.no_update)

    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.COLUMN_REMOVE_BTN, "n_clicks"),
        State(IDs.Control.COLUMN_SELECT, "value"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def remove_column(n_clicks, column, revision):
        if not n_clicks or not column:
            raise exceptions.PreventUpdate
        editor.remove_column(column)
        return _bump(revision)
