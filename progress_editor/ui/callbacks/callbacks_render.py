from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
import plotly.graph_objs as go
from dash import Input, Output, State

from progress_editor.ui.helpers import (
    hidden_row_styles,
    message_alerts,
    table_columns,
    table_records,
)
from progress_editor.ui.ids import IDs

if TYPE_CHECKING:
    from progress_editor.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    editor = ctx.editor

    # ---------------------------------------------------------
    # Table + column picker + messages: revision -> components
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.DATA_TABLE, "data"),
        Output(IDs.Control.DATA_TABLE, "columns"),
        Output(IDs.Control.DATA_TABLE, "style_data_conditional"),
        Output(IDs.Control.DATA_TABLE, "selected_rows"),
        Output(IDs.Control.COLUMN_SELECT, "options"),
        Output(IDs.Control.COLUMN_SELECT, "value"),
        Output(IDs.Control.MESSAGES, "children"),
        Input(IDs.Store.REVISION, "data"),
        State(IDs.Control.DATA_TABLE, "selected_rows"),
        State(IDs.Control.COLUMN_SELECT, "value"),
    )
    def render_table(_revision, selected_rows, selected_column):
        ds = editor.dataset

        selected = [i for i in (selected_rows or []) if 0 <= i < len(ds.rows)]
        column = selected_column if selected_column in ds.headers else None
        options = [{"label": h, "value": h} for h in ds.headers]

        return (
            table_records(ds),
            table_columns(ds),
            hidden_row_styles(ds),
            selected,
            options,
            column,
            message_alerts(ctx.dialogs.drain()),
        )

    # ---------------------------------------------------------
    # Row action availability (mirrors the engine's date guard)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.ROW_PREV_MONTH_BTN, "disabled"),
        Output(IDs.Control.ROW_NEXT_MONTH_BTN, "disabled"),
        Output(IDs.Control.ROW_TOGGLE_HIDDEN_BTN, "disabled"),
        Output(IDs.Control.ROW_DELETE_BTN, "disabled"),
        Output(IDs.Control.ROW_TOGGLE_HIDDEN_BTN, "children"),
        Output(IDs.Control.ROW_SELECTION_TEXT, "children"),
        Input(IDs.Store.REVISION, "data"),
        Input(IDs.Control.DATA_TABLE, "selected_rows"),
    )
    def update_row_actions(_revision, selected_rows):
        ds = editor.dataset
        index = selected_rows[0] if selected_rows else None
        if index is None or not 0 <= index < len(ds.rows):
            return True, True, True, True, "Hide / Show", "No row selected"

        row = ds.rows[index]
        return (
            not editor.engine.can_shift_row_date(index, -1),
            not editor.engine.can_shift_row_date(index, 1),
            False,
            False,
            "Show row" if row.hidden else "Hide row",
            f"Row {index + 1}: {row.date}",
        )

    # ---------------------------------------------------------
    # Chart: latest snapshot published on the "data" channel
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.MAIN_GRAPH, "figure"),
        Input(IDs.Store.REVISION, "data"),
    )
    def update_chart(_revision) -> go.Figure:
        chart = ctx.chart
        try:
            return chart.render_figure(chart.compute_data())
        except Exception:
            logger.exception("Error rendering progress chart", extra={"chart_revision": chart.revision})
            return chart.empty_figure("Something went wrong while rendering the chart.")
