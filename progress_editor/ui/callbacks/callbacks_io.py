from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, exceptions

from progress_editor.ui.ids import IDs

if TYPE_CHECKING:
    from progress_editor.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_io_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    editor = ctx.editor

    # The path input stands in for the native file picker: whatever it holds
    # is handed to the dialog service as the user's choice.
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.SAVE_BTN, "n_clicks"),
        State(IDs.Control.FILE_PATH_INPUT, "value"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def save_file(n_clicks, path, revision):
        if not n_clicks:
            raise exceptions.PreventUpdate
        with ctx.dialogs.answering(path):
            editor.save_file()
        return (revision or 0) + 1

    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.LOAD_BTN, "n_clicks"),
        State(IDs.Control.FILE_PATH_INPUT, "value"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def load_file(n_clicks, path, revision):
        if not n_clicks:
            raise exceptions.PreventUpdate
        if not path:
            ctx.dialogs.notify("Enter the path of a JSON file to load.", "warning", title="Load")
            return (revision or 0) + 1
        with ctx.dialogs.answering(path):
            editor.open_file()
        return (revision or 0) + 1

    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.RESET_BTN, "n_clicks"),
        State(IDs.Store.REVISION, "data"),
        prevent_initial_call=True,
    )
    def reset_data(n_clicks, revision):
        if not n_clicks:
            raise exceptions.PreventUpdate
        logger.info("Resetting dataset to built-in default")
        editor.reset_to_default()
        return (revision or 0) + 1
