from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from progress_editor.ui.ids import IDs
from progress_editor.ui.layout.build_chart_panel import build_chart_panel
from progress_editor.ui.layout.build_navbar import build_navbar
from progress_editor.ui.layout.build_table_panel import build_table_panel

if TYPE_CHECKING:
    from progress_editor.ui.config import AppConfig


def build_layout(ctx: AppConfig) -> dbc.Container:
    return dbc.Container(
        fluid=True,
        className="pe-root",
        children=[
            build_navbar(ctx.ui_title),

            # Bumped by every callback that changes server-side state
            dcc.Store(id=IDs.Store.REVISION, data=0),

            dbc.Row(
                [
                    dbc.Col(build_table_panel(ctx.ui_title), lg=7),
                    dbc.Col(build_chart_panel(), lg=5),
                ],
                className="gx-3",
            ),
        ],
    )
