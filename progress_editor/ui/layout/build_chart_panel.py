from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from progress_editor.ui.ids import IDs


def build_chart_panel() -> dbc.Card:
    header = html.Div(
        [
            html.Strong("Chart"),
            html.Small("hidden rows drawn as open markers", className="text-muted ms-auto"),
        ],
        className="d-flex align-items-center",
    )

    graph = dcc.Loading(
        type="circle",
        children=dcc.Graph(
            id=IDs.Control.MAIN_GRAPH,
            style={"height": "480px"},
            config={"responsive": True, "displaylogo": False},
        ),
    )

    return dbc.Card(
        [dbc.CardHeader(header, className="p-2"), dbc.CardBody(graph)],
        className="pe-chartcard mt-3",
    )
