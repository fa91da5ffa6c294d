# progress_editor/views/progress_chart.py

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

import pandas as pd
import plotly.graph_objects as go

from progress_editor.core.dataset import Dataset
from progress_editor.core.events import DATA_EVENT, EventBus

logger = logging.getLogger(__name__)


class ProgressChart:
    """
    Chart consumer of the "data" channel.

    Keeps the most recent published snapshot and turns it into a line chart:
      - one trace per column (lab), x = date, y = multiplier
      - hidden rows are still drawn, as open dotted markers, so the user can
        see what they de-emphasised

    Only ever receives normalised snapshots (finite values).
    """

    def __init__(self):
        self._latest: Optional[Dataset] = None
        self._revision = 0
        self._lock = threading.Lock()

    def attach(self, bus: EventBus) -> Callable[[], None]:
        return bus.subscribe(DATA_EVENT, self.receive)

    def receive(self, dataset: Dataset) -> None:
        with self._lock:
            self._latest = dataset
            self._revision += 1
        logger.debug("chart_received", extra={"revision": self._revision, "n_rows": len(dataset.rows)})

    @property
    def latest(self) -> Optional[Dataset]:
        return self._latest

    @property
    def revision(self) -> int:
        return self._revision

    def compute_data(self, dataset: Optional[Dataset] = None) -> pd.DataFrame:
        """
        Long-format frame with columns: date, lab, value, hidden.
        Empty frame (same columns) when there is nothing to plot.
        """
        dataset = dataset if dataset is not None else self._latest
        columns = ["date", "lab", "value", "hidden"]
        if dataset is None or not dataset.rows or not dataset.headers:
            return pd.DataFrame(columns=columns)

        records = [
            {
                "date": row.date,
                "lab": header,
                "value": row.values.get(header),
                "hidden": bool(row.hidden),
            }
            for row in dataset.rows
            for header in dataset.headers
            if header in row.values
        ]
        df = pd.DataFrame.from_records(records, columns=columns)
        df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d")
        return df.sort_values("date", kind="stable", ignore_index=True)

    def render_figure(self, data: pd.DataFrame) -> go.Figure:
        if data.empty:
            return self.empty_figure("No data to show")

        fig = go.Figure()
        for lab, group in data.groupby("lab", sort=False):
            visible = group[~group["hidden"]]
            fig.add_scatter(
                x=visible["date"],
                y=visible["value"],
                mode="lines+markers",
                name=str(lab),
                legendgroup=str(lab),
            )

            hidden = group[group["hidden"]]
            if not hidden.empty:
                fig.add_scatter(
                    x=hidden["date"],
                    y=hidden["value"],
                    mode="markers",
                    name=f"{lab} (hidden)",
                    legendgroup=str(lab),
                    showlegend=False,
                    opacity=0.4,
                    marker={"symbol": "circle-open"},
                )

        fig.update_xaxes(title_text="Date")
        fig.update_yaxes(title_text="Progress multiplier", rangemode="tozero")
        fig.update_layout(
            title="AI R&D progress multiplier",
            margin=dict(l=40, r=40, t=60, b=40),
            hovermode="x unified",
        )
        return fig

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
