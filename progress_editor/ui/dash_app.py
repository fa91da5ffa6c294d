from __future__ import annotations

import atexit
import logging
from pathlib import Path
from typing import Optional

import dash_bootstrap_components as dbc
from dash import Dash

from progress_editor.core.events import EventBus
from progress_editor.services.dialogs import MessageQueueDialogs
from progress_editor.services.editor_service import create_editor_service
from progress_editor.ui.callbacks.callbacks_io import register_io_callbacks
from progress_editor.ui.callbacks.callbacks_render import register_render_callbacks
from progress_editor.ui.callbacks.callbacks_table import register_table_callbacks
from progress_editor.ui.config import AppConfig
from progress_editor.ui.layout.build_layout import build_layout
from progress_editor.views.progress_chart import ProgressChart

logger = logging.getLogger(__name__)


def create_dash_app(cache_dir: Optional[Path | str] = None) -> Dash:
    # 1) Services
    bus = EventBus()
    dialogs = MessageQueueDialogs()
    editor = create_editor_service(
        Path(cache_dir) if cache_dir is not None else None,
        bus=bus,
        dialogs=dialogs,
    )

    # 2) Chart consumer must be listening before the first publish
    chart = ProgressChart()
    chart.attach(bus)

    # 3) Restore cache (or default) and publish it once
    editor.startup()
    atexit.register(editor.shutdown)

    ctx = AppConfig(editor=editor, chart=chart, dialogs=dialogs)
    ctx.validate()

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
    )
    app.title = ctx.ui_title
    app.layout = build_layout(ctx)

    register_table_callbacks(app, ctx)
    register_io_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    logger.info("Editor ready", extra={"cache_path": str(editor.gateway.cache_path)})
    return app
