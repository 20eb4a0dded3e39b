from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from mv_browser.config.loader import load_browser_config
from mv_browser.core.coordinator import Coordinator
from mv_browser.core.dataset_loader import from_config
from mv_browser.core.view_registry import ViewRegistry
from mv_browser.ui.layout.build_layout import build_layout
from mv_browser.ui.callbacks.callbacks_history import register_history_callbacks
from mv_browser.ui.callbacks.callbacks_matrix import register_matrix_callbacks
from mv_browser.ui.callbacks.callbacks_render import register_render_callbacks
from mv_browser.ui.callbacks.callbacks_scatter import register_scatter_callbacks

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "browser.json"


def build_view_registry() -> ViewRegistry:
    from mv_browser.views import MatrixView, ScatterplotView

    registry = ViewRegistry()
    registry.register(ScatterplotView)
    registry.register(MatrixView)
    return registry


def create_dash_app(config_path: Path | str = DEFAULT_CONFIG_PATH) -> Dash:
    # 1) Load Config
    config = load_browser_config(config_path)

    # 2) Load the dataset and build the engine around it
    dataset = from_config(config)
    coordinator = Coordinator(dataset, config)

    # 3) App Context
    ctx = AppConfig(
        config=config,
        coordinator=coordinator,
        registry=build_view_registry(),
    )
    ctx.validate()

    logger.info(
        "Browser ready",
        extra={"n_items": len(dataset), "data_file": str(config.data_file)},
    )

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )
    app.title = config.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_render_callbacks(app, ctx)
    register_history_callbacks(app, ctx)
    register_scatter_callbacks(app, ctx)
    register_matrix_callbacks(app, ctx)

    return app
