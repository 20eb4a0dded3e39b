from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from mv_browser.ui.ids import IDs
from mv_browser.ui.layout.build_history_controls import build_history_controls
from mv_browser.ui.layout.build_navbar import build_navbar
from mv_browser.ui.layout.build_plot_panel import build_plot_panel
from mv_browser.views.tooltip import label_for

if TYPE_CHECKING:
    from mv_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig) -> dbc.Container:
    coordinator = ctx.coordinator
    attrs = coordinator.attributes

    return dbc.Container(
        fluid=True,
        className="mvb-root",
        children=[
            build_navbar(ctx.config),

            # App-level stores
            dcc.Store(id=IDs.Store.REVISION, data=coordinator.revision),
            dcc.Store(id=IDs.Store.FOCUSED_ITEM, data=None),

            build_history_controls(len(coordinator.current)),

            dbc.Row(
                [
                    dbc.Col(
                        build_plot_panel(
                            IDs.Control.SCATTER_GRAPH,
                            f"{label_for(attrs.position)} vs {label_for(attrs.size)}",
                        ),
                        lg=6,
                    ),
                    dbc.Col(
                        build_plot_panel(
                            IDs.Control.MATRIX_GRAPH,
                            f"{label_for(attrs.column)} x {label_for(attrs.row)}",
                            clear_on_unhover=True,
                        ),
                        lg=6,
                    ),
                ],
                className="gx-3",
            ),
        ],
    )
