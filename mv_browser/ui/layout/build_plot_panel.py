from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html


def build_plot_panel(graph_id: str, title: str, *, clear_on_unhover: bool = False) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(html.Strong(title), className="p-2"),
            dbc.CardBody(
                dcc.Graph(
                    id=graph_id,
                    clear_on_unhover=clear_on_unhover,
                    config={
                        "displaylogo": False,
                        "modeBarButtonsToRemove": ["lasso2d", "autoScale2d"],
                    },
                ),
                className="d-flex justify-content-center",
            ),
        ],
        className="mvb-plotcard h-100",
    )
