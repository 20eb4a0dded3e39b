from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from mv_browser.config.model import BrowserConfig


def build_navbar(config: BrowserConfig) -> dbc.Navbar:
    subtitle = "Brush the scatterplot or drag across the matrix to filter"

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(config.ui_title, className="mb-0"),
                        html.Small(subtitle, className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm mvb-navbar",
    )
