from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from mv_browser.ui.ids import IDs


def counter_text(n_items: int) -> str:
    return f"{n_items} houses"


def build_history_controls(n_items: int) -> html.Div:
    """Back / counter / Forward strip plus the remove action."""
    return html.Div(
        [
            dbc.ButtonGroup(
                [
                    dbc.Button(
                        "← Back",
                        id=IDs.Control.BACK_BTN,
                        color="secondary",
                        outline=True,
                        disabled=True,
                    ),
                    dbc.Button(
                        counter_text(n_items),
                        id=IDs.Control.ITEM_COUNTER,
                        color="light",
                        disabled=True,
                    ),
                    dbc.Button(
                        "Forward →",
                        id=IDs.Control.FORWARD_BTN,
                        color="secondary",
                        outline=True,
                        disabled=True,
                    ),
                ],
                size="sm",
            ),
            dbc.Button(
                "Remove hovered",
                id=IDs.Control.REMOVE_BTN,
                color="danger",
                outline=True,
                size="sm",
                disabled=True,
                className="ms-3",
            ),
            html.Small(id=IDs.Control.STATUS_BAR, className="text-muted ms-3"),
        ],
        className="d-flex align-items-center justify-content-center my-3",
    )
