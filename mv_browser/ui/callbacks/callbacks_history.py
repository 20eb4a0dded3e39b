from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, ctx as dash_ctx
from dash.exceptions import PreventUpdate

from mv_browser.ui.ids import IDs

if TYPE_CHECKING:
    from mv_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_history_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Back / Forward navigation
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Input(IDs.Control.BACK_BTN, "n_clicks"),
        Input(IDs.Control.FORWARD_BTN, "n_clicks"),
        prevent_initial_call=True,
    )
    def navigate_history(_back_clicks, _forward_clicks):
        with ctx.lock:
            coordinator = ctx.coordinator
            if dash_ctx.triggered_id == IDs.Control.BACK_BTN:
                moved = coordinator.back()
            else:
                moved = coordinator.forward()

            if not moved:
                raise PreventUpdate
            return coordinator.revision

    # ---------------------------------------------------------
    # Remove the last hovered/clicked matrix circle
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Output(IDs.Store.FOCUSED_ITEM, "data", allow_duplicate=True),
        Input(IDs.Control.REMOVE_BTN, "n_clicks"),
        State(IDs.Store.FOCUSED_ITEM, "data"),
        prevent_initial_call=True,
    )
    def remove_focused_item(_n_clicks, focused):
        if focused is None:
            raise PreventUpdate

        with ctx.lock:
            coordinator = ctx.coordinator
            if not coordinator.remove(int(focused)):
                logger.info("Remove ignored; item already gone", extra={"index": focused})
                return dash.no_update, None
            return coordinator.revision, None
