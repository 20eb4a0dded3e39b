from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import dash
from dash import Input, Output
from dash.exceptions import PreventUpdate

from mv_browser.ui.callbacks.callbacks_utils import (
    box_range,
    first_point,
    point_index,
    triggered_prop,
)
from mv_browser.ui.ids import IDs

if TYPE_CHECKING:
    from mv_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def apply_scatter_event(ctx: AppConfig, prop: str | None, payload: Any) -> bool:
    """
    Translate one scatterplot graph event into an engine call.

    - selectedData with a box range -> brush over that region
    - selectedData cleared (double-click) -> brush cleared
    - clickData on a point -> that single item is committed

    Returns True when engine state changed.
    """
    coordinator = ctx.coordinator

    if prop == "selectedData":
        rng = box_range(payload)
        if rng is None:
            coordinator.on_brush(None)
            return True
        region = coordinator.brush.region_from_data(*rng)
        coordinator.on_brush(region)
        return True

    if prop == "clickData":
        index = point_index(first_point(payload))
        if index is None:
            return False
        return coordinator.brush.select_item(index)

    return False


def register_scatter_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Output(IDs.Control.SCATTER_GRAPH, "clickData"),
        Input(IDs.Control.SCATTER_GRAPH, "selectedData"),
        Input(IDs.Control.SCATTER_GRAPH, "clickData"),
        prevent_initial_call=True,
    )
    def scatter_event(selected_data, click_data):
        prop = triggered_prop()
        payload = selected_data if prop == "selectedData" else click_data

        with ctx.lock:
            try:
                changed = apply_scatter_event(ctx, prop, payload)
            except Exception:
                logger.exception("Error handling scatterplot event", extra={"prop": prop})
                raise PreventUpdate
            if not changed:
                raise PreventUpdate
            reset_click = None if prop == "clickData" else dash.no_update
            return ctx.coordinator.revision, reset_click
