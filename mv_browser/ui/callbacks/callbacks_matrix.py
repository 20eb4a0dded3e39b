from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Tuple

import dash
from dash import Input, Output, State
from dash.exceptions import PreventUpdate

from mv_browser.core.events import GLOBAL_POINTER_EVENTS, PointerEvents
from mv_browser.ui.callbacks.callbacks_utils import (
    MATRIX_CELL_TRACE,
    MATRIX_ITEM_TRACE,
    box_range,
    first_point,
    point_index,
    triggered_prop,
)
from mv_browser.ui.ids import IDs

if TYPE_CHECKING:
    from mv_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _click(ctx: AppConfig, xy: Tuple[float, float], events: PointerEvents) -> bool:
    """Replay a click on the grid: pointer-down on the cell, then global pointer-up."""
    grid = ctx.coordinator.grid
    key = grid.layout.key_at(*xy)
    if key is None:
        return False

    before = ctx.coordinator.revision
    grid.pointer_down(key)
    events.pointer_up()
    return ctx.coordinator.revision != before


def _box(ctx: AppConfig, start: Tuple[float, float], end: Tuple[float, float]) -> bool:
    """Commit the cell range under a box select; its corners may be empty value pairs."""
    grid = ctx.coordinator.grid
    start_key = grid.layout.key_at(*start)
    end_key = grid.layout.key_at(*end)
    if start_key is None or end_key is None:
        return False

    before = ctx.coordinator.revision
    grid.commit_range(start_key, end_key)
    return ctx.coordinator.revision != before


def apply_matrix_event(
    ctx: AppConfig,
    prop: Optional[str],
    payload: Any,
    *,
    events: PointerEvents = GLOBAL_POINTER_EVENTS,
) -> Tuple[bool, Optional[int]]:
    """
    Translate one matrix graph event into engine calls.

    Returns (engine state changed, item to focus or None).

    - clickData on a cell tile -> click on that cell (toggle)
    - clickData on a circle -> highlight that item, no filtering
    - selectedData box -> every cell between the two corners, committed at once
    - hoverData on a circle -> hover; anywhere else, or unhover -> hover cleared
    """
    coordinator = ctx.coordinator
    grid = coordinator.grid
    point = first_point(payload)

    if prop == "clickData":
        if point is None:
            return False, None
        if point.get("curveNumber") == MATRIX_ITEM_TRACE:
            index = point_index(point)
            if index is None:
                return False, None
            coordinator.on_hover([index])
            return True, index
        if point.get("curveNumber") == MATRIX_CELL_TRACE:
            xy = (float(point["x"]), float(point["y"]))
            return _click(ctx, xy, events), None
        return False, None

    if prop == "selectedData":
        rng = box_range(payload)
        if rng is None:
            return False, None
        (x0, x1), (y0, y1) = rng
        return _box(ctx, (x0, y0), (x1, y1)), None

    if prop == "hoverData":
        index = point_index(point) if point and point.get("curveNumber") == MATRIX_ITEM_TRACE else None
        if index is None:
            if not coordinator.selection.hovered:
                return False, None
            grid.item_leave()
            return True, None
        if coordinator.selection.hovered == frozenset([index]):
            return False, index
        grid.item_enter(index)
        return True, index

    return False, None


def register_matrix_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    @app.callback(
        Output(IDs.Store.REVISION, "data", allow_duplicate=True),
        Output(IDs.Store.FOCUSED_ITEM, "data", allow_duplicate=True),
        Output(IDs.Control.MATRIX_GRAPH, "clickData"),
        Input(IDs.Control.MATRIX_GRAPH, "clickData"),
        Input(IDs.Control.MATRIX_GRAPH, "selectedData"),
        Input(IDs.Control.MATRIX_GRAPH, "hoverData"),
        State(IDs.Store.FOCUSED_ITEM, "data"),
        prevent_initial_call=True,
    )
    def matrix_event(click_data, selected_data, hover_data, focused):
        prop = triggered_prop()
        payload = {
            "clickData": click_data,
            "selectedData": selected_data,
            "hoverData": hover_data,
        }.get(prop)

        with ctx.lock:
            try:
                changed, focus = apply_matrix_event(ctx, prop, payload)
            except Exception:
                logger.exception("Error handling matrix event", extra={"prop": prop})
                raise PreventUpdate

            # focus sticks to the last circle touched so the remove button can reach it
            new_focus = focus if focus is not None else dash.no_update
            if not changed:
                if new_focus is dash.no_update or new_focus == focused:
                    raise PreventUpdate
                return dash.no_update, new_focus, dash.no_update
            # reset so that clicking the same cell again fires another event
            reset_click = None if prop == "clickData" else dash.no_update
            return ctx.coordinator.revision, new_focus, reset_click
