from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import dash
import pandas as pd
import plotly.graph_objs as go
from dash import Input, Output

from mv_browser.ui.ids import IDs
from mv_browser.ui.layout.build_history_controls import counter_text

if TYPE_CHECKING:
    from mv_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helper: Empty/Error Figures
# -----------------------------------------------------------------------------
def _message_figure(title: str, details: Optional[str] = None) -> go.Figure:
    fig = go.Figure()
    text = title if details is None else f"{title}<br><br>{details}"
    fig.add_annotation(
        text=text,
        showarrow=False,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=40, r=40, t=40, b=40))
    return fig


def _error_figure(details: str) -> go.Figure:
    return _message_figure("Something went wrong while rendering this view.", details)


def render_view(ctx: AppConfig, view_id: str) -> go.Figure:
    """Build one view's figure from the coordinator, never raising into Dash."""
    try:
        view = ctx.registry.create(view_id, ctx.config)
        data = view.timed_compute(ctx.coordinator)

        if isinstance(data, pd.DataFrame) and data.empty:
            return _message_figure(
                "No data to display.",
                "Every item has been filtered or removed. Use Back to return to an earlier step.",
            )

        return view.render_figure(data, ctx.coordinator)

    except Exception:
        logger.exception("Error rendering view", extra={"view_id": view_id})
        return _error_figure(
            "The app hit an unexpected error. "
            "If this keeps happening, grab the logs and open an issue."
        )


def status_text(ctx: AppConfig) -> str:
    coordinator = ctx.coordinator
    history = coordinator.history
    parts = [f"Step {history.cursor + 1} of {len(history)}"]
    if coordinator.selection.is_filtered:
        parts.append(f"filtered from {len(coordinator.full_dataset)}")
    n_removed = len(coordinator.removal.removed)
    if n_removed:
        parts.append(f"{n_removed} removed")
    return " · ".join(parts)


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # Engine revision -> both figures and the history strip
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.SCATTER_GRAPH, "figure"),
        Output(IDs.Control.MATRIX_GRAPH, "figure"),
        Output(IDs.Control.ITEM_COUNTER, "children"),
        Output(IDs.Control.BACK_BTN, "disabled"),
        Output(IDs.Control.FORWARD_BTN, "disabled"),
        Output(IDs.Control.REMOVE_BTN, "disabled"),
        Output(IDs.Control.STATUS_BAR, "children"),
        Input(IDs.Store.REVISION, "data"),
        Input(IDs.Store.FOCUSED_ITEM, "data"),
    )
    def update_views_from_revision(revision: int | None, focused: int | None):
        with ctx.lock:
            coordinator = ctx.coordinator
            logger.info(
                "render_start",
                extra={"revision": revision, "n_items": len(coordinator.current)},
            )

            scatter = render_view(ctx, "scatterplot")
            matrix = render_view(ctx, "matrix")
            history = coordinator.history

            return (
                scatter,
                matrix,
                counter_text(len(coordinator.current)),
                not history.can_back,
                not history.can_forward,
                focused is None or focused not in coordinator.full_dataset,
                status_text(ctx),
            )
