from __future__ import annotations

import pandas as pd
import plotly.graph_objs as go

from mv_browser.core.base_view import BaseView
from mv_browser.core.coordinator import Coordinator
from mv_browser.core.emphasis import compute_emphasis
from mv_browser.views.tooltip import format_tooltip, label_for

_COLUMNS = ["index", "x", "y", "px_x", "px_y", "opacity", "stroke_width", "tooltip"]


class ScatterplotView(BaseView):
    """
    Brushable scatterplot of size (x) against position (y).

    - Axes follow the scales the brush selector built from the current snapshot
    - Box select emits the brush; a single click commits one item
    - Emphasis: full opacity plus a red border for highlighted items
    """

    id = "scatterplot"
    label = "Scatterplot"

    def compute_data(self, coordinator: Coordinator) -> pd.DataFrame:
        snapshot = coordinator.current
        if len(snapshot) == 0:
            return pd.DataFrame(columns=_COLUMNS)

        attrs = coordinator.attributes
        sel = coordinator.selection
        coords = coordinator.brush.project()
        records = snapshot.frame.to_dict("index")

        emphasis = [
            compute_emphasis(
                idx,
                sel.selected,
                sel.hovered,
                sel.is_filtered,
                default_opacity=self.config.scatter.default_opacity,
            )
            for idx in snapshot.indices
        ]

        return pd.DataFrame(
            {
                "index": snapshot.indices,
                "x": snapshot.numeric(attrs.size).to_numpy(),
                "y": snapshot.numeric(attrs.position).to_numpy(),
                "px_x": coords["px_x"].to_numpy(),
                "px_y": coords["px_y"].to_numpy(),
                "opacity": [e.opacity for e in emphasis],
                "stroke_width": [e.stroke_width for e in emphasis],
                "tooltip": [format_tooltip(records[idx], attrs) for idx in snapshot.indices],
            }
        )

    def render_figure(self, data: pd.DataFrame, coordinator: Coordinator) -> go.Figure:
        cfg = self.config.scatter
        attrs = coordinator.attributes
        brush = coordinator.brush

        fig = go.Figure(
            go.Scatter(
                x=data["x"],
                y=data["y"],
                mode="markers",
                customdata=data["index"],
                text=data["tooltip"],
                hovertemplate="%{text}<extra></extra>",
                marker=dict(
                    size=cfg.marker_radius * 2,
                    color="black",
                    opacity=data["opacity"].tolist(),
                    line=dict(color="red", width=data["stroke_width"].tolist()),
                ),
                # emphasis is driven by the engine, not by Plotly's own selection styling
                selected=dict(marker=dict(opacity=1.0)),
                unselected=dict(marker=dict(opacity=cfg.default_opacity)),
            )
        )

        fig.update_layout(
            width=cfg.width,
            height=cfg.height,
            margin=dict(
                t=cfg.margins.top,
                r=cfg.margins.right,
                b=cfg.margins.bottom,
                l=cfg.margins.left,
            ),
            dragmode="select",
            clickmode="event",
            showlegend=False,
            plot_bgcolor="white",
            uirevision=coordinator.history.cursor,
            transition=self.transition(),
        )
        fig.update_xaxes(
            title_text=f"{label_for(attrs.size)} (m²)",
            range=list(brush.x_scale.domain),
            showline=True,
            linecolor="black",
            ticks="outside",
        )
        fig.update_yaxes(
            title_text=label_for(attrs.position),
            range=list(brush.y_scale.domain),
            showline=True,
            linecolor="black",
            ticks="outside",
        )
        return fig
