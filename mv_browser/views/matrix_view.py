from __future__ import annotations

from typing import Any, Dict, List

import numpy as np
import pandas as pd
import plotly.graph_objs as go

from mv_browser.core.base_view import BaseView
from mv_browser.core.coordinator import Coordinator
from mv_browser.core.emphasis import grid_emphasis
from mv_browser.core.packing import global_radii, pack_cell, radius_scale
from mv_browser.core.scales import extent
from mv_browser.views.tooltip import format_tooltip, ratio

_COLUMNS = ["index", "column", "row", "x", "y", "r", "ratio", "opacity", "tooltip"]

CELL_FILL = "#f9f9f9"
CELL_FILL_SELECTED = "#e3f2fd"
CELL_STROKE = "#ccc"
CELL_STROKE_SELECTED = "#1976d2"
LABEL_COLOUR = "#333"


class MatrixView(BaseView):
    """
    Small-multiples matrix: one cell per (column, row) value pair.

    Each cell packs its items as circles sized by a radius scale shared by
    the whole render pass and coloured by position/size. Coordinates are in
    grid pixels with y growing downwards, matching {@link GridLayout}.
    """

    id = "matrix"
    label = "Matrix"

    def compute_data(self, coordinator: Coordinator) -> pd.DataFrame:
        cfg = self.config.matrix
        attrs = coordinator.attributes
        snapshot = coordinator.current
        layout = coordinator.grid.layout

        if len(snapshot) == 0 or not layout.cells:
            return pd.DataFrame(columns=_COLUMNS)

        scale = radius_scale(snapshot, attrs.size, cfg.radius_range)
        radii = global_radii(snapshot, attrs.size, scale)
        records = snapshot.frame.to_dict("index")
        selected = coordinator.matrix_highlight()

        pack_w = layout.cell_width - cfg.cell_padding * 2
        pack_h = layout.cell_height - cfg.cell_padding * 2 - cfg.label_height

        rows: List[Dict[str, Any]] = []
        for cell in layout.cells:
            ox, oy = layout.origin(cell.key)
            packed = pack_cell(
                cell.indices,
                radii.loc[list(cell.indices)].tolist(),
                (pack_w, pack_h),
                padding=cfg.pack_padding,
            )
            for circle in packed:
                record = records[circle.index]
                emphasis = grid_emphasis(
                    circle.index,
                    selected,
                    default_opacity=cfg.default_opacity,
                    dimmed_opacity=cfg.dimmed_opacity,
                )
                rows.append(
                    {
                        "index": circle.index,
                        "column": cell.column,
                        "row": cell.row,
                        "x": ox + cfg.cell_padding + circle.x,
                        "y": oy + cfg.cell_padding + cfg.label_height + circle.y,
                        "r": circle.r,
                        "ratio": ratio(record.get(attrs.position), record.get(attrs.size)),
                        "opacity": emphasis.opacity,
                        "tooltip": format_tooltip(record, attrs),
                    }
                )

        return pd.DataFrame(rows, columns=_COLUMNS)

    def render_figure(self, data: pd.DataFrame, coordinator: Coordinator) -> go.Figure:
        cfg = self.config.matrix
        layout = coordinator.grid.layout
        width, height = cfg.inner_width, cfg.inner_height

        fig = go.Figure()
        fig.add_trace(self._cell_background(coordinator))

        cmin, cmax = extent(data["ratio"])
        fig.add_trace(
            go.Scatter(
                x=data["x"],
                y=data["y"],
                mode="markers",
                customdata=data["index"],
                text=data["tooltip"],
                hovertemplate="%{text}<extra></extra>",
                marker=dict(
                    size=(data["r"] * 2).tolist(),
                    sizemode="diameter",
                    color=data["ratio"].tolist(),
                    colorscale="RdYlGn",
                    reversescale=True,
                    cmin=cmin,
                    cmax=cmax,
                    opacity=data["opacity"].tolist(),
                    line=dict(color="black", width=1),
                ),
                selected=dict(marker=dict(opacity=1.0)),
                unselected=dict(marker=dict(opacity=cfg.dimmed_opacity)),
                name="items",
            )
        )

        for cell in layout.cells:
            ox, oy = layout.origin(cell.key)
            is_selected = coordinator.grid.is_selected(cell.key)
            fig.add_shape(
                type="rect",
                x0=ox,
                y0=oy,
                x1=ox + layout.cell_width,
                y1=oy + layout.cell_height,
                line=dict(
                    color=CELL_STROKE_SELECTED if is_selected else CELL_STROKE,
                    width=3 if is_selected else 1,
                ),
                layer="below",
            )
            fig.add_annotation(
                x=ox + layout.cell_width / 2,
                y=oy + cfg.label_height / 2,
                text=cfg.label_template.format(column=cell.column, row=cell.row, count=cell.count),
                showarrow=False,
                font=dict(size=11, color=CELL_STROKE_SELECTED if is_selected else LABEL_COLOUR),
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
            hovermode="closest",
            showlegend=False,
            plot_bgcolor="white",
            transition=self.transition(),
        )
        fig.update_xaxes(range=[0, width], visible=False, fixedrange=True)
        # grid coordinates grow downwards
        fig.update_yaxes(range=[height, 0], visible=False, fixedrange=True)
        return fig

    def _cell_background(self, coordinator: Coordinator) -> go.Heatmap:
        """
        One heatmap tile per grid position, used both as cell fill and as the
        click target for cell gestures. Value pairs without items stay empty.
        """
        layout = coordinator.grid.layout
        n_cols, n_rows = layout.shape

        z = np.full((n_rows, n_cols), np.nan)
        for cell in layout.cells:
            col, row = layout.ordinal(cell.key)
            z[row, col] = 1.0 if coordinator.grid.is_selected(cell.key) else 0.0

        return go.Heatmap(
            x=[(c + 0.5) * layout.cell_width for c in range(n_cols)],
            y=[(r + 0.5) * layout.cell_height for r in range(n_rows)],
            z=z.tolist(),
            zmin=0,
            zmax=1,
            colorscale=[[0, CELL_FILL], [1, CELL_FILL_SELECTED]],
            showscale=False,
            hoverinfo="none",
            xgap=1,
            ygap=1,
            name="cells",
        )
