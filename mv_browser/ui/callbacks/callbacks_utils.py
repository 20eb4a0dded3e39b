from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from dash import ctx as dash_ctx

logger = logging.getLogger(__name__)

# Trace order inside the matrix figure
MATRIX_CELL_TRACE = 0
MATRIX_ITEM_TRACE = 1


def first_point(event: object) -> Optional[Dict[str, Any]]:
    """First point of a Plotly click/hover payload, or None."""
    if not isinstance(event, dict):
        return None
    points = event.get("points") or []
    if not points or not isinstance(points[0], dict):
        return None
    return points[0]


def point_index(point: Optional[Dict[str, Any]]) -> Optional[int]:
    """Item identity carried in a point's customdata."""
    if point is None:
        return None
    custom = point.get("customdata")
    if isinstance(custom, (list, tuple)):
        custom = custom[0] if custom else None
    try:
        return int(custom)
    except (TypeError, ValueError):
        return None


def box_range(selected: object) -> Optional[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """((x0, x1), (y0, y1)) of a box selection in data units, or None."""
    if not isinstance(selected, dict):
        return None
    rng = selected.get("range")
    if not isinstance(rng, dict):
        return None
    try:
        xs, ys = rng["x"], rng["y"]
        return (float(xs[0]), float(xs[1])), (float(ys[0]), float(ys[1]))
    except (KeyError, IndexError, TypeError, ValueError):
        logger.debug("Ignoring malformed selection range: %r", rng)
        return None


def triggered_prop() -> Optional[str]:
    """Property name ("clickData", "selectedData", ...) that fired the current callback."""
    if not dash_ctx.triggered:
        return None
    prop_id = dash_ctx.triggered[0].get("prop_id", "")
    return prop_id.rsplit(".", 1)[-1] or None
