from __future__ import annotations

__all__ = ["IDs"]


class IDs:
    class Store:
        # engine revision; every mutating callback writes it, the render callback reads it
        REVISION = "engine-revision"
        FOCUSED_ITEM = "focused-item"

    class Control:
        # History navigation
        BACK_BTN = "history-back-btn"
        FORWARD_BTN = "history-forward-btn"
        ITEM_COUNTER = "history-item-counter"

        REMOVE_BTN = "remove-item-btn"

        # Graphs
        SCATTER_GRAPH = "scatterplot-graph"
        MATRIX_GRAPH = "matrix-graph"

        STATUS_BAR = "status-bar"
