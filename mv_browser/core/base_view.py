from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

import pandas as pd
import plotly.graph_objs as go

from mv_browser.config.model import BrowserConfig

if TYPE_CHECKING:
    from mv_browser.core.coordinator import Coordinator

logger = logging.getLogger(__name__)


class BaseView(ABC):
    """
    Abstract base class for the linked plot views.

    Defines the contract that every view in the app must follow
    - expose an 'id' - used internally
    - expose a 'label' - used for UI/human-readable applications
    - implement 'compute_data' - turn the coordinator's current state into a tidy frame
    - implement 'render_figure' - used to render the figure using Plotly

    Views never mutate engine state; they read the coordinator and emit figures.
    """

    id: str = None
    label: str = None

    def __init__(self, config: Optional[BrowserConfig] = None):
        self.config = config or BrowserConfig()

    @abstractmethod
    def compute_data(self, coordinator: Coordinator) -> Any:
        """
        Compute the data given the current engine state
        :param coordinator: the {@link Coordinator} holding history, selection and layout
        :return: data: a dataframe with one row per rendered item
        """
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: Any, coordinator: Coordinator) -> go.Figure:
        """
        Render the figure given the computed data
        :param data: the data provided by {@link compute_data()}
        :param coordinator: the engine state the data was computed from
        :return: the Plotly figure
        """
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Common helpers for all views
    # ------------------------------------------------------------------
    def timed_compute(self, coordinator: Coordinator) -> Any:
        start = time.perf_counter()
        data = self.compute_data(coordinator)
        logger.info(
            "compute_done",
            extra={
                "view_id": self.id,
                "n_rows": len(data) if isinstance(data, pd.DataFrame) else None,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return data

    def figure(self, coordinator: Coordinator) -> go.Figure:
        data = self.timed_compute(coordinator)
        return self.render_figure(data, coordinator)

    def transition(self) -> dict:
        return {"duration": self.config.transition_ms, "easing": "cubic-in-out"}

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
