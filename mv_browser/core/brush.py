from __future__ import annotations

import logging
from dataclasses import astuple, dataclass
from typing import Callable, Optional, Tuple

import numpy as np
import pandas as pd

from mv_browser.core.dataset import Dataset
from mv_browser.core.scales import LinearScale

logger = logging.getLogger(__name__)

CommitCallback = Callable[..., None]


@dataclass(frozen=True)
class Region:
    """Axis-aligned rectangle in screen coordinates, normalised so x0 <= x1 and y0 <= y1."""
    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_corners(cls, a: Tuple[float, float], b: Tuple[float, float]) -> Region:
        return cls(
            x0=min(a[0], b[0]),
            y0=min(a[1], b[1]),
            x1=max(a[0], b[0]),
            y1=max(a[1], b[1]),
        )

    @property
    def is_degenerate(self) -> bool:
        return not (self.x1 > self.x0 and self.y1 > self.y0)

    def contains(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        # NaN coordinates compare False, so items with missing values never match
        return (x >= self.x0) & (x <= self.x1) & (y >= self.y0) & (y <= self.y1)


class BrushSelector:
    """
    Rectangular brushing over two numeric attributes.

    - Scales are rebuilt from the current snapshot on every render(), so the
      axes always reflect what is visible.
    - A non-empty brush is a committed filtering action: the matched items are
      handed to `on_commit` as the next snapshot.
    - A degenerate or cleared brush only resets emphasis (via `on_clear`).
    """

    def __init__(self, width: float, height: float):
        self.width = float(width)
        self.height = float(height)

        self.snapshot: Dataset = Dataset.empty()
        self.x_attr: Optional[str] = None
        self.y_attr: Optional[str] = None
        self.x_scale = LinearScale(range=(0.0, self.width))
        # screen y grows downwards
        self.y_scale = LinearScale(range=(self.height, 0.0))

        self.active_region: Optional[Region] = None
        self._on_commit: Optional[CommitCallback] = None
        self._on_clear: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(
        self,
        snapshot: Dataset,
        x_attr: str,
        y_attr: str,
        on_commit: CommitCallback,
        on_clear: Optional[Callable[[], None]] = None,
    ) -> None:
        self.snapshot = snapshot
        self.x_attr = x_attr
        self.y_attr = y_attr
        self._on_commit = on_commit
        self._on_clear = on_clear

        self.x_scale = LinearScale.from_values(snapshot.numeric(x_attr), (0.0, self.width))
        self.y_scale = LinearScale.from_values(snapshot.numeric(y_attr), (self.height, 0.0))

        # the brush is redrawn empty whenever the data changes
        self.active_region = None

    def project(self) -> pd.DataFrame:
        """Screen coordinates of every item in the current snapshot."""
        if self.x_attr is None or self.y_attr is None:
            return pd.DataFrame(columns=["px_x", "px_y"], dtype=float)

        return pd.DataFrame(
            {
                "px_x": self.x_scale.apply(self.snapshot.numeric(self.x_attr)),
                "px_y": self.y_scale.apply(self.snapshot.numeric(self.y_attr)),
            },
            index=self.snapshot.frame.index,
        )

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def select(self, region: Region) -> frozenset[int]:
        """Indices whose projected position lies inside `region` (inclusive). No side effects."""
        if region.is_degenerate or len(self.snapshot) == 0:
            return frozenset()
        coords = self.project()
        mask = region.contains(coords["px_x"].to_numpy(), coords["px_y"].to_numpy())
        return frozenset(int(i) for i in coords.index[mask])

    def brush(self, region: Optional[Region]) -> Optional[frozenset[int]]:
        """
        Apply a finished brush gesture.

        Returns the matched indices, or None when the brush was cleared.
        """
        if region is None or region.is_degenerate:
            self.clear()
            return None

        self.active_region = region
        matched = self.select(region)
        logger.info("brush_end", extra={"region": astuple(region), "n_matched": len(matched)})

        if matched and self._on_commit is not None:
            self._on_commit(self.snapshot.subset(matched))
        return matched

    def select_item(self, index: int) -> bool:
        """Commit a single clicked item as the next snapshot."""
        if index not in self.snapshot or self._on_commit is None:
            return False
        self._on_commit(self.snapshot.subset([index]))
        return True

    def clear(self) -> None:
        self.active_region = None
        if self._on_clear is not None:
            self._on_clear()

    def region_from_data(self, x_range: Tuple[float, float], y_range: Tuple[float, float]) -> Region:
        """Convert a brush expressed in data units (as Plotly reports it) to screen units."""
        return Region.from_corners(
            (self.x_scale(x_range[0]), self.y_scale(y_range[0])),
            (self.x_scale(x_range[1]), self.y_scale(y_range[1])),
        )
