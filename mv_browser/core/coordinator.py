from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from mv_browser.config.model import AttributeMapping, BrowserConfig
from mv_browser.core.brush import BrushSelector, Region
from mv_browser.core.dataset import Dataset
from mv_browser.core.emphasis import highlighted_indices
from mv_browser.core.events import GLOBAL_POINTER_EVENTS, PointerEvents
from mv_browser.core.grid import GridSelector
from mv_browser.core.history import HistoryManager
from mv_browser.core.removal import RemovalManager
from mv_browser.core.selection import SelectionState

logger = logging.getLogger(__name__)


class Coordinator:
    """
    Links the scatterplot brush and the matrix grid over one dataset.

    Purpose:
    - Single `on_commit` channel through which either view pushes a new
      filtered snapshot into history
    - `on_hover` / `on_hover_clear` feed emphasis only, never history
    - Back/forward navigation resets the item-level selection
    - Removal prunes the full dataset and every history entry

    The two selectors never talk to each other; both are re-rendered from the
    current snapshot after every state change.
    """

    def __init__(
        self,
        dataset: Dataset,
        config: Optional[BrowserConfig] = None,
        *,
        events: PointerEvents = GLOBAL_POINTER_EVENTS,
    ):
        self.config = config or BrowserConfig(attributes=dataset.attributes)

        self.history = HistoryManager(dataset)
        self.removal = RemovalManager(dataset, self.history)
        self.selection = SelectionState()

        self.brush = BrushSelector(self.config.scatter.inner_width, self.config.scatter.inner_height)
        self.grid = GridSelector(
            dataset.attributes,
            self.config.matrix.inner_width,
            self.config.matrix.inner_height,
            events=events,
        )

        # bumped on every state change so UI layers can detect staleness cheaply
        self.revision = 0
        self._refresh()

    # -------------------------------------------------------------------------
    # Lifetime
    # -------------------------------------------------------------------------
    def close(self) -> None:
        self.grid.close()

    def __enter__(self) -> Coordinator:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # State accessors
    # -------------------------------------------------------------------------
    @property
    def attributes(self) -> AttributeMapping:
        return self.full_dataset.attributes

    @property
    def full_dataset(self) -> Dataset:
        return self.removal.full_dataset

    @property
    def current(self) -> Dataset:
        return self.history.current()

    def scatter_highlight(self) -> Tuple[frozenset[int], bool]:
        """(indices to emphasise, is_filtered) as handed to the scatterplot's highlight()."""
        sel = self.selection
        return highlighted_indices(sel.selected, sel.hovered, sel.is_filtered), sel.is_filtered

    def matrix_highlight(self) -> Optional[frozenset[int]]:
        """Selection handed to the matrix's highlight(); None before any highlight was issued."""
        sel = self.selection
        if sel.selected or sel.navigated:
            return sel.selected
        return None

    # -------------------------------------------------------------------------
    # View callbacks
    # -------------------------------------------------------------------------
    def on_commit(self, items: Dataset, *, filtered: bool = True) -> bool:
        """
        Push a committed filtering action into history.

        Items unknown to the full dataset are dropped; a filtering commit left
        with nothing is ignored.
        """
        known = items.index_set & self.full_dataset.index_set
        if len(known) != len(items):
            logger.debug(
                "commit_dropped_unknown",
                extra={"n_dropped": len(items) - len(known)},
            )
        snapshot = items.subset(known)

        if filtered and len(snapshot) == 0:
            return False

        self.selection.commit(snapshot.indices if filtered else (), filtered=filtered)
        self.history.push(snapshot)
        logger.info("commit", extra={"filtered": filtered, "n_items": len(snapshot)})
        self._refresh()
        return True

    def on_brush(self, region: Optional[Region]) -> Optional[frozenset[int]]:
        matched = self.brush.brush(region)
        if matched is not None:
            self.selection.brushed = matched
            if not matched:
                # nothing committed, so no refresh bumped the revision
                self.revision += 1
        return matched

    def on_brush_clear(self) -> None:
        self.selection.clear_brush()
        self.revision += 1

    def on_hover(self, indices: Iterable[int]) -> None:
        self.selection.hover(i for i in indices if i in self.full_dataset)
        self.revision += 1

    def on_hover_clear(self) -> None:
        self.selection.clear_hover()
        self.revision += 1

    # -------------------------------------------------------------------------
    # Navigation and removal
    # -------------------------------------------------------------------------
    def back(self) -> bool:
        return self._navigate(self.history.back())

    def forward(self) -> bool:
        return self._navigate(self.history.forward())

    def _navigate(self, moved: bool) -> bool:
        if moved:
            self.selection.reset_for_cursor(self.history.cursor)
            self._refresh()
        return moved

    def remove(self, index: int) -> bool:
        if not self.removal.remove(index):
            return False
        self.selection.discard([index])
        self._refresh()
        return True

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------
    def _refresh(self) -> None:
        snapshot = self.current
        self.brush.render(
            snapshot,
            self.attributes.size,
            self.attributes.position,
            self.on_commit,
            self.on_brush_clear,
        )
        self.grid.render(
            snapshot,
            self.full_dataset,
            self.on_commit,
            self.on_hover,
            self.on_hover_clear,
        )
        self.revision += 1
