from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Callable, Dict, List, Optional, Tuple

from mv_browser.config.model import AttributeMapping
from mv_browser.core.dataset import Dataset
from mv_browser.core.events import GLOBAL_POINTER_EVENTS, PointerEvents
from mv_browser.core.item import CellKey

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RANGE_SELECTED = "range-selected"


@dataclass(frozen=True)
class GridCell:
    key: CellKey
    indices: Tuple[int, ...]

    @property
    def column(self):
        return self.key[0]

    @property
    def row(self):
        return self.key[1]

    @property
    def count(self) -> int:
        return len(self.indices)


@dataclass(frozen=True)
class GridLayout:
    """
    Small-multiples grid derived from one snapshot.

    Columns are the sorted distinct column-attribute values, rows the sorted
    distinct row-attribute values; every cell has the same pixel size.
    """
    column_values: Tuple = ()
    row_values: Tuple = ()
    cell_width: float = 0.0
    cell_height: float = 0.0
    cells: Tuple[GridCell, ...] = ()

    @property
    def shape(self) -> Tuple[int, int]:
        return len(self.column_values), len(self.row_values)

    def cell(self, key: CellKey) -> Optional[GridCell]:
        for cell in self.cells:
            if cell.key == key:
                return cell
        return None

    def ordinal(self, key: CellKey) -> Optional[Tuple[int, int]]:
        """(column position, row position) of a key, or None if either value is not in the grid."""
        try:
            return self.column_values.index(key[0]), self.row_values.index(key[1])
        except ValueError:
            return None

    def origin(self, key: CellKey) -> Tuple[float, float]:
        pos = self.ordinal(key)
        if pos is None:
            return 0.0, 0.0
        return pos[0] * self.cell_width, pos[1] * self.cell_height

    def key_at(self, x: float, y: float) -> Optional[CellKey]:
        """Grid key under a point in grid coordinates, clamped to the grid bounds."""
        n_cols, n_rows = self.shape
        if not n_cols or not n_rows or self.cell_width <= 0 or self.cell_height <= 0:
            return None
        col = min(max(int(x // self.cell_width), 0), n_cols - 1)
        row = min(max(int(y // self.cell_height), 0), n_rows - 1)
        return self.column_values[col], self.row_values[row]


# -----------------------------------------------------------------------------
# Pure helpers
# -----------------------------------------------------------------------------
def _keys(dataset: Dataset, column: str, row: str) -> List[Tuple[int, Optional[CellKey]]]:
    return [(item.index, item.cell_key(column, row)) for item in dataset]


def group_cells(dataset: Dataset, column: str, row: str) -> List[GridCell]:
    """Partition a snapshot by (column value, row value); items missing either value are skipped."""
    groups: Dict[CellKey, List[int]] = {}
    for idx, key in _keys(dataset, column, row):
        if key is not None:
            groups.setdefault(key, []).append(idx)
    return [GridCell(key=key, indices=tuple(groups[key])) for key in sorted(groups)]


def compute_layout(dataset: Dataset, column: str, row: str, width: float, height: float) -> GridLayout:
    cells = group_cells(dataset, column, row)
    column_values = tuple(sorted({cell.column for cell in cells}))
    row_values = tuple(sorted({cell.row for cell in cells}))

    return GridLayout(
        column_values=column_values,
        row_values=row_values,
        cell_width=width / len(column_values) if column_values else 0.0,
        cell_height=height / len(row_values) if row_values else 0.0,
        cells=tuple(cells),
    )


def cells_in_range(layout: GridLayout, start: CellKey, end: CellKey) -> frozenset[CellKey]:
    """
    Every grid key inside the rectangle spanned by `start` and `end`, inclusive.

    The rectangle is taken over ordinal positions in the sorted value lists,
    so drag direction does not matter.
    """
    a = layout.ordinal(start)
    b = layout.ordinal(end)
    if a is None or b is None:
        return frozenset()

    col_lo, col_hi = min(a[0], b[0]), max(a[0], b[0])
    row_lo, row_hi = min(a[1], b[1]), max(a[1], b[1])
    return frozenset(
        (layout.column_values[c], layout.row_values[r])
        for c in range(col_lo, col_hi + 1)
        for r in range(row_lo, row_hi + 1)
    )


def toggle_cells(selected: AbstractSet[CellKey], key: CellKey) -> frozenset[CellKey]:
    """Clicking the only selected cell clears the selection; any other click selects just that cell."""
    if key in selected and len(selected) == 1:
        return frozenset()
    return frozenset([key])


def project_cells(dataset: Dataset, cells: AbstractSet[CellKey], column: str, row: str) -> Dataset:
    """Items of `dataset` belonging to `cells`; no cells means the whole dataset."""
    if not cells:
        return dataset
    mask = [key is not None and key in cells for _, key in _keys(dataset, column, row)]
    return dataset.filter_mask(mask)


# -----------------------------------------------------------------------------
# Stateful selector
# -----------------------------------------------------------------------------
class GridSelector:
    """
    Categorical grid selection with click-toggle and drag-range gestures.

    The selected cell set is canonical; the filtered item set is always
    re-derived from it with project_cells() over the full dataset.

    Gesture state machine:
        IDLE --pointer_down--> DRAGGING --pointer_enter(other cell)--> RANGE_SELECTED
        any --global pointer_up--> IDLE

    A pointer-up that never reached a second cell is resolved as a toggle of
    the start cell. Pointer-up is observed through a process-wide PointerEvents
    channel because the pointer may leave the grid mid-drag; the subscription
    lives exactly as long as this selector (see close()).
    """

    def __init__(
        self,
        attributes: AttributeMapping,
        width: float,
        height: float,
        *,
        events: PointerEvents = GLOBAL_POINTER_EVENTS,
    ):
        self.attributes = attributes
        self.width = float(width)
        self.height = float(height)

        self.selected_cells: frozenset[CellKey] = frozenset()
        self.drag_state = DragState.IDLE
        self._drag_start: Optional[CellKey] = None
        self._drag_moved = False

        self.layout = GridLayout()
        self.full_dataset = Dataset.empty(attributes)

        self._on_commit: Optional[Callable[..., None]] = None
        self._on_hover: Optional[Callable[[List[int]], None]] = None
        self._on_hover_clear: Optional[Callable[[], None]] = None

        self._subscription = events.subscribe(self._on_global_pointer_up)

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------
    @property
    def closed(self) -> bool:
        return not self._subscription.active

    def close(self) -> None:
        """Release the global pointer-up listener. Safe to call more than once."""
        self._subscription.close()

    def __enter__(self) -> GridSelector:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render(
        self,
        snapshot: Dataset,
        full_dataset: Dataset,
        on_commit: Callable[..., None],
        on_hover: Optional[Callable[[List[int]], None]] = None,
        on_hover_clear: Optional[Callable[[], None]] = None,
    ) -> GridLayout:
        """Recompute the grid for `snapshot`; filtering keeps drawing from `full_dataset`."""
        self.full_dataset = full_dataset
        self._on_commit = on_commit
        self._on_hover = on_hover
        self._on_hover_clear = on_hover_clear
        self.layout = compute_layout(
            snapshot, self.attributes.column, self.attributes.row, self.width, self.height
        )
        return self.layout

    def filtered_items(self) -> Dataset:
        return project_cells(
            self.full_dataset, self.selected_cells, self.attributes.column, self.attributes.row
        )

    def is_selected(self, key: CellKey) -> bool:
        return key in self.selected_cells

    # ------------------------------------------------------------------
    # Selection algebra
    # ------------------------------------------------------------------
    def toggle(self, key: CellKey) -> None:
        self.selected_cells = toggle_cells(self.selected_cells, key)
        self._commit()

    def select_range(self, start: CellKey, end: CellKey) -> frozenset[CellKey]:
        cells = cells_in_range(self.layout, start, end)
        if cells:
            self.selected_cells = cells
        return self.selected_cells

    def commit_range(self, start: CellKey, end: CellKey) -> bool:
        """
        Select and commit the rectangle between two grid positions in one step.

        Used for rectangles drawn in a single gesture, whose corners need not
        be occupied cells. A rectangle without any occupied cell is ignored.
        """
        if self.drag_state is not DragState.IDLE:
            return False
        cells = cells_in_range(self.layout, start, end)
        if not any(self.layout.cell(key) is not None for key in cells):
            return False
        self.selected_cells = cells
        self._commit()
        return True

    def clear(self) -> None:
        self.selected_cells = frozenset()
        self._commit()

    def _commit(self) -> None:
        if self._on_commit is None:
            return
        items = self.filtered_items()
        logger.info(
            "grid_commit",
            extra={"n_cells": len(self.selected_cells), "n_items": len(items)},
        )
        self._on_commit(items, filtered=bool(self.selected_cells))

    # ------------------------------------------------------------------
    # Pointer gestures
    # ------------------------------------------------------------------
    def pointer_down(self, key: CellKey) -> None:
        if self.layout.cell(key) is None:
            return
        self.drag_state = DragState.DRAGGING
        self._drag_start = key
        self._drag_moved = False

    def pointer_enter(self, key: CellKey) -> None:
        if self.drag_state is DragState.IDLE or self._drag_start is None:
            return
        # only a different cell updates the range; returning to the start keeps it
        if key == self._drag_start:
            return
        self._drag_moved = True
        self.drag_state = DragState.RANGE_SELECTED
        self.select_range(self._drag_start, key)

    def _on_global_pointer_up(self) -> None:
        if self.drag_state is DragState.IDLE:
            return

        start, moved = self._drag_start, self._drag_moved
        self.drag_state = DragState.IDLE
        self._drag_start = None
        self._drag_moved = False

        if moved:
            self._commit()
        elif start is not None:
            # never reached a second cell: a click, not a zero-area range
            self.toggle(start)

    def item_enter(self, index: int) -> None:
        if self._on_hover is not None:
            self._on_hover([index])

    def item_leave(self) -> None:
        if self._on_hover_clear is not None:
            self._on_hover_clear()
