from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional


@dataclass
class SelectionState:
    """
    Item-level selection shared by both views.

    Fields:

    - selected: indices of the last committed filtering action
    - hovered: transient pointer hover, never committed to history
    - brushed: raw brush output, None when no brush is active
    - is_filtered: whether the active snapshot came from a filtering action
    - navigated: the selection was emptied by a history move rather than a commit
    """
    selected: frozenset[int] = field(default_factory=frozenset)
    hovered: frozenset[int] = field(default_factory=frozenset)
    brushed: Optional[frozenset[int]] = None
    is_filtered: bool = False
    navigated: bool = False

    def commit(self, indices: Iterable[int], *, filtered: bool) -> None:
        self.selected = frozenset(indices)
        self.is_filtered = filtered
        self.navigated = False

    def hover(self, indices: Iterable[int]) -> None:
        # entering an item replaces any previous hover
        self.hovered = frozenset(indices)

    def clear_hover(self) -> None:
        self.hovered = frozenset()

    def clear_brush(self) -> None:
        self.brushed = None
        self.selected = frozenset()

    def reset_for_cursor(self, cursor: int) -> None:
        """State after any history move: nothing selected, filtered unless at the initial load."""
        self.selected = frozenset()
        self.hovered = frozenset()
        self.brushed = None
        self.is_filtered = cursor > 0
        self.navigated = True

    def discard(self, indices: Iterable[int]) -> None:
        dropped = frozenset(indices)
        self.selected -= dropped
        self.hovered -= dropped
        if self.brushed is not None:
            self.brushed -= dropped
