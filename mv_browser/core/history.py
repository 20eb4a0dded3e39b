from __future__ import annotations

import logging
from typing import Iterable, List

from mv_browser.core.dataset import Dataset

logger = logging.getLogger(__name__)


class HistoryManager:
    """
    Linear undo/redo over dataset snapshots.

    Invariants:
    - entry 0 is always the unfiltered initial load
    - 0 <= cursor < len(self)
    - push() discards every entry past the cursor (no redo branches)
    """

    def __init__(self, initial: Dataset):
        self._entries: List[Dataset] = [initial]
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def can_back(self) -> bool:
        return self._cursor > 0

    @property
    def can_forward(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def current(self) -> Dataset:
        return self._entries[self._cursor]

    def push(self, snapshot: Dataset) -> None:
        discarded = len(self._entries) - self._cursor - 1
        del self._entries[self._cursor + 1:]
        self._entries.append(snapshot)
        self._cursor = len(self._entries) - 1
        logger.info(
            "history_push",
            extra={"cursor": self._cursor, "n_items": len(snapshot), "discarded": discarded},
        )

    def back(self) -> bool:
        """Move one entry back. Returns False (and does nothing) at the first entry."""
        if not self.can_back:
            return False
        self._cursor -= 1
        logger.info("history_back", extra={"cursor": self._cursor})
        return True

    def forward(self) -> bool:
        """Move one entry forward. Returns False (and does nothing) at the last entry."""
        if not self.can_forward:
            return False
        self._cursor += 1
        logger.info("history_forward", extra={"cursor": self._cursor})
        return True

    def prune(self, indices: Iterable[int]) -> None:
        """Drop items from every entry. Cursor and entry count are unchanged."""
        removed = frozenset(indices)
        self._entries = [entry.exclude(removed) for entry in self._entries]
