from __future__ import annotations

import logging

from mv_browser.core.dataset import Dataset
from mv_browser.core.history import HistoryManager

logger = logging.getLogger(__name__)


class RemovalManager:
    """
    Soft deletion ("exclude outlier") by item identity.

    Removed items are pruned from the full dataset and from every history
    entry, so no later render or navigation can bring them back. Removal is
    not a history action and cannot be undone.
    """

    def __init__(self, full_dataset: Dataset, history: HistoryManager):
        self._full = full_dataset
        self._history = history
        self._removed: set[int] = set()

    @property
    def full_dataset(self) -> Dataset:
        return self._full

    @property
    def removed(self) -> frozenset[int]:
        return frozenset(self._removed)

    def remove(self, index: int) -> bool:
        """Exclude `index` permanently. Unknown or already-removed indices are a no-op."""
        if index not in self._full:
            logger.debug("remove_ignored", extra={"index": index})
            return False

        self._removed.add(index)
        self._full = self._full.exclude([index])
        self._history.prune([index])
        logger.info("item_removed", extra={"index": index, "n_remaining": len(self._full)})
        return True
