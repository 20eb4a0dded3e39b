from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from mv_browser.config.model import AttributeMapping
from mv_browser.core.exceptions import DatasetSchemaError
from mv_browser.core.item import Item

logger = logging.getLogger(__name__)


class Dataset:
    """
    Ordered snapshot of items, backed by a DataFrame indexed by item identity.

    Includes:
    - Identity-keyed subsetting (order of the source snapshot is preserved)
    - Numeric column access with missing values coerced to NaN
    - Iteration as immutable Item records

    Snapshots are never mutated in place; every operation returns a new Dataset.
    """

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------
    def __init__(self, frame: pd.DataFrame, attributes: Optional[AttributeMapping] = None) -> None:
        self.attributes = attributes or AttributeMapping()

        if not frame.index.is_unique:
            raise DatasetSchemaError(
                f"Item identity column '{self.attributes.index}' contains duplicate values"
            )

        self._frame = frame
        self._frame.index.name = self.attributes.index
        self._index_set: Optional[frozenset[int]] = None

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        attributes: Optional[AttributeMapping] = None,
    ) -> Dataset:
        """
        Build a Dataset from plain mappings.

        If the identity column is missing, items are numbered by their
        position in `records`.
        """
        attributes = attributes or AttributeMapping()
        frame = pd.DataFrame(list(records))

        if attributes.index in frame.columns:
            frame = frame.set_index(attributes.index)
            frame.index = frame.index.astype(int)
        else:
            frame.index = pd.RangeIndex(len(frame))

        return cls(frame, attributes)

    @classmethod
    def empty(cls, attributes: Optional[AttributeMapping] = None) -> Dataset:
        return cls(pd.DataFrame(index=pd.Index([], dtype=int)), attributes)

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._frame)

    def __iter__(self) -> Iterator[Item]:
        records: Dict[int, Dict[str, Any]] = self._frame.to_dict("index")
        for index, attrs in records.items():
            yield Item(index=int(index), attributes=attrs)

    def __contains__(self, index: object) -> bool:
        return index in self.index_set

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        return self.indices == other.indices

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Dataset(n_items={len(self)})"

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------
    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    @property
    def indices(self) -> List[int]:
        return [int(i) for i in self._frame.index]

    @property
    def index_set(self) -> frozenset[int]:
        if self._index_set is None:
            self._index_set = frozenset(self.indices)
        return self._index_set

    def column(self, name: str) -> pd.Series:
        """Return a raw column; unknown columns yield an all-NaN series."""
        if name not in self._frame.columns:
            return pd.Series(np.nan, index=self._frame.index, name=name)
        return self._frame[name]

    def numeric(self, name: str) -> pd.Series:
        """Return a column as float, with non-numeric cells coerced to NaN."""
        return pd.to_numeric(self.column(name), errors="coerce").astype(float)

    # -------------------------------------------------------------------------
    # Identity-keyed subsetting
    # -------------------------------------------------------------------------
    def subset(self, indices: Iterable[int]) -> Dataset:
        """
        Return the items whose identity is in `indices`, in this snapshot's order.

        Unknown identities are ignored.
        """
        wanted = set(indices)
        unknown = wanted - self.index_set
        if unknown:
            logger.debug("Ignoring unknown item indices", extra={"unknown": sorted(unknown)[:20]})

        mask = self._frame.index.isin(list(wanted))
        return Dataset(self._frame[mask].copy(), self.attributes)

    def exclude(self, indices: Iterable[int]) -> Dataset:
        dropped = set(indices)
        if not dropped & self.index_set:
            return self
        mask = ~self._frame.index.isin(list(dropped))
        return Dataset(self._frame[mask].copy(), self.attributes)

    def filter_mask(self, mask: Sequence[bool]) -> Dataset:
        return Dataset(self._frame[np.asarray(mask, dtype=bool)].copy(), self.attributes)
