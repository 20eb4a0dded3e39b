from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Hashable, Mapping, Optional, Tuple

CellKey = Tuple[Hashable, Hashable]


def as_number(value: Any) -> float:
    """Coerce a raw attribute to float, mapping missing/non-numeric values to NaN."""
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False


@dataclass(frozen=True)
class Item:
    """
    One loaded record.

    `index` is assigned once at ingestion and is the only identity used by
    selections; everything else lives in `attributes` keyed by column name.
    """
    index: int
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def cell_key(self, column: str, row: str) -> Optional[CellKey]:
        """Return the (column value, row value) grid key, or None if either is missing."""
        col_value = self.attributes.get(column)
        row_value = self.attributes.get(row)
        if is_missing(col_value) or is_missing(row_value):
            return None
        return col_value, row_value
