from __future__ import annotations

import math
import numbers
from typing import Any, Dict, List

from mv_browser.config.model import AttributeMapping
from mv_browser.core.item import as_number, is_missing

MISSING = "N/A"

# Display names for the housing columns; anything else is title-cased
_LABELS: Dict[str, str] = {
    "price": "Price",
    "area": "Area",
    "bedrooms": "Bedrooms",
    "bathrooms": "Bathrooms",
    "stories": "Stories",
    "mainroad": "Main Road",
    "guestroom": "Guest Room",
    "basement": "Basement",
    "hotwaterheating": "Hot Water Heating",
    "airconditioning": "Air Conditioning",
    "parking": "Parking",
    "prefarea": "Preferred Area",
    "furnishingstatus": "Furnishing Status",
}


def label_for(column: str) -> str:
    return _LABELS.get(column, column.replace("_", " ").title())


def _fmt(value: Any) -> str:
    if is_missing(value):
        return MISSING
    if isinstance(value, float) and value.is_integer():
        return f"{int(value):,}"
    if isinstance(value, numbers.Number):
        return f"{value:,}"
    return str(value)


def ratio(position: Any, size: Any) -> float:
    """position / size, NaN when either side is missing or size is zero."""
    p, s = as_number(position), as_number(size)
    if math.isnan(p) or math.isnan(s) or s == 0:
        return float("nan")
    return p / s


def format_tooltip(record: Dict[str, Any], attributes: AttributeMapping) -> str:
    """Multi-line hover text for one item; missing values render as N/A."""
    position = record.get(attributes.position)
    size = record.get(attributes.size)
    per_unit = ratio(position, size)

    lines: List[str] = [
        f"{label_for(attributes.position)}: {_fmt(position)}",
        f"{label_for(attributes.position)}/{label_for(attributes.size)}: "
        f"{MISSING if math.isnan(per_unit) else _fmt(round(per_unit))}",
        f"{label_for(attributes.size)}: {_fmt(size)}",
        f"{label_for(attributes.column)}: {_fmt(record.get(attributes.column))}",
        f"{label_for(attributes.row)}: {_fmt(record.get(attributes.row))}",
    ]
    lines.extend(f"{label_for(name)}: {_fmt(record.get(name))}" for name in attributes.tooltip)
    return "<br>".join(lines)
