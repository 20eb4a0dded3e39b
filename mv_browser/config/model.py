from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class AttributeMapping:
    """
    Semantic names for the tabular columns used internally by the engine.

    - index: stable identity column (assigned at load time if absent)
    - size: continuous attribute driving circle radius in the matrix view
    - position: continuous attribute plotted on the scatterplot y-axis
    - column / row: categorical attributes bucketing the matrix grid
    - tooltip: descriptive fields carried for display only
    """
    index: str = "index"
    size: str = "area"
    position: str = "price"
    column: str = "bedrooms"
    row: str = "bathrooms"
    tooltip: Tuple[str, ...] = (
        "stories",
        "mainroad",
        "guestroom",
        "basement",
        "hotwaterheating",
        "airconditioning",
        "parking",
        "prefarea",
        "furnishingstatus",
    )

    @property
    def numeric(self) -> Tuple[str, str]:
        return self.size, self.position

    @property
    def categorical(self) -> Tuple[str, str]:
        return self.column, self.row

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> AttributeMapping:
        default = cls()
        return cls(
            index=raw.get("index", default.index),
            size=raw.get("size", default.size),
            position=raw.get("position", default.position),
            column=raw.get("column", default.column),
            row=raw.get("row", default.row),
            tooltip=tuple(raw.get("tooltip", default.tooltip)),
        )


@dataclass(frozen=True)
class Margins:
    top: int = 20
    right: int = 20
    bottom: int = 20
    left: int = 20


@dataclass(frozen=True)
class ScatterConfig:
    """Plot area and marker settings for the brushable scatterplot."""
    width: int = 560
    height: int = 460
    margins: Margins = field(default_factory=lambda: Margins(top=100, right=10, bottom=50, left=100))
    default_opacity: float = 0.3
    marker_radius: float = 3.0

    @property
    def inner_width(self) -> float:
        return max(0, self.width - self.margins.left - self.margins.right)

    @property
    def inner_height(self) -> float:
        return max(0, self.height - self.margins.top - self.margins.bottom)


@dataclass(frozen=True)
class MatrixConfig:
    """Grid and circle-packing settings for the small-multiples matrix."""
    width: int = 600
    height: int = 600
    margins: Margins = field(default_factory=Margins)
    cell_padding: float = 10.0
    label_height: float = 25.0
    pack_padding: float = 3.0
    radius_range: Tuple[float, float] = (2.0, 20.0)
    default_opacity: float = 0.7
    dimmed_opacity: float = 0.2
    label_template: str = "{column}BR / {row}BA ({count})"

    @property
    def inner_width(self) -> float:
        return max(0, self.width - self.margins.left - self.margins.right)

    @property
    def inner_height(self) -> float:
        return max(0, self.height - self.margins.top - self.margins.bottom)


@dataclass
class BrowserConfig:
    ui_title: str = "Housing Multi-View Browser"
    data_file: Optional[Path] = None
    attributes: AttributeMapping = field(default_factory=AttributeMapping)
    scatter: ScatterConfig = field(default_factory=ScatterConfig)
    matrix: MatrixConfig = field(default_factory=MatrixConfig)
    transition_ms: int = 1000
    source_path: Optional[Path] = None

    @property
    def required_columns(self) -> List[str]:
        return [*self.attributes.numeric, *self.attributes.categorical]
