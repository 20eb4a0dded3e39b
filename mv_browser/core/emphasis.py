from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Optional

FULL_OPACITY = 1.0
BORDER_WIDTH = 2


@dataclass(frozen=True)
class Emphasis:
    """Declarative visual state of one item; views apply it, the engine never draws."""
    opacity: float
    border: bool = False

    @property
    def stroke_width(self) -> int:
        return BORDER_WIDTH if self.border else 0


def highlighted_indices(
    selected: AbstractSet[int],
    hovered: AbstractSet[int],
    is_filtered: bool,
) -> frozenset[int]:
    """
    Indices that receive emphasis in the scatterplot.

    While filtered, the snapshot itself already expresses the selection, so
    only hover is layered on top; otherwise selection and hover combine.
    """
    if is_filtered:
        return frozenset(hovered)
    return frozenset(selected) | frozenset(hovered)


def compute_emphasis(
    index: int,
    selected: AbstractSet[int],
    hovered: AbstractSet[int],
    is_filtered: bool,
    *,
    default_opacity: float = 0.3,
) -> Emphasis:
    if index in highlighted_indices(selected, hovered, is_filtered):
        return Emphasis(opacity=FULL_OPACITY, border=True)
    return Emphasis(opacity=default_opacity, border=False)


def grid_emphasis(
    index: int,
    selected: Optional[AbstractSet[int]],
    *,
    default_opacity: float = 0.7,
    dimmed_opacity: float = 0.2,
) -> Emphasis:
    """
    Emphasis for circles in the matrix view.

    `selected` is None while no highlight has been issued, and every circle
    sits at the default opacity. Otherwise selected circles are fully opaque
    and the rest are dimmed, so an explicitly empty selection dims them all.
    """
    if selected is None:
        return Emphasis(opacity=default_opacity)
    if index in selected:
        return Emphasis(opacity=FULL_OPACITY)
    return Emphasis(opacity=dimmed_opacity)
