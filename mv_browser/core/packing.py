"""
Circle packing for the matrix cells.

Siblings are placed with the front-chain algorithm (Wang et al., "Visualization
of large hierarchical data by circle packing") and wrapped by their smallest
enclosing circle (Welzl's move-to-front, over circles). The packed group is then
scaled to fit and centred in the target area.

Displayed radii always come from the shared radius scale; the scaled packing
only decides positions.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from mv_browser.core.dataset import Dataset
from mv_browser.core.exceptions import PackingError
from mv_browser.core.scales import SqrtScale

logger = logging.getLogger(__name__)

PACK_SEED = 0x5EED


@dataclass
class Circle:
    x: float = 0.0
    y: float = 0.0
    r: float = 0.0


@dataclass(frozen=True)
class PackedCircle:
    index: int
    x: float
    y: float
    r: float


class _Node:
    __slots__ = ("circle", "next", "previous")

    def __init__(self, circle: Circle):
        self.circle = circle
        self.next: Optional[_Node] = None
        self.previous: Optional[_Node] = None


# -----------------------------------------------------------------------------
# Enclosing circle
# -----------------------------------------------------------------------------
def _encloses_not(a: Circle, b: Circle) -> bool:
    dr = a.r - b.r
    dx = b.x - a.x
    dy = b.y - a.y
    return dr < 0 or dr * dr < dx * dx + dy * dy


def _encloses_weak(a: Circle, b: Circle) -> bool:
    dr = a.r - b.r + max(a.r, b.r, 1.0) * 1e-9
    dx = b.x - a.x
    dy = b.y - a.y
    return dr > 0 and dr * dr > dx * dx + dy * dy


def _encloses_weak_all(a: Circle, basis: Sequence[Circle]) -> bool:
    return all(_encloses_weak(a, b) for b in basis)


def _enclose_basis_2(a: Circle, b: Circle) -> Circle:
    x21 = b.x - a.x
    y21 = b.y - a.y
    r21 = b.r - a.r
    length = math.hypot(x21, y21)
    return Circle(
        x=(a.x + b.x + x21 / length * r21) / 2,
        y=(a.y + b.y + y21 / length * r21) / 2,
        r=(length + a.r + b.r) / 2,
    )


def _enclose_basis_3(a: Circle, b: Circle, c: Circle) -> Circle:
    x1, y1, r1 = a.x, a.y, a.r
    a2 = x1 - b.x
    a3 = x1 - c.x
    b2 = y1 - b.y
    b3 = y1 - c.y
    c2 = b.r - r1
    c3 = c.r - r1
    d1 = x1 * x1 + y1 * y1 - r1 * r1
    d2 = d1 - b.x * b.x - b.y * b.y + b.r * b.r
    d3 = d1 - c.x * c.x - c.y * c.y + c.r * c.r
    ab = a3 * b2 - a2 * b3
    xa = (b2 * d3 - b3 * d2) / (ab * 2) - x1
    xb = (b3 * c2 - b2 * c3) / ab
    ya = (a3 * d2 - a2 * d3) / (ab * 2) - y1
    yb = (a2 * c3 - a3 * c2) / ab
    qa = xb * xb + yb * yb - 1
    qb = 2 * (r1 + xa * xb + ya * yb)
    qc = xa * xa + ya * ya - r1 * r1
    if abs(qa) > 1e-6:
        r = -(qb + math.sqrt(max(0.0, qb * qb - 4 * qa * qc))) / (2 * qa)
    else:
        r = -qc / qb
    return Circle(x=x1 + xa + xb * r, y=y1 + ya + yb * r, r=r)


def _enclose_basis(basis: Sequence[Circle]) -> Circle:
    if len(basis) == 1:
        only = basis[0]
        return Circle(only.x, only.y, only.r)
    if len(basis) == 2:
        return _enclose_basis_2(basis[0], basis[1])
    return _enclose_basis_3(basis[0], basis[1], basis[2])


def _extend_basis(basis: List[Circle], p: Circle) -> List[Circle]:
    if _encloses_weak_all(p, basis):
        return [p]

    for b in basis:
        if _encloses_not(p, b) and _encloses_weak_all(_enclose_basis_2(b, p), basis):
            return [b, p]

    for i in range(len(basis) - 1):
        for j in range(i + 1, len(basis)):
            bi, bj = basis[i], basis[j]
            if (
                _encloses_not(_enclose_basis_2(bi, bj), p)
                and _encloses_not(_enclose_basis_2(bi, p), bj)
                and _encloses_not(_enclose_basis_2(bj, p), bi)
                and _encloses_weak_all(_enclose_basis_3(bi, bj, p), basis)
            ):
                return [bi, bj, p]

    raise PackingError("no enclosing basis found")


def enclose(circles: Sequence[Circle], rng: Optional[np.random.Generator] = None) -> Optional[Circle]:
    """Smallest circle enclosing every circle in `circles` (None when empty)."""
    if not circles:
        return None
    rng = rng if rng is not None else np.random.default_rng(PACK_SEED)
    shuffled = [circles[i] for i in rng.permutation(len(circles))]

    basis: List[Circle] = []
    e: Optional[Circle] = None
    i = 0
    while i < len(shuffled):
        p = shuffled[i]
        if e is not None and _encloses_weak(e, p):
            i += 1
        else:
            basis = _extend_basis(basis, p)
            e = _enclose_basis(basis)
            i = 0
    return e


# -----------------------------------------------------------------------------
# Front-chain sibling packing
# -----------------------------------------------------------------------------
def _place(b: Circle, a: Circle, c: Circle) -> None:
    """Position c tangent to both a and b."""
    dx = b.x - a.x
    dy = b.y - a.y
    d2 = dx * dx + dy * dy
    if d2:
        a2 = (a.r + c.r) ** 2
        b2 = (b.r + c.r) ** 2
        if a2 > b2:
            x = (d2 + b2 - a2) / (2 * d2)
            y = math.sqrt(max(0.0, b2 / d2 - x * x))
            c.x = b.x - x * dx - y * dy
            c.y = b.y - x * dy + y * dx
        else:
            x = (d2 + a2 - b2) / (2 * d2)
            y = math.sqrt(max(0.0, a2 / d2 - x * x))
            c.x = a.x + x * dx - y * dy
            c.y = a.y + x * dy + y * dx
    else:
        c.x = a.x + c.r
        c.y = a.y


def _intersects(a: Circle, b: Circle) -> bool:
    dr = a.r + b.r - 1e-6
    dx = b.x - a.x
    dy = b.y - a.y
    return dr > 0 and dr * dr > dx * dx + dy * dy


def _score(node: _Node) -> float:
    a = node.circle
    b = node.next.circle
    ab = a.r + b.r
    dx = (a.x * b.r + b.x * a.r) / ab
    dy = (a.y * b.r + b.y * a.r) / ab
    return dx * dx + dy * dy


def pack_siblings(circles: List[Circle], rng: Optional[np.random.Generator] = None) -> float:
    """
    Place `circles` (radii set, positions overwritten) so none overlap.

    The group is centred on the origin; returns the enclosing radius.
    """
    n = len(circles)
    if n == 0:
        return 0.0

    a = circles[0]
    a.x, a.y = 0.0, 0.0
    if n == 1:
        return a.r

    b = circles[1]
    a.x = -b.r
    b.x, b.y = a.r, 0.0
    if n == 2:
        return a.r + b.r

    _place(b, a, circles[2])

    na, nb, nc = _Node(a), _Node(b), _Node(circles[2])
    na.next = nc.previous = nb
    nb.next = na.previous = nc
    nc.next = nb.previous = na

    i = 3
    while i < n:
        _place(na.circle, nb.circle, circles[i])
        nc = _Node(circles[i])

        # Find the closest intersecting circle on the front-chain, if any
        j, k = nb.next, na.previous
        sj, sk = nb.circle.r, na.circle.r
        retry = False
        while True:
            if sj <= sk:
                if _intersects(j.circle, nc.circle):
                    nb = j
                    na.next, nb.previous = nb, na
                    retry = True
                    break
                sj += j.circle.r
                j = j.next
            else:
                if _intersects(k.circle, nc.circle):
                    na = k
                    na.next, nb.previous = nb, na
                    retry = True
                    break
                sk += k.circle.r
                k = k.previous
            if j is k.next:
                break
        if retry:
            continue

        # Insert c between a and b
        nc.previous, nc.next = na, nb
        na.next = nb.previous = nc
        nb = nc

        # New closest pair to the centroid
        best = _score(na)
        node = nc.next
        while node is not nb:
            candidate = _score(node)
            if candidate < best:
                na, best = node, candidate
            node = node.next
        nb = na.next
        i += 1

    chain = [nb.circle]
    node = nb.next
    while node is not nb:
        chain.append(node.circle)
        node = node.next
    e = enclose(chain, rng)

    for circle in circles:
        circle.x -= e.x
        circle.y -= e.y
    return e.r


# -----------------------------------------------------------------------------
# Layout helpers used by the matrix view
# -----------------------------------------------------------------------------
def radius_scale(dataset: Dataset, size_attr: str, radius_range: Tuple[float, float]) -> SqrtScale:
    """
    Global radius scale for one render pass.

    Built over every rendered item (not per cell) so radii are comparable
    across cells.
    """
    return SqrtScale.from_values(dataset.numeric(size_attr), radius_range)


def global_radii(dataset: Dataset, size_attr: str, scale: SqrtScale) -> pd.Series:
    """Per-item radius; missing sizes get the smallest radius."""
    radii = pd.Series(scale.apply(dataset.numeric(size_attr)), index=dataset.frame.index, dtype=float)
    return radii.fillna(min(scale.range))


def _pack_scaled(radii: Sequence[float], padding: float, size: Tuple[float, float]) -> List[Circle]:
    width, height = size
    extent = min(width, height)

    circles = [Circle(r=float(r)) for r in radii]

    # First pass without padding to learn the unpadded enclosing radius
    root_r = pack_siblings(circles, np.random.default_rng(PACK_SEED))

    if padding > 0 and extent > 0 and root_r > 0:
        pad = padding * root_r / extent
        for c in circles:
            c.r += pad
        root_r = pack_siblings(circles, np.random.default_rng(PACK_SEED)) + pad
        for c in circles:
            c.r -= pad

    k = extent / (2 * root_r) if root_r > 0 and extent > 0 else 0.0
    return [Circle(x=width / 2 + k * c.x, y=height / 2 + k * c.y, r=c.r * k) for c in circles]


def pack_cell(
    indices: Sequence[int],
    radii: Sequence[float],
    size: Tuple[float, float],
    padding: float = 3.0,
) -> List[PackedCircle]:
    """
    Pack one cell's items into an area of `size` (width, height).

    Items are packed in identity order so the layout is stable across renders.
    Positions are relative to the area's top-left corner; `r` is the radius
    passed in, never the scaled packing radius.
    """
    if len(indices) == 0:
        return []

    width = max(0.0, float(size[0]))
    height = max(0.0, float(size[1]))

    order = sorted(range(len(indices)), key=lambda i: indices[i])
    ordered_idx = [int(indices[i]) for i in order]
    # packing is sized by r² as value, i.e. sqrt(value) = r
    ordered_r = [float(radii[i]) for i in order]

    try:
        placed = _pack_scaled(ordered_r, padding, (width, height))
    except (PackingError, ZeroDivisionError, ValueError):
        logger.warning(
            "Circle packing failed; centring items instead",
            extra={"n_items": len(indices)},
        )
        placed = [Circle(x=width / 2, y=height / 2) for _ in ordered_r]

    return [
        PackedCircle(index=idx, x=c.x, y=c.y, r=r)
        for idx, c, r in zip(ordered_idx, placed, ordered_r)
    ]
