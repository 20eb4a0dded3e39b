from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

DEFAULT_DOMAIN: Tuple[float, float] = (0.0, 1.0)


def extent(values: Iterable[float]) -> Tuple[float, float]:
    """
    (min, max) of the finite values, ignoring NaN/missing.

    Falls back to DEFAULT_DOMAIN when nothing finite is left, so scales built
    over empty snapshots stay valid.
    """
    arr = np.asarray(list(values), dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        return DEFAULT_DOMAIN
    return float(arr.min()), float(arr.max())


@dataclass(frozen=True)
class LinearScale:
    """
    Continuous domain -> range mapping.

    A degenerate domain (min == max) maps every value to the middle of the
    range instead of dividing by zero.
    """
    domain: Tuple[float, float] = DEFAULT_DOMAIN
    range: Tuple[float, float] = (0.0, 1.0)

    @classmethod
    def from_values(cls, values: Iterable[float], range: Tuple[float, float]) -> "LinearScale":
        return cls(domain=extent(values), range=range)

    def _transform(self, value: float) -> float:
        return value

    def normalize(self, value: float) -> float:
        d0 = self._transform(self.domain[0])
        d1 = self._transform(self.domain[1])
        span = d1 - d0
        if span == 0:
            return 0.5
        return (self._transform(value) - d0) / span

    def __call__(self, value: float) -> float:
        value = float(value)
        if math.isnan(value):
            return math.nan
        r0, r1 = self.range
        return r0 + self.normalize(value) * (r1 - r0)

    def apply(self, values: Iterable[float]) -> np.ndarray:
        return np.array([self(v) for v in values], dtype=float)


@dataclass(frozen=True)
class SqrtScale(LinearScale):
    """Square-root scale: suited to radii, where area grows with r²."""

    def _transform(self, value: float) -> float:
        return math.copysign(math.sqrt(abs(value)), value)
