"""
Random source used for centroid placement and reseeding.

The clustering code only needs "a uniform value in [low, high)". Callers can pass any
object with that method (tests inject scripted sources); the default wraps a numpy
`Generator` so a seed makes a whole run reproducible.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class RandomSource(Protocol):
    def uniform(self, low: float, high: float) -> float: ...


class NumpyRandomSource:
    """`RandomSource` backed by `numpy.random.default_rng`."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, low: float, high: float) -> float:
        if high <= low:
            return float(low)
        return float(self._rng.uniform(low, high))

    def integers(self, high: int) -> int:
        """Return an integer in `[0, high)`."""
        return int(self._rng.integers(high))

    def __repr__(self) -> str:
        return f"NumpyRandomSource(seed={self.seed!r})"
