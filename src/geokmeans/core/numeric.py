"""
Scalar arithmetic shared by the clustering layers.

The algorithm is generic over the floating precision of its coordinates. A `Precision`
bundles everything the other modules need from a scalar type:
- conversion (`cast`, `from_count`, `to_count`),
- the "no distance yet" sentinel (`max_value`),
- NaN/finiteness checks,
- bounded random generation on top of a `RandomSource`.

Arithmetic and ordering come from numpy scalars (`numpy.float32` / `numpy.float64`), so a
value produced by one precision stays in that precision through `+ - * /` and comparisons.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

from geokmeans.core.errors import InvalidConfigurationError

if TYPE_CHECKING:
    from geokmeans.core.random import RandomSource


class Units(str, Enum):
    """Distance unit and the sphere radius used by haversine."""

    MILES = "miles"
    KILOMETERS = "kilometers"

    @property
    def radius(self) -> float:
        return 3960.0 if self is Units.MILES else 6371.0

    @classmethod
    def parse(cls, value: Units | str) -> Units:
        if isinstance(value, Units):
            return value
        key = str(value).strip().lower()
        aliases = {"mi": cls.MILES, "mile": cls.MILES, "km": cls.KILOMETERS, "kilometer": cls.KILOMETERS}
        if key in aliases:
            return aliases[key]
        try:
            return cls(key)
        except ValueError as exc:
            raise InvalidConfigurationError(f"Unknown distance unit: {value!r}") from exc


@dataclass(frozen=True)
class Precision:
    """A floating scalar type the clustering algorithm can run over."""

    name: str
    dtype: type[np.floating]

    def cast(self, value: Any) -> np.floating:
        return self.dtype(value)

    def zero(self) -> np.floating:
        return self.dtype(0)

    def from_count(self, n: int) -> np.floating:
        return self.dtype(int(n))

    def to_count(self, value: Any) -> int:
        if self.is_nan(value) or value < 0:
            raise ValueError(f"Cannot convert {value!r} to a count")
        return int(value)

    def max_value(self) -> np.floating:
        return self.dtype(np.finfo(self.dtype).max)

    def minimum(self, a: Any, b: Any) -> np.floating:
        return self.cast(a if a <= b else b)

    def maximum(self, a: Any, b: Any) -> np.floating:
        return self.cast(a if a >= b else b)

    def is_nan(self, value: Any) -> bool:
        return bool(np.isnan(value))

    def is_finite(self, value: Any) -> bool:
        return bool(np.isfinite(value))

    def random(self, source: RandomSource, low: Any = None, high: Any = None) -> np.floating:
        """Sample a value in `[low, high)`, or in `[0, 1)` when a bound is missing."""
        if low is None or high is None:
            low, high = 0.0, 1.0
        value = self.cast(source.uniform(float(low), float(high)))
        high_cast = self.cast(high)
        # Narrowing to float32 can round a sample up onto the excluded upper bound.
        if value >= high_cast and high_cast > self.cast(low):
            value = np.nextafter(high_cast, self.cast(low))
        return value


FLOAT32 = Precision(name="float32", dtype=np.float32)
FLOAT64 = Precision(name="float64", dtype=np.float64)

_PRECISIONS: dict[str, Precision] = {
    "float32": FLOAT32,
    "f32": FLOAT32,
    "single": FLOAT32,
    "float64": FLOAT64,
    "f64": FLOAT64,
    "double": FLOAT64,
}


def get_precision(value: Precision | str) -> Precision:
    """Resolve a precision by name (`float32`/`float64`, or the `f32`/`f64` aliases)."""
    if isinstance(value, Precision):
        return value
    try:
        return _PRECISIONS[str(value).strip().lower()]
    except KeyError as exc:
        raise InvalidConfigurationError(f"Unknown precision: {value!r}") from exc
