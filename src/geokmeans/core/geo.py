from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import numpy as np

from geokmeans.core.errors import NonFiniteDistanceError
from geokmeans.core.numeric import FLOAT64, Precision, Units
from geokmeans.core.random import RandomSource

"""
Geospatial helpers.

A tiny geometry layer: coordinates, lat/lng bounding boxes and the haversine distance.
No range validation happens here; the valid domain is only used when sampling.
"""

LAT_RANGE: tuple[float, float] = (-90.0, 90.0)
LNG_RANGE: tuple[float, float] = (-180.0, 180.0)


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    lat: Any
    lng: Any

    @classmethod
    def coerce(cls, value: Any) -> Coordinate:
        """Accept a Coordinate, a `(lat, lng)` pair, or anything exposing `get_coordinate()`."""
        if isinstance(value, Coordinate):
            return value
        getter = getattr(value, "get_coordinate", None)
        if callable(getter):
            return cls.coerce(getter())
        lat, lng = value
        return cls(lat=lat, lng=lng)

    def cast(self, precision: Precision) -> Coordinate:
        return Coordinate(lat=precision.cast(self.lat), lng=precision.cast(self.lng))

    def as_tuple(self) -> tuple[float, float]:
        return float(self.lat), float(self.lng)


@dataclass(frozen=True)
class BoundingBox:
    """Per-axis min/max of a set of coordinates."""

    min_lat: Any
    max_lat: Any
    min_lng: Any
    max_lng: Any

    @classmethod
    def world(cls) -> BoundingBox:
        return cls(min_lat=LAT_RANGE[0], max_lat=LAT_RANGE[1], min_lng=LNG_RANGE[0], max_lng=LNG_RANGE[1])

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[Coordinate]) -> BoundingBox | None:
        """Fold coordinates into their bounding box; `None` when there are none."""
        box: BoundingBox | None = None
        for c in coordinates:
            if box is None:
                box = cls(min_lat=c.lat, max_lat=c.lat, min_lng=c.lng, max_lng=c.lng)
                continue
            box = cls(
                min_lat=min(box.min_lat, c.lat),
                max_lat=max(box.max_lat, c.lat),
                min_lng=min(box.min_lng, c.lng),
                max_lng=max(box.max_lng, c.lng),
            )
        return box

    def contains(self, c: Coordinate) -> bool:
        return self.min_lat <= c.lat <= self.max_lat and self.min_lng <= c.lng <= self.max_lng

    def sample(self, precision: Precision, source: RandomSource) -> Coordinate:
        return Coordinate(
            lat=precision.random(source, self.min_lat, self.max_lat),
            lng=precision.random(source, self.min_lng, self.max_lng),
        )


def haversine(a: Any, b: Any, *, units: Units = Units.MILES, precision: Precision = FLOAT64) -> Any:
    """Compute the great-circle distance between two coordinates in the given units."""
    a = Coordinate.coerce(a)
    b = Coordinate.coerce(b)
    lat1 = np.radians(precision.cast(a.lat))
    lat2 = np.radians(precision.cast(b.lat))
    dlat = lat2 - lat1
    dlng = np.radians(precision.cast(b.lng)) - np.radians(precision.cast(a.lng))

    h = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlng / 2) ** 2
    if not precision.is_finite(h):
        raise NonFiniteDistanceError(
            f"Non-finite haversine term between {a.as_tuple()} and {b.as_tuple()}"
        )
    # Rounding can push h just outside [0, 1] for antipodal points.
    h = precision.maximum(precision.zero(), precision.minimum(h, precision.cast(1)))
    distance = precision.cast(2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h)) * precision.cast(units.radius))

    if not precision.is_finite(distance):
        raise NonFiniteDistanceError(
            f"Non-finite haversine distance between {a.as_tuple()} and {b.as_tuple()}"
        )
    return distance


def haversine_miles(a: Any, b: Any, precision: Precision = FLOAT64) -> Any:
    """Great-circle distance in miles (sphere radius 3960)."""
    return haversine(a, b, units=Units.MILES, precision=precision)


def haversine_km(a: Any, b: Any, precision: Precision = FLOAT64) -> Any:
    """Great-circle distance in kilometers (sphere radius 6371)."""
    return haversine(a, b, units=Units.KILOMETERS, precision=precision)
