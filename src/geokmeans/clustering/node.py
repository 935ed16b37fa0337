"""
Centroid node: one cluster slot inside a Partition.

A node is rebuilt every round. It holds the round's input centroid (`location`), the points
assigned to it, and the sum of their distances to `location`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from geokmeans.core.errors import DegenerateCentroidError
from geokmeans.core.geo import BoundingBox, Coordinate
from geokmeans.core.numeric import FLOAT64, Precision
from geokmeans.core.random import RandomSource
from geokmeans.domain.models import Locatable


@dataclass
class CentroidNode:
    location: Coordinate
    precision: Precision = FLOAT64
    members: list[Locatable] = field(default_factory=list)
    accumulated_distance: Any = None

    def __post_init__(self) -> None:
        self.location = self.location.cast(self.precision)
        if self.accumulated_distance is None:
            self.accumulated_distance = self.precision.zero()

    @classmethod
    def random(
        cls,
        precision: Precision,
        source: RandomSource,
        bounds: BoundingBox | None = None,
    ) -> CentroidNode:
        """Create an empty node at a location sampled in `bounds` (the valid domain by default)."""
        box = bounds or BoundingBox.world()
        return cls(location=box.sample(precision, source), precision=precision)

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def is_empty(self) -> bool:
        return not self.members

    def assign(self, point: Locatable) -> None:
        self.members.append(point)

    def accumulate_distance(self, distance: Any) -> None:
        self.accumulated_distance += self.precision.cast(distance)

    def mean_of_members(self) -> Coordinate:
        """Arithmetic mean of the members' coordinates; the node must not be empty."""
        if not self.members:
            raise DegenerateCentroidError(f"Cannot compute a centroid for an empty node at {self.location}")
        sum_lat = self.precision.zero()
        sum_lng = self.precision.zero()
        for member in self.members:
            c = Coordinate.coerce(member)
            sum_lat += self.precision.cast(c.lat)
            sum_lng += self.precision.cast(c.lng)
        count = self.precision.from_count(len(self.members))
        return Coordinate(lat=sum_lat / count, lng=sum_lng / count)

    def recompute_centroid(self) -> Coordinate | None:
        """Return the members' mean, or `None` when the node has no members."""
        if self.is_empty:
            return None
        return self.mean_of_members()

    def has_single_location(self) -> bool:
        """True when every member sits on the same coordinate (a collapsed cluster)."""
        coords = {Coordinate.coerce(member).as_tuple() for member in self.members}
        return len(coords) <= 1

    def payloads(self) -> list[Any]:
        return [getattr(member, "payload", member) for member in self.members]
