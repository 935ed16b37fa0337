"""
Partition: the `k` centroid nodes of one round.

A round moves through three steps:
- Seeding: place `k` nodes (explicit centroids verbatim, or random initialization),
- Assigning: every point goes to its nearest node (O(n*k) haversine scan),
- Aggregating: non-empty nodes produce their mean as the next round's centroid.

Node identity is its index in `nodes`; it is stable for the lifetime of the partition.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Literal, Sequence

from geokmeans.clustering.node import CentroidNode
from geokmeans.core.errors import InvalidConfigurationError
from geokmeans.core.geo import BoundingBox, Coordinate, haversine
from geokmeans.core.numeric import FLOAT64, Precision, Units
from geokmeans.core.random import RandomSource
from geokmeans.domain.models import Locatable

logger = logging.getLogger(__name__)

InitStrategy = Literal["bounding_box", "sample_points"]


def _sample_indices(n: int, k: int, source: RandomSource) -> list[int]:
    # Partial Fisher-Yates; sources without `integers` fall back to truncated `uniform`.
    integers = getattr(source, "integers", None)
    pool = list(range(n))
    picked: list[int] = []
    for i in range(k):
        remaining = n - i
        if callable(integers):
            j = integers(remaining)
        else:
            j = min(int(source.uniform(0, remaining)), remaining - 1)
        pool[j], pool[remaining - 1] = pool[remaining - 1], pool[j]
        picked.append(pool[remaining - 1])
    return picked


class Partition:
    def __init__(
        self,
        nodes: list[CentroidNode],
        *,
        units: Units = Units.MILES,
        precision: Precision = FLOAT64,
    ):
        if not nodes:
            raise InvalidConfigurationError("a partition needs at least one centroid node")
        self.nodes = nodes
        self.units = units
        self.precision = precision

    @classmethod
    def seed(
        cls,
        k: int,
        points: Sequence[Locatable],
        *,
        source: RandomSource,
        precision: Precision = FLOAT64,
        units: Units = Units.MILES,
        centroids: Sequence[Coordinate] | None = None,
        init: InitStrategy = "bounding_box",
    ) -> Partition:
        """Create `k` empty nodes at their starting locations."""
        if centroids:
            if len(centroids) != k:
                raise InvalidConfigurationError(f"expected {k} centroids, got {len(centroids)}")
            nodes = [CentroidNode(location=Coordinate.coerce(c), precision=precision) for c in centroids]
            return cls(nodes, units=units, precision=precision)

        if init == "sample_points":
            if k > len(points):
                raise InvalidConfigurationError(f"cannot sample {k} centroids from {len(points)} points")
            nodes = [
                CentroidNode(location=Coordinate.coerce(points[i]), precision=precision)
                for i in _sample_indices(len(points), k, source)
            ]
        elif init == "bounding_box":
            bounds = BoundingBox.from_coordinates(Coordinate.coerce(p) for p in points)
            nodes = [CentroidNode.random(precision, source, bounds) for _ in range(k)]
        else:
            raise InvalidConfigurationError(f"Unknown init strategy: {init!r}")

        logger.debug("Seeded %d centroids with %s", k, init)
        return cls(nodes, units=units, precision=precision)

    @classmethod
    def build(
        cls,
        k: int,
        points: Sequence[Locatable],
        *,
        source: RandomSource,
        precision: Precision = FLOAT64,
        units: Units = Units.MILES,
        centroids: Sequence[Coordinate] | None = None,
        init: InitStrategy = "bounding_box",
    ) -> Partition:
        """Seed a partition and assign every point to its nearest node."""
        partition = cls.seed(
            k, points, source=source, precision=precision, units=units, centroids=centroids, init=init
        )
        partition.assign_all(points)
        return partition

    def nearest(self, coordinate: Any) -> tuple[int, Any]:
        """Return `(index, distance)` of the closest node; the lowest index wins ties."""
        best_index = 0
        best_distance = self.precision.max_value()
        for index, node in enumerate(self.nodes):
            d = haversine(node.location, coordinate, units=self.units, precision=self.precision)
            if d < best_distance:
                best_index, best_distance = index, d
        return best_index, best_distance

    def assign_all(self, points: Sequence[Locatable]) -> None:
        distances: list[tuple[int, Any]] = []
        for point in points:
            index, distance = self.nearest(Coordinate.coerce(point))
            self.nodes[index].assign(point)
            distances.append((index, distance))
        # Distances are folded in only once every point has a node.
        for index, distance in distances:
            self.nodes[index].accumulate_distance(distance)

    def aggregate(self) -> list[Coordinate | None]:
        """Recompute centroids; `None` marks a node that received no members."""
        return [node.recompute_centroid() for node in self.nodes]

    def empty_indices(self) -> list[int]:
        return [i for i, node in enumerate(self.nodes) if node.is_empty]

    def total_distance(self) -> Any:
        total = self.precision.zero()
        for node in self.nodes:
            total += node.accumulated_distance
        return total

    def member_count(self) -> int:
        return sum(node.member_count for node in self.nodes)

    def locations(self) -> list[Coordinate]:
        return [node.location for node in self.nodes]

    def labels(self, points: Sequence[Locatable]) -> list[int]:
        """Node index for each point, in input order (matched by object identity)."""
        owner: dict[int, int] = {}
        for index, node in enumerate(self.nodes):
            for member in node.members:
                owner[id(member)] = index
        return [owner[id(p)] for p in points]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[CentroidNode]:
        return iter(self.nodes)

    def __getitem__(self, index: int) -> CentroidNode:
        return self.nodes[index]

    def __repr__(self) -> str:
        sizes = [node.member_count for node in self.nodes]
        return f"Partition(k={len(self.nodes)}, units={self.units.value}, sizes={sizes})"
