from __future__ import annotations

# Driver loop for geographic K-means.
#
# Each round:
# - build a Partition from the previous round's centroids (random placement on round 0),
# - recompute centroids from the assigned members,
# - reseed empty slots (every round except the last),
# and the final round's Partition is returned together with its total distance.
#
# There is no convergence check: the loop always consumes the full round budget.

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from geokmeans.clustering.partition import InitStrategy, Partition
from geokmeans.config.settings import Settings, get_settings
from geokmeans.core.geo import BoundingBox, Coordinate
from geokmeans.core.numeric import Precision, Units
from geokmeans.core.random import NumpyRandomSource, RandomSource
from geokmeans.domain.models import ClusteringOptions, Locatable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusteringResult:
    """Outcome of a full run: the final round's partition and its aggregate distance."""

    partition: Partition
    total_distance: Any
    # Means recomputed from the final round's members (`None` for empty nodes).
    centroids: list[Coordinate | None]
    rounds: int
    units: Units
    precision: Precision

    @property
    def empty_nodes(self) -> list[int]:
        return self.partition.empty_indices()

    @property
    def collapsed_nodes(self) -> list[int]:
        """Non-empty nodes whose members all share one coordinate."""
        return [i for i, node in enumerate(self.partition) if not node.is_empty and node.has_single_location()]

    def summary(self) -> dict[str, Any]:
        return {
            "k": len(self.partition),
            "rounds": self.rounds,
            "units": self.units.value,
            "precision": self.precision.name,
            "total_distance": float(self.total_distance),
            "node_sizes": [node.member_count for node in self.partition],
            "empty_nodes": self.empty_nodes,
            "collapsed_nodes": self.collapsed_nodes,
        }


def reseed_empty(
    centroids: list[Coordinate | None],
    *,
    precision: Precision,
    source: RandomSource,
) -> int:
    """Fill `None` slots in place; returns how many slots were filled.

    Samples come from the bounding box of the non-empty centroids, or from the whole
    lat/lng domain when every slot is empty.
    """
    bounds = BoundingBox.from_coordinates(c for c in centroids if c is not None) or BoundingBox.world()
    filled = 0
    for index, centroid in enumerate(centroids):
        if centroid is not None:
            continue
        centroids[index] = bounds.sample(precision, source)
        filled += 1
        logger.debug("Reseeded empty node %d at %s", index, centroids[index].as_tuple())
    return filled


def _resolve_source(source: RandomSource | None, settings: Settings) -> RandomSource:
    if source is not None:
        return source
    return NumpyRandomSource(settings.clustering.seed)


def run(
    k: int,
    rounds: int | None = None,
    points: Sequence[Locatable] = (),
    *,
    seeds: Sequence[Any] | None = None,
    units: Units | str | None = None,
    precision: Precision | str | None = None,
    init: InitStrategy | None = None,
    source: RandomSource | None = None,
    settings: Settings | None = None,
) -> ClusteringResult:
    """Cluster `points` into `k` groups over exactly `rounds` Lloyd iterations.

    Options left as `None` (including `rounds`) fall back to `Settings.clustering`.
    Configuration errors raise `InvalidConfigurationError` before any round executes.
    """
    settings = settings or get_settings()
    defaults = settings.clustering
    options = ClusteringOptions.for_points(
        points,
        k=k,
        rounds=rounds if rounds is not None else defaults.rounds,
        units=units if units is not None else defaults.units,
        precision=precision if precision is not None else defaults.precision,
        init=init or defaults.init,
        seeds=list(seeds) if seeds is not None else None,
    )
    scalar = options.scalar
    distance_units = options.distance_units
    source = _resolve_source(source, settings)

    centroids: list[Coordinate | None] | None = options.seed_coordinates
    partition: Partition | None = None
    for round_index in range(options.rounds):
        partition = Partition.build(
            options.k,
            points,
            source=source,
            precision=scalar,
            units=distance_units,
            centroids=centroids,
            init=options.init,
        )
        centroids = partition.aggregate()
        empty = sum(1 for c in centroids if c is None)
        logger.debug(
            "Round %d/%d: total_distance=%.3f empty_nodes=%d",
            round_index + 1,
            options.rounds,
            float(partition.total_distance()),
            empty,
        )
        is_last = round_index == options.rounds - 1
        if not is_last and empty:
            reseed_empty(centroids, precision=scalar, source=source)

    result = ClusteringResult(
        partition=partition,
        total_distance=partition.total_distance(),
        centroids=centroids,
        rounds=options.rounds,
        units=distance_units,
        precision=scalar,
    )
    logger.info(
        "Clustered %d points into %d nodes over %d rounds (total_distance=%.3f %s, empty=%d)",
        len(points),
        options.k,
        options.rounds,
        float(result.total_distance),
        distance_units.value,
        len(result.empty_nodes),
    )
    if result.collapsed_nodes:
        logger.debug("Nodes collapsed onto a single location: %s", result.collapsed_nodes)
    return result
