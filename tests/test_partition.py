import pytest

from geokmeans.clustering.partition import Partition
from geokmeans.core.errors import InvalidConfigurationError
from geokmeans.core.geo import BoundingBox, Coordinate, haversine_miles
from geokmeans.core.numeric import FLOAT64, Units
from geokmeans.core.random import NumpyRandomSource
from geokmeans.domain.models import DataPoint
from tests.helpers import TRIPLET_CENTERS, ScriptedSource, four_triplets


def test_explicit_centroids_are_used_verbatim_in_order():
    seeds = [Coordinate(lat=1.0, lng=2.0), Coordinate(lat=-3.0, lng=4.0)]
    partition = Partition.seed(2, four_triplets(), source=ScriptedSource([0.5]), centroids=seeds)
    assert partition.locations() == seeds


def test_centroid_count_must_match_k():
    with pytest.raises(InvalidConfigurationError):
        Partition.seed(3, four_triplets(), source=ScriptedSource([0.5]), centroids=[(0.0, 0.0)])


def test_every_point_is_assigned_to_exactly_one_node():
    points = four_triplets()
    partition = Partition.build(4, points, source=NumpyRandomSource(seed=5))
    assert partition.member_count() == len(points)
    labels = partition.labels(points)
    assert len(labels) == len(points)
    assert all(0 <= label < 4 for label in labels)


def test_assignment_picks_nearest_node_and_accumulates_its_distance():
    points = four_triplets()
    partition = Partition.build(4, points, source=ScriptedSource([0.5]), centroids=TRIPLET_CENTERS)
    assert partition.labels(points) == [0, 0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 3]
    for node in partition:
        expected = sum(haversine_miles(node.location, m) for m in node.members)
        assert float(node.accumulated_distance) == pytest.approx(float(expected))
    assert float(partition.total_distance()) == pytest.approx(
        sum(float(n.accumulated_distance) for n in partition)
    )


def test_ties_go_to_the_lowest_index():
    points = four_triplets()
    same = (30.0, -90.0)
    partition = Partition.build(3, points, source=ScriptedSource([0.5]), centroids=[same, same, same])
    assert partition[0].member_count == len(points)
    assert partition.empty_indices() == [1, 2]
    assert partition.aggregate()[1:] == [None, None]


def test_nearest_reports_index_and_distance():
    partition = Partition.seed(2, [], source=ScriptedSource([0.5]), centroids=[(0.0, 0.0), (10.0, 10.0)])
    index, distance = partition.nearest(Coordinate(lat=9.0, lng=9.0))
    assert index == 1
    assert float(distance) == pytest.approx(float(haversine_miles((10.0, 10.0), (9.0, 9.0))))


def test_bounding_box_init_samples_inside_the_input_extent():
    points = four_triplets()
    box = BoundingBox.from_coordinates(p.coordinate for p in points)
    for seed in range(10):
        partition = Partition.seed(4, points, source=NumpyRandomSource(seed=seed), precision=FLOAT64)
        assert len(partition) == 4
        assert all(box.contains(loc) for loc in partition.locations())


def test_bounding_box_init_falls_back_to_world_for_empty_input():
    partition = Partition.build(3, [], source=NumpyRandomSource(seed=1))
    assert all(BoundingBox.world().contains(loc) for loc in partition.locations())
    assert partition.member_count() == 0
    assert float(partition.total_distance()) == 0.0


def test_sample_points_init_uses_distinct_input_points():
    points = four_triplets()
    coords = {p.coordinate.as_tuple() for p in points}
    partition = Partition.seed(5, points, source=NumpyRandomSource(seed=9), init="sample_points")
    picked = [loc.as_tuple() for loc in partition.locations()]
    assert all(c in coords for c in picked)
    assert len(set(picked)) == 5

    with pytest.raises(InvalidConfigurationError):
        Partition.seed(20, points, source=NumpyRandomSource(seed=9), init="sample_points")


def test_kilometer_partition_reports_kilometers():
    points = [DataPoint.at(0.0, 1.0)]
    miles = Partition.build(1, points, source=ScriptedSource([0.5]), centroids=[(0.0, 0.0)])
    km = Partition.build(1, points, source=ScriptedSource([0.5]), centroids=[(0.0, 0.0)], units=Units.KILOMETERS)
    assert float(km.total_distance()) / float(miles.total_distance()) == pytest.approx(6371 / 3960)


def test_sample_points_prefers_integers_and_falls_back_to_uniform():
    points = four_triplets()

    class LastIndexSource:
        def __init__(self):
            self.requested = []

        def uniform(self, low, high):
            raise AssertionError("integers should be used when available")

        def integers(self, high):
            self.requested.append(high)
            return high - 1

    source = LastIndexSource()
    partition = Partition.seed(3, points, source=source, init="sample_points")
    assert source.requested == [12, 11, 10]
    # Always taking the last pool slot picks the final three points in reverse order.
    assert [loc.as_tuple() for loc in partition.locations()] == [
        p.coordinate.as_tuple() for p in reversed(points[-3:])
    ]

    uniform_only = ScriptedSource([0.0])
    fallback = Partition.seed(2, points, source=uniform_only, init="sample_points")
    assert uniform_only.calls == [(0, 12), (0, 11)]
    assert len(set(loc.as_tuple() for loc in fallback.locations())) == 2
