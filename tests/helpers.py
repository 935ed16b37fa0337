from __future__ import annotations

from geokmeans.domain.models import DataPoint


class ScriptedSource:
    """RandomSource that replays fractions of the requested interval."""

    def __init__(self, fractions: list[float]):
        self.fractions = list(fractions)
        self.calls: list[tuple[float, float]] = []

    def uniform(self, low: float, high: float) -> float:
        self.calls.append((low, high))
        f = self.fractions[(len(self.calls) - 1) % len(self.fractions)]
        return low + f * (high - low)


TRIPLET_CENTERS = [(30.0, -90.0), (45.0, 80.0), (-32.0, 42.0), (62.0, -122.0)]


def four_triplets() -> list[DataPoint[str]]:
    points: list[DataPoint[str]] = []
    for group, (lat, lng) in enumerate(TRIPLET_CENTERS):
        for j, (dlat, dlng) in enumerate([(0.0, 0.0), (0.3, -0.2), (-0.2, 0.4)]):
            points.append(DataPoint.at(lat + dlat, lng + dlng, payload=f"g{group}-{j}"))
    return points


WORLD_CITIES = {
    "nyc": (40.7128, -74.0060),
    "london": (51.5074, -0.1278),
    "tokyo": (35.6762, 139.6503),
    "sydney": (-33.8688, 151.2093),
    "rio": (-22.9068, -43.1729),
    "cairo": (30.0444, 31.2357),
    "moscow": (55.7558, 37.6173),
    "cape_town": (-33.9249, 18.4241),
    "mumbai": (19.0760, 72.8777),
    "north_pole": (90.0, 0.0),
}


def world_dataset() -> list[DataPoint[str]]:
    # Repeated big cities plus one of each remaining city, 52 points in total.
    repeated = ["rio", "nyc", "london", "tokyo", "sydney"] * 9
    singles = ["cairo", "moscow", "cape_town", "mumbai", "north_pole", "london", "tokyo"]
    return [DataPoint.at(*WORLD_CITIES[name], payload=name) for name in repeated + singles]
