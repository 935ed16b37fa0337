"""
GeoKMeans: K-means (Lloyd's algorithm) over latitude/longitude points using
great-circle (haversine) distance.

The public entry point is `geokmeans.clustering.driver.run`.
"""

from geokmeans.clustering.driver import ClusteringResult, run
from geokmeans.core.geo import Coordinate, haversine_km, haversine_miles
from geokmeans.core.numeric import FLOAT32, FLOAT64, Units
from geokmeans.domain.models import DataPoint

__all__ = [
    "FLOAT32",
    "FLOAT64",
    "ClusteringResult",
    "Coordinate",
    "DataPoint",
    "Units",
    "haversine_km",
    "haversine_miles",
    "run",
]
