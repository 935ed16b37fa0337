"""
Error taxonomy.

- `InvalidConfigurationError`: rejected before any round runs (bad `k`, `rounds`, seeds, names).
- `DegenerateCentroidError`: a mean was requested over zero members (programming error).
- `NonFiniteDistanceError`: haversine produced NaN/inf (coordinates outside the valid domain).
"""

from __future__ import annotations


class GeoKMeansError(Exception):
    """Base class for every error raised by this package."""


class InvalidConfigurationError(GeoKMeansError, ValueError):
    """Raised when a clustering run is configured in a way that cannot be executed."""


class DegenerateCentroidError(GeoKMeansError, RuntimeError):
    """Raised when a centroid mean is computed for a node without members."""


class NonFiniteDistanceError(GeoKMeansError, ArithmeticError):
    """Raised when a distance computation yields NaN or infinity."""
