"""
Domain models.

These types are the contract between callers and the clustering layers:
- `DataPoint`: an immutable coordinate + opaque payload (the caller's record),
- `Locatable`: the capability the algorithm actually needs (`get_coordinate()`),
- `ClusteringOptions`: validated run configuration (Pydantic), checked before any round runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Literal, Protocol, Sequence, TypeVar, runtime_checkable

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from geokmeans.core.errors import InvalidConfigurationError
from geokmeans.core.geo import Coordinate
from geokmeans.core.numeric import Precision, Units, get_precision

P = TypeVar("P")


@runtime_checkable
class Locatable(Protocol):
    def get_coordinate(self) -> Coordinate: ...


@dataclass(frozen=True)
class DataPoint(Generic[P]):
    """A coordinate paired with an opaque caller payload."""

    coordinate: Coordinate
    payload: P | None = None

    @classmethod
    def at(cls, lat: float, lng: float, payload: P | None = None) -> DataPoint[P]:
        return cls(coordinate=Coordinate(lat=lat, lng=lng), payload=payload)

    def get_coordinate(self) -> Coordinate:
        return self.coordinate


class ClusteringOptions(BaseModel):
    """Validated configuration for one clustering run."""

    k: int = Field(..., ge=1)
    rounds: int = Field(..., ge=1)
    units: Literal["miles", "kilometers"] = "miles"
    precision: Literal["float32", "float64"] = "float64"
    init: Literal["bounding_box", "sample_points"] = "bounding_box"
    seeds: list[tuple[float, float]] | None = None

    @field_validator("units", mode="before")
    @classmethod
    def _normalize_units(cls, value: Any) -> str:
        return Units.parse(value).value

    @field_validator("precision", mode="before")
    @classmethod
    def _normalize_precision(cls, value: Any) -> str:
        return get_precision(value).name

    @field_validator("seeds", mode="before")
    @classmethod
    def _coerce_seeds(cls, value: Any) -> Any:
        if value is None:
            return None
        try:
            return [Coordinate.coerce(v).as_tuple() for v in value]
        except (TypeError, ValueError) as exc:
            raise ValueError(f"seed centroids must be (lat, lng) pairs: {exc}") from exc

    @model_validator(mode="after")
    def _validate_seed_count(self) -> ClusteringOptions:
        if self.seeds is not None and len(self.seeds) != self.k:
            raise ValueError(f"expected {self.k} seed centroids, got {len(self.seeds)}")
        return self

    @property
    def distance_units(self) -> Units:
        return Units(self.units)

    @property
    def scalar(self) -> Precision:
        return get_precision(self.precision)

    @property
    def seed_coordinates(self) -> list[Coordinate] | None:
        if self.seeds is None:
            return None
        return [Coordinate(lat=lat, lng=lng).cast(self.scalar) for lat, lng in self.seeds]

    @classmethod
    def for_points(cls, points: Sequence[Any], **values: Any) -> ClusteringOptions:
        """Validate options against a concrete input, raising `InvalidConfigurationError`."""
        try:
            options = cls.model_validate(values)
        except ValidationError as exc:
            raise InvalidConfigurationError(f"Invalid clustering configuration: {exc}") from exc
        if options.seeds is None and options.k > len(points):
            raise InvalidConfigurationError(
                f"k={options.k} exceeds the number of data points ({len(points)}) and no seeds were given"
            )
        return options
