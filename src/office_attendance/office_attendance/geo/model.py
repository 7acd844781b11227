from __future__ import annotations

from dataclasses import dataclass

from ..common.validators import require_finite_number
from ..core.exceptions import InvalidCoordinateError


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        lat = require_finite_number(self.latitude, "latitude", error=InvalidCoordinateError)
        lon = require_finite_number(self.longitude, "longitude", error=InvalidCoordinateError)
        if not -90.0 <= lat <= 90.0:
            raise InvalidCoordinateError(f"latitude out of range [-90, 90]: {lat}")
        if not -180.0 <= lon <= 180.0:
            raise InvalidCoordinateError(f"longitude out of range [-180, 180]: {lon}")
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True)
class RadiusCheck:
    distance_m: float
    is_within: bool
    allowed_radius_m: float
