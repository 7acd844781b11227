from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.validators import require_finite_number
from ..core.constants import MAX_ALLOWED_RADIUS_M, MIN_ALLOWED_RADIUS_M
from ..core.exceptions import InvalidRadiusError
from ..geo.model import Coordinates


@dataclass(frozen=True)
class OfficeLocation:
    """Office reference point and the radius accepted around it.

    Immutable snapshot: an update replaces the whole value.
    """

    latitude: float
    longitude: float
    allowed_radius_m: float
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        coords = Coordinates(self.latitude, self.longitude)
        radius = require_finite_number(self.allowed_radius_m, "allowed radius", error=InvalidRadiusError)
        if not MIN_ALLOWED_RADIUS_M <= radius <= MAX_ALLOWED_RADIUS_M:
            raise InvalidRadiusError(
                f"allowed radius must be between {MIN_ALLOWED_RADIUS_M:g} and {MAX_ALLOWED_RADIUS_M:g} meters"
            )
        object.__setattr__(self, "latitude", coords.latitude)
        object.__setattr__(self, "longitude", coords.longitude)
        object.__setattr__(self, "allowed_radius_m", radius)

    def to_dict(self) -> dict:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "allowedRadius": self.allowed_radius_m,
        }
