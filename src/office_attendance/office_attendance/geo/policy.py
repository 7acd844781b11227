from __future__ import annotations

from typing import Any

from ..settings.provider import OfficeLocationProvider
from .distance import distance_meters
from .model import Coordinates, RadiusCheck


class RadiusPolicy:
    """Decide whether a position lies inside the configured office radius.

    Reads one snapshot of the office location per evaluation, so a concurrent
    update never mixes old coordinates with a new radius.
    """

    def __init__(self, office: OfficeLocationProvider):
        self._office = office

    def is_within_office(self, latitude: Any, longitude: Any) -> RadiusCheck:
        coords = Coordinates(latitude, longitude)
        return self.check(coords)

    def check(self, coords: Coordinates) -> RadiusCheck:
        office = self._office.get()
        distance = distance_meters(coords.latitude, coords.longitude, office.latitude, office.longitude)
        return RadiusCheck(
            distance_m=distance,
            is_within=distance <= office.allowed_radius_m,
            allowed_radius_m=office.allowed_radius_m,
        )
