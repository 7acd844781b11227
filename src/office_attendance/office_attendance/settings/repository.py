from __future__ import annotations

from typing import Optional, Protocol

from .model import OfficeLocation


class OfficeLocationRepository(Protocol):
    """Storage for the single office-location snapshot."""

    def get(self) -> Optional[OfficeLocation]:
        raise NotImplementedError

    def save(self, location: OfficeLocation) -> None:
        raise NotImplementedError
