from __future__ import annotations

import logging
import threading
from typing import Optional

from .model import OfficeLocation
from .repository import OfficeLocationRepository

logger = logging.getLogger(__name__)


class OfficeLocationProvider:
    """Guarded accessor for the process-wide office location.

    Readers take the current snapshot reference without locking; writers
    persist first and then swap the reference under a lock, so a reader sees
    either the old or the new snapshot and a failed save changes nothing.
    """

    def __init__(self, initial: OfficeLocation, repository: Optional[OfficeLocationRepository] = None):
        self._current = initial
        self._repository = repository
        self._lock = threading.Lock()

    @classmethod
    def load(cls, repository: OfficeLocationRepository, *, defaults: OfficeLocation) -> "OfficeLocationProvider":
        stored = repository.get()
        if stored is None:
            logger.info("No stored office location, using defaults %s", defaults.to_dict())
        return cls(stored or defaults, repository)

    def get(self) -> OfficeLocation:
        return self._current

    def set(self, location: OfficeLocation) -> OfficeLocation:
        with self._lock:
            if self._repository is not None:
                self._repository.save(location)
            self._current = location
        return location
