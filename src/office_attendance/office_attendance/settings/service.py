from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from ..changelog.repository import ChangelogRepository
from ..core.enums import ChangelogType, Role
from ..core.exceptions import AuthorizationError
from .model import OfficeLocation
from .provider import OfficeLocationProvider

logger = logging.getLogger(__name__)


class OfficeLocationService:
    """Use case: read and (admin only) update the office location."""

    def __init__(self, provider: OfficeLocationProvider, changelog: Optional[ChangelogRepository] = None):
        self._provider = provider
        self._changelog = changelog

    def get_office_location(self) -> OfficeLocation:
        return self._provider.get()

    def update_office_location(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        latitude: Any,
        longitude: Any,
        allowed_radius_m: Any,
        now: datetime | None = None,
    ) -> OfficeLocation:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins may change the office location")

        location = OfficeLocation(
            latitude=latitude,
            longitude=longitude,
            allowed_radius_m=allowed_radius_m,
            updated_by=int(admin_user_id),
            updated_at=now or datetime.now(),
        )
        self._provider.set(location)
        logger.info(
            "Office location updated by user %s: %s,%s radius=%sm",
            admin_user_id,
            location.latitude,
            location.longitude,
            location.allowed_radius_m,
        )

        if self._changelog:
            self._changelog.create(
                title="Office location updated",
                description=(
                    f"Office location set to {location.latitude}, {location.longitude} "
                    f"({location.allowed_radius_m:g}m radius)"
                ),
                type=ChangelogType.UPDATE,
                created_by=int(admin_user_id),
            )
        return location
