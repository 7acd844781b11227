from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import OfficeLocation
from .repository import OfficeLocationRepository

_SETTINGS_ROW_ID = 1


class MySQLOfficeLocationRepository(OfficeLocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[OfficeLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT latitude, longitude, allowed_radius_m, updated_by, updated_at
                FROM office_settings
                WHERE id=%s
                """,
                (_SETTINGS_ROW_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return OfficeLocation(
                latitude=float(r["latitude"]),
                longitude=float(r["longitude"]),
                allowed_radius_m=float(r["allowed_radius_m"]),
                updated_by=r.get("updated_by"),
                updated_at=r.get("updated_at"),
            )

    def save(self, location: OfficeLocation) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO office_settings(id, latitude, longitude, allowed_radius_m, updated_by, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    latitude=VALUES(latitude),
                    longitude=VALUES(longitude),
                    allowed_radius_m=VALUES(allowed_radius_m),
                    updated_by=VALUES(updated_by),
                    updated_at=VALUES(updated_at)
                """,
                (
                    _SETTINGS_ROW_ID,
                    location.latitude,
                    location.longitude,
                    location.allowed_radius_m,
                    location.updated_by,
                    location.updated_at,
                ),
            )
