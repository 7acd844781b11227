from __future__ import annotations

from typing import Optional

from ..core.enums import ChangelogType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .repository import ChangelogRepository


class MySQLChangelogRepository(ChangelogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, title: str, description: str, type: ChangelogType, created_by: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO changelog(title, description, type, created_by)
                VALUES(%s,%s,%s,%s)
                """,
                (title, description, type.value, created_by),
            )
            return int(cur.lastrowid)
