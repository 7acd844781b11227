from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, role, manager_id, department, is_active
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return User(
                user_id=int(row["user_id"]),
                full_name=row["full_name"],
                email=row["email"],
                role=Role(row["role"]),
                manager_id=row.get("manager_id"),
                department=row.get("department"),
                is_active=bool(row.get("is_active", True)),
            )

    def list_direct_report_ids(self, manager_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id FROM users WHERE manager_id=%s AND is_active=1 ORDER BY user_id",
                (int(manager_id),),
            )
            return [int(r["user_id"]) for r in fetchall(cur)]

    def list_active_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM users WHERE is_active=1 ORDER BY user_id")
            return [int(r["user_id"]) for r in fetchall(cur)]
