from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Collection, Dict, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import ApprovalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..geo.model import Coordinates
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    attendance_id, user_id, work_date, check_in_time, check_out_time,
    check_in_lat, check_in_lng, check_out_lat, check_out_lng,
    is_remote, approval_status, check_in_distance_m, notes,
    approved_by, approved_at, approval_notes
"""


def _location(lat: Any, lng: Any) -> Optional[Coordinates]:
    if lat is None or lng is None:
        return None
    return Coordinates(float(lat), float(lng))


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    distance = r.get("check_in_distance_m")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        check_in_location=_location(r.get("check_in_lat"), r.get("check_in_lng")),
        check_out_location=_location(r.get("check_out_lat"), r.get("check_out_lng")),
        is_remote=bool(r.get("is_remote")),
        approval_status=ApprovalStatus(r["approval_status"]),
        check_in_distance_m=float(distance) if distance is not None else None,
        notes=r.get("notes"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        approval_notes=r.get("approval_notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """attendance_records storage.

    The open-session guard is the UNIQUE index on the generated column
    open_user_id (user_id while check_out_time IS NULL, else NULL), so the
    check and the insert are one statement.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_open_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND check_out_time IS NULL
                ORDER BY check_in_time DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_latest_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY check_in_time DESC, attendance_id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_users(
        self,
        *,
        user_ids: Optional[Collection[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        approval_status: Optional[ApprovalStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_ids is not None:
            ids = sorted({int(u) for u in user_ids})
            if not ids:
                return []
            clauses.append(f"user_id IN ({','.join(['%s'] * len(ids))})")
            params.extend(ids)
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if approval_status is not None:
            clauses.append("approval_status=%s")
            params.append(approval_status.value)

        where = " AND ".join(clauses)
        sql = f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE {where}
            ORDER BY check_in_time DESC, attendance_id DESC
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        location: Coordinates,
        is_remote: bool,
        approval_status: ApprovalStatus,
        distance_m: float,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, work_date, check_in_time, check_in_lat, check_in_lng,
                        is_remote, approval_status, check_in_distance_m, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        work_date,
                        check_in_time,
                        location.latitude,
                        location.longitude,
                        1 if is_remote else 0,
                        approval_status.value,
                        float(distance_m),
                        notes,
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                logger.debug("Open session already exists for user %s", user_id)
                return None
            raise

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: Coordinates,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_lat=%s, check_out_lng=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, location.latitude, location.longitude, int(attendance_id)),
            )
            return cur.rowcount > 0

    def decide_approval(
        self,
        *,
        attendance_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET approval_status=%s, approved_by=%s, approved_at=%s, approval_notes=%s
                WHERE attendance_id=%s AND approval_status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    notes,
                    int(attendance_id),
                    ApprovalStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
