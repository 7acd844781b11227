from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Collection, Optional

import pytest

from src.office_attendance.office_attendance.attendance.model import AttendanceRecord
from src.office_attendance.office_attendance.core.enums import ApprovalStatus, ChangelogType, Role
from src.office_attendance.office_attendance.geo.model import Coordinates
from src.office_attendance.office_attendance.settings.model import OfficeLocation
from src.office_attendance.office_attendance.users.model import User

OFFICE_LAT = 47.916646
OFFICE_LNG = 106.908877

ADMIN_ID = 1
MANAGER_ID = 2
EMPLOYEE_ID = 3
OTHER_EMPLOYEE_ID = 4
OUTSIDER_ID = 5


@dataclass
class InMemoryUsers:
    users_by_id: dict[int, User]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def list_direct_report_ids(self, manager_id: int):
        return sorted(u.user_id for u in self.users_by_id.values() if u.manager_id == manager_id and u.is_active)

    def list_active_ids(self):
        return sorted(u.user_id for u in self.users_by_id.values() if u.is_active)


class InMemoryAttendance:
    """Thread-safe stand-in for attendance_records.

    Every method runs under one lock, mirroring the single-statement
    atomicity the MySQL repository relies on.
    """

    def __init__(self):
        self._records: dict[int, AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            self._id = max(self._id, record.attendance_id)
            self._records[record.attendance_id] = record
            return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._records.get(attendance_id)

    def get_open_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._open_for(user_id)

    def _open_for(self, user_id: int) -> Optional[AttendanceRecord]:
        for r in self._records.values():
            if r.user_id == user_id and r.check_out_time is None:
                return r
        return None

    def get_latest_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        items = self.list_for_users(user_ids=[user_id], limit=1)
        return items[0] if items else None

    def list_for_users(
        self,
        *,
        user_ids: Optional[Collection[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        approval_status: Optional[ApprovalStatus] = None,
        limit: Optional[int] = None,
    ):
        with self._lock:
            items = list(self._records.values())
        if user_ids is not None:
            ids = set(user_ids)
            items = [r for r in items if r.user_id in ids]
        if start_date is not None:
            items = [r for r in items if r.work_date >= start_date]
        if end_date is not None:
            items = [r for r in items if r.work_date <= end_date]
        if approval_status is not None:
            items = [r for r in items if r.approval_status == approval_status]
        items.sort(key=lambda r: (r.check_in_time, r.attendance_id), reverse=True)
        return items[:limit] if limit is not None else items

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
        notes=None,
    ) -> Optional[int]:
        with self._lock:
            if self._open_for(user_id) is not None:
                return None
            self._id += 1
            self._records[self._id] = AttendanceRecord(
                attendance_id=self._id,
                user_id=user_id,
                work_date=work_date,
                check_in_time=check_in_time,
                check_in_location=location,
                is_remote=is_remote,
                approval_status=approval_status,
                check_in_distance_m=distance_m,
                notes=notes,
            )
            return self._id

    def update_checkout(self, *, attendance_id: int, check_out_time: datetime, location: Coordinates) -> bool:
        with self._lock:
            rec = self._records.get(attendance_id)
            if rec is None or rec.check_out_time is not None:
                return False
            self._records[attendance_id] = replace(rec, check_out_time=check_out_time, check_out_location=location)
            return True

    def decide_approval(
        self,
        *,
        attendance_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        notes=None,
    ) -> bool:
        with self._lock:
            rec = self._records.get(attendance_id)
            if rec is None or rec.approval_status != ApprovalStatus.PENDING:
                return False
            self._records[attendance_id] = replace(
                rec,
                approval_status=status,
                approved_by=decided_by,
                approved_at=decided_at,
                approval_notes=notes,
            )
            return True


@dataclass
class InMemoryChangelog:
    entries: list[dict] = field(default_factory=list)

    def create(self, *, title: str, description: str, type: ChangelogType, created_by) -> int:
        self.entries.append({"title": title, "description": description, "type": type, "created_by": created_by})
        return len(self.entries)


@dataclass
class InMemoryOfficeLocationRepo:
    stored: Optional[OfficeLocation] = None
    fail_on_save: bool = False

    def get(self) -> Optional[OfficeLocation]:
        return self.stored

    def save(self, location: OfficeLocation) -> None:
        if self.fail_on_save:
            raise RuntimeError("database unavailable")
        self.stored = location


def make_users() -> InMemoryUsers:
    return InMemoryUsers(
        {
            ADMIN_ID: User(ADMIN_ID, "Admin", "admin@example.com", Role.ADMIN),
            MANAGER_ID: User(MANAGER_ID, "Manager", "manager@example.com", Role.MANAGER),
            EMPLOYEE_ID: User(EMPLOYEE_ID, "Worker A", "a@example.com", Role.EMPLOYEE, manager_id=MANAGER_ID),
            OTHER_EMPLOYEE_ID: User(
                OTHER_EMPLOYEE_ID, "Worker B", "b@example.com", Role.EMPLOYEE, manager_id=MANAGER_ID
            ),
            OUTSIDER_ID: User(OUTSIDER_ID, "Worker C", "c@example.com", Role.EMPLOYEE),
        }
    )


@pytest.fixture
def users() -> InMemoryUsers:
    return make_users()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def changelog() -> InMemoryChangelog:
    return InMemoryChangelog()


@pytest.fixture
def office() -> OfficeLocation:
    return OfficeLocation(latitude=OFFICE_LAT, longitude=OFFICE_LNG, allowed_radius_m=3000)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 45, 0)


@pytest.fixture
def office_repo() -> InMemoryOfficeLocationRepo:
    return InMemoryOfficeLocationRepo()
