from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..changelog.repository import ChangelogRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import ApprovalStatus, AttendanceStatus, ChangelogType, Role
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthorizationError,
    NotFoundError,
    OutOfRangeError,
    ValidationError,
)
from ..geo.model import Coordinates
from ..geo.policy import RadiusPolicy
from ..users.repository import UserRepository
from ..users.service import HierarchyService
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .status import StatusPolicy, derive_status, worked_minutes

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in/check-out lifecycle of attendance sessions.

    Owns every mutation of AttendanceRecord except the approval decision,
    which goes through ApprovalService.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        radius_policy: RadiusPolicy,
        *,
        status_policy: StatusPolicy | None = None,
        hierarchy: HierarchyService | None = None,
        changelog: ChangelogRepository | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._radius = radius_policy
        self._status_policy = status_policy or StatusPolicy()
        self._hierarchy = hierarchy or HierarchyService(users)
        self._changelog = changelog

    def check_in(
        self,
        user_id: int,
        coords: Coordinates,
        *,
        is_remote: bool = False,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        user_id = int(user_id)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not user.is_active:
            raise AuthorizationError("User is deactivated")

        if self._attendance.get_open_for_user(user_id):
            raise AlreadyCheckedInError("You are already checked in. Check out first")

        check = self._radius.check(coords)
        if not is_remote and not check.is_within:
            logger.info(
                "Rejected check-in for user %s: %.0fm from office (allowed %.0fm)",
                user_id,
                check.distance_m,
                check.allowed_radius_m,
            )
            raise OutOfRangeError(
                f"You are too far from the office ({round(check.distance_m)}m). "
                f"Allowed distance: {check.allowed_radius_m:g}m. "
                "If you are working remotely, use remote check-in",
                distance_m=check.distance_m,
                allowed_radius_m=check.allowed_radius_m,
            )

        approval = ApprovalStatus.PENDING if is_remote else ApprovalStatus.NONE
        notes = optional_text(notes)
        attendance_id = self._attendance.create_checkin(
            user_id=user_id,
            work_date=now.date(),
            check_in_time=now,
            location=coords,
            is_remote=bool(is_remote),
            approval_status=approval,
            distance_m=check.distance_m,
            notes=notes,
        )
        if attendance_id is None:
            # Lost the race against a concurrent check-in of the same user.
            logger.warning("Concurrent check-in rejected for user %s", user_id)
            raise AlreadyCheckedInError("You are already checked in. Check out first")

        logger.info(
            "User %s checked in (attendance_id=%s remote=%s distance=%.0fm)",
            user_id,
            attendance_id,
            bool(is_remote),
            check.distance_m,
        )
        self._log_change(
            title="Remote check-in" if is_remote else "Check-in",
            description=f"{user.full_name} checked in{' remotely' if is_remote else ''}",
            type=ChangelogType.CREATE,
            created_by=user_id,
        )

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=now.date(),
            check_in_time=now,
            check_in_location=coords,
            is_remote=bool(is_remote),
            approval_status=approval,
            check_in_distance_m=check.distance_m,
            notes=notes,
        )

    def check_out(
        self,
        attendance_id: int,
        coords: Coordinates,
        *,
        user_id: int | None = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        """Close an open session. Exit is not geofenced; the location is only stored."""

        now = now or now_local()

        record = self._attendance.get_by_id(int(attendance_id))
        if not record or (user_id is not None and record.user_id != int(user_id)):
            raise NotFoundError("Attendance record not found")
        if record.check_out_time is not None:
            raise AlreadyCheckedOutError("You have already checked out")
        if record.check_in_time is not None and now <= record.check_in_time:
            raise ValidationError("Check-out time must be after check-in time")

        updated = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            location=coords,
        )
        if not updated:
            logger.warning("Concurrent check-out rejected for attendance_id=%s", record.attendance_id)
            raise AlreadyCheckedOutError("You have already checked out")

        logger.info("User %s checked out (attendance_id=%s)", record.user_id, record.attendance_id)
        self._log_change(
            title="Check-out",
            description=f"User #{record.user_id} checked out (attendance #{record.attendance_id})",
            created_by=record.user_id,
        )

        return replace(record, check_out_time=now, check_out_location=coords)

    def derive_status(self, record: Optional[AttendanceRecord]) -> AttendanceStatus:
        return derive_status(record, self._status_policy)

    def get_latest(self, user_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.get_latest_for_user(int(user_id))

    def list_history(
        self,
        user_id: int,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        limit: int | None = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        return self._attendance.list_for_users(
            user_ids=[int(user_id)],
            start_date=start_date,
            end_date=end_date,
            limit=limit,
        )

    def list_my_pending(self, user_id: int) -> Sequence[AttendanceRecord]:
        """The worker's own remote check-ins still waiting for a decision."""
        return self._attendance.list_for_users(
            user_ids=[int(user_id)],
            approval_status=ApprovalStatus.PENDING,
        )

    def list_for_worker(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        worker_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Sequence[AttendanceRecord]:
        self._hierarchy.require_in_scope(user_id=current_user_id, role=current_role, worker_id=worker_id)
        return self.list_history(worker_id, start_date=start_date, end_date=end_date, limit=None)

    def to_view(self, record: AttendanceRecord) -> dict:
        view = record.to_dict()
        view["derivedStatus"] = self.derive_status(record).value
        view["workedMinutes"] = worked_minutes(record)
        return view

    def _log_change(
        self,
        *,
        title: str,
        description: str,
        created_by: int,
        type: ChangelogType = ChangelogType.UPDATE,
    ) -> None:
        if self._changelog:
            self._changelog.create(
                title=title,
                description=description,
                type=type,
                created_by=created_by,
            )
