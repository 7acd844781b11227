from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..attendance.status import StatusPolicy, derive_status, worked_minutes
from ..common.datetime_utils import minutes_to_hhmm
from ..core.constants import HALF_DAY_WEIGHT, LATE_DAY_WEIGHT
from ..core.enums import ApprovalStatus, AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..users.service import HierarchyService


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


def attendance_rate(*, present: int, late: int, half_day: int, total_days: int) -> float:
    """(present + 0.8 * late + 0.5 * half_day) / total_days, in percent."""
    if total_days <= 0:
        return 0.0
    score = present + late * LATE_DAY_WEIGHT + half_day * HALF_DAY_WEIGHT
    return round(score / total_days * 100, 2)


def _minute_of_day(value) -> int:
    return value.hour * 60 + value.minute


class AttendanceReportService:
    """Attendance-rate report over a date range.

    Only verified records count (in-office, or remote and approved). Rejected
    records are listed but never counted; pending ones are counted apart.
    When a worker has several counted sessions on one day, the earliest
    check-in decides that day's status.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        hierarchy: HierarchyService,
        *,
        status_policy: Optional[StatusPolicy] = None,
    ):
        self._attendance = attendance
        self._hierarchy = hierarchy
        self._policy = status_policy or StatusPolicy()

    def build_attendance_report(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        start: date,
        end: date,
        user_id: Optional[int] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must be on or after start date")

        if user_id is not None:
            self._hierarchy.require_in_scope(user_id=current_user_id, role=current_role, worker_id=user_id)
            user_ids = [int(user_id)]
        else:
            user_ids = sorted(self._hierarchy.scope_for(user_id=current_user_id, role=current_role))

        records = self._attendance.list_for_users(user_ids=user_ids, start_date=start, end_date=end)
        total_days = (end - start).days + 1

        by_user: dict[int, list[AttendanceRecord]] = {uid: [] for uid in user_ids}
        out_rows: list[dict] = []
        for r in sorted(records, key=lambda x: (x.work_date, x.user_id, x.attendance_id)):
            by_user.setdefault(r.user_id, []).append(r)
            minutes = worked_minutes(r)
            out_rows.append(
                {
                    "attendance_id": r.attendance_id,
                    "user_id": r.user_id,
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "check_in": r.check_in_time.strftime("%H:%M") if r.check_in_time else "-",
                    "check_out": r.check_out_time.strftime("%H:%M") if r.check_out_time else "-",
                    "worked_hours": minutes_to_hhmm(minutes),
                    "status": derive_status(r, self._policy).value,
                    "approval_status": r.approval_status.value,
                    "counted": r.is_verified,
                }
            )

        summary = [self._summarize(uid, recs, total_days) for uid, recs in by_user.items()]
        summary.sort(key=lambda s: (-s["attendance_rate"], s["user_id"]))
        return ReportData(rows=out_rows, summary=summary)

    def _summarize(self, user_id: int, records: list[AttendanceRecord], total_days: int) -> dict:
        counted = [r for r in records if r.is_verified and r.check_in_time is not None]

        first_of_day: dict[date, AttendanceRecord] = {}
        for r in sorted(counted, key=lambda x: x.check_in_time):
            first_of_day.setdefault(r.work_date, r)

        counts = {s: 0 for s in AttendanceStatus}
        for r in first_of_day.values():
            counts[derive_status(r, self._policy)] += 1
        absent = total_days - len(first_of_day)

        check_ins = [_minute_of_day(r.check_in_time) for r in counted]
        check_outs = [_minute_of_day(r.check_out_time) for r in counted if r.check_out_time]

        return {
            "user_id": user_id,
            "total_days": total_days,
            "present_days": counts[AttendanceStatus.PRESENT],
            "late_days": counts[AttendanceStatus.LATE],
            "half_days": counts[AttendanceStatus.HALF_DAY],
            "absent_days": absent,
            "pending_count": sum(1 for r in records if r.approval_status == ApprovalStatus.PENDING),
            "rejected_count": sum(1 for r in records if r.approval_status == ApprovalStatus.REJECTED),
            "attendance_rate": attendance_rate(
                present=counts[AttendanceStatus.PRESENT],
                late=counts[AttendanceStatus.LATE],
                half_day=counts[AttendanceStatus.HALF_DAY],
                total_days=total_days,
            ),
            "avg_check_in": minutes_to_hhmm(sum(check_ins) / len(check_ins)) if check_ins else "N/A",
            "avg_check_out": minutes_to_hhmm(sum(check_outs) / len(check_outs)) if check_outs else "N/A",
            "total_hours": minutes_to_hhmm(sum(worked_minutes(r) for r in counted)),
        }
