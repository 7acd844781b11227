"""Derived attendance status.

The status is a view over check-in/check-out times and the current
StatusPolicy; it is never written back. Changing the policy therefore
changes the status shown for historical records too.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_hhmm
from ..core.constants import DEFAULT_HALF_DAY_MAX_HOURS, DEFAULT_LATE_GRACE_MINUTES, DEFAULT_WORKDAY_START
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceRecord


@dataclass(frozen=True)
class StatusPolicy:
    workday_start: time = time(9, 0)
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    half_day_max_hours: float = DEFAULT_HALF_DAY_MAX_HOURS

    def __post_init__(self) -> None:
        if self.late_grace_minutes < 0:
            raise ValidationError("late grace minutes must be >= 0")
        if self.half_day_max_hours < 0:
            raise ValidationError("half-day hours must be >= 0")

    @classmethod
    def from_settings(cls, values: Mapping[str, Any]) -> "StatusPolicy":
        return cls(
            workday_start=parse_hhmm(str(values.get("workday_start", DEFAULT_WORKDAY_START))),
            late_grace_minutes=int(values.get("late_grace_minutes", DEFAULT_LATE_GRACE_MINUTES)),
            half_day_max_hours=float(values.get("half_day_max_hours", DEFAULT_HALF_DAY_MAX_HOURS)),
        )

    def late_cutoff(self, check_in: datetime) -> datetime:
        start = datetime.combine(check_in.date(), self.workday_start, tzinfo=check_in.tzinfo)
        return start + timedelta(minutes=self.late_grace_minutes)


def worked_minutes(record: AttendanceRecord) -> int:
    """Minutes between check-in and check-out; 0 while the session is open."""
    if not record.check_in_time or not record.check_out_time:
        return 0
    minutes = int((record.check_out_time - record.check_in_time).total_seconds() // 60)
    return max(minutes, 0)


def derive_status(record: Optional[AttendanceRecord], policy: StatusPolicy) -> AttendanceStatus:
    """Classify a session.

    - no record or no check-in: ABSENT
    - closed with worked hours <= half_day_max_hours: HALF_DAY
    - check-in after workday_start + grace: LATE
    - otherwise PRESENT

    An open session is judged on its check-in only; it becomes ABSENT only
    through the absence of a record, never by time passing.
    """

    if record is None or record.check_in_time is None:
        return AttendanceStatus.ABSENT

    if record.check_out_time is not None:
        if worked_minutes(record) <= policy.half_day_max_hours * 60:
            return AttendanceStatus.HALF_DAY

    if record.check_in_time > policy.late_cutoff(record.check_in_time):
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT
