from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ApprovalStatus
from ..geo.model import Coordinates


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one worker's work session for one calendar day.

    Invariants:
    - check_out_time, when set, is strictly after check_in_time.
    - approval_status is NONE unless is_remote.
    - at most one record per user has check_out_time None (enforced by storage).
    """

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime] = None
    check_in_location: Optional[Coordinates] = None
    check_out_location: Optional[Coordinates] = None
    is_remote: bool = False
    approval_status: ApprovalStatus = ApprovalStatus.NONE
    check_in_distance_m: Optional[float] = None
    notes: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    approval_notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None

    @property
    def is_verified(self) -> bool:
        """In-office check-ins and approved remote check-ins."""
        return self.approval_status in {ApprovalStatus.NONE, ApprovalStatus.APPROVED}

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "userId": self.user_id,
            "workDate": self.work_date.strftime("%Y-%m-%d"),
            "checkIn": self.check_in_time.isoformat() if self.check_in_time else None,
            "checkOut": self.check_out_time.isoformat() if self.check_out_time else None,
            "checkInLocation": str(self.check_in_location) if self.check_in_location else None,
            "checkOutLocation": str(self.check_out_location) if self.check_out_location else None,
            "isRemote": self.is_remote,
            "approvalStatus": self.approval_status.value,
            "distance": round(self.check_in_distance_m) if self.check_in_distance_m is not None else None,
            "notes": self.notes,
            "approvedBy": self.approved_by,
            "approvedAt": self.approved_at.isoformat() if self.approved_at else None,
            "approvalNotes": self.approval_notes,
        }
