from __future__ import annotations

from datetime import date, datetime
from typing import Collection, Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus
from ..geo.model import Coordinates
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_latest_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_users(
        self,
        *,
        user_ids: Optional[Collection[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        approval_status: Optional[ApprovalStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first. user_ids=None means every user; an empty collection matches nothing."""

        raise NotImplementedError

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
        """Insert an open session.

        Must be atomic with the open-session check: returns None (and creates
        nothing) when the user already has an open session.
        """

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: Coordinates,
    ) -> bool:
        """Close the session only if it is still open."""

        raise NotImplementedError

    def decide_approval(
        self,
        *,
        attendance_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        notes: Optional[str] = None,
    ) -> bool:
        """Record the decision only if the record is still pending."""

        raise NotImplementedError
