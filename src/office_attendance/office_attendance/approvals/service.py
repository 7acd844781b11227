from __future__ import annotations

import logging
from datetime import datetime
from typing import Collection, Iterator, Optional, Union

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..changelog.repository import ChangelogRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_text
from ..core.constants import DEFAULT_PENDING_LIMIT
from ..core.enums import ApprovalStatus, ChangelogType, Role
from ..core.exceptions import AlreadyResolvedError, NotFoundError, ValidationError
from ..users.service import HierarchyService

logger = logging.getLogger(__name__)

_DECISIONS = {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED}


class PendingApprovals:
    """Pending remote check-ins of a fixed set of workers.

    Iterating queries storage again each time, so the sequence can be
    restarted to observe decisions made in between.
    """

    def __init__(self, attendance: AttendanceRepository, user_ids: Collection[int], *, limit: int):
        self._attendance = attendance
        self._user_ids = frozenset(user_ids)
        self._limit = limit

    def __iter__(self) -> Iterator[AttendanceRecord]:
        records = self._attendance.list_for_users(
            user_ids=self._user_ids,
            approval_status=ApprovalStatus.PENDING,
            limit=self._limit,
        )
        return iter(records)


def parse_decision(value: Union[ApprovalStatus, str]) -> ApprovalStatus:
    try:
        decision = ApprovalStatus(value)
    except ValueError:
        decision = None
    if decision not in _DECISIONS:
        raise ValidationError('Invalid action. Must be "approved" or "rejected"')
    return decision


class ApprovalService:
    """Manager sign-off for remote check-ins: pending -> approved | rejected.

    Only approval_status (and its decision metadata) is ever written here;
    times and locations belong to AttendanceService.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        hierarchy: HierarchyService,
        changelog: Optional[ChangelogRepository] = None,
    ):
        self._attendance = attendance
        self._hierarchy = hierarchy
        self._changelog = changelog

    def list_pending(
        self,
        *,
        manager_id: int,
        current_role: Role,
        limit: int = DEFAULT_PENDING_LIMIT,
    ) -> PendingApprovals:
        scope = self._hierarchy.scope_for(user_id=manager_id, role=current_role)
        return PendingApprovals(self._attendance, scope, limit=limit)

    def resolve(
        self,
        *,
        attendance_id: int,
        manager_id: int,
        current_role: Role,
        decision: Union[ApprovalStatus, str],
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        decision = parse_decision(decision)
        now = now or now_local()

        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        self._hierarchy.require_in_scope(user_id=manager_id, role=current_role, worker_id=record.user_id)

        if record.approval_status == ApprovalStatus.NONE:
            raise ValidationError("This attendance record does not require approval")
        if record.approval_status.is_terminal:
            raise AlreadyResolvedError(f"Attendance record was already {record.approval_status.value}")

        decided = self._attendance.decide_approval(
            attendance_id=record.attendance_id,
            status=decision,
            decided_by=int(manager_id),
            decided_at=now,
            notes=optional_text(notes),
        )
        if not decided:
            logger.warning(
                "Approval of attendance_id=%s by %s lost to a concurrent decision",
                record.attendance_id,
                manager_id,
            )
            raise AlreadyResolvedError("Attendance record was already resolved")

        logger.info("Attendance %s %s by user %s", record.attendance_id, decision.value, manager_id)
        if self._changelog:
            self._changelog.create(
                title="Attendance approved" if decision == ApprovalStatus.APPROVED else "Attendance rejected",
                description=f"Remote attendance #{record.attendance_id} was {decision.value}",
                type=ChangelogType.UPDATE,
                created_by=int(manager_id),
            )

        updated = self._attendance.get_by_id(record.attendance_id)
        if updated is None:
            raise NotFoundError("Attendance record not found")
        return updated
