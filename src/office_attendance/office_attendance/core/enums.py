from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class ApprovalStatus(str, Enum):
    """Approval state of a check-in. Only remote check-ins leave NONE."""

    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in {ApprovalStatus.APPROVED, ApprovalStatus.REJECTED}


class AttendanceStatus(str, Enum):
    """Derived classification of a session. Computed on read, never stored."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    HALF_DAY = "half_day"


class ChangelogType(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
