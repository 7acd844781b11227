from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .approvals.service import ApprovalService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.status import StatusPolicy
from .changelog.mysql_changelog_repository import MySQLChangelogRepository
from .changelog.repository import ChangelogRepository
from .database.connection import DBConfig, DatabaseConnection
from .geo.policy import RadiusPolicy
from .reports.service import AttendanceReportService
from .settings.model import OfficeLocation
from .settings.mysql_office_location_repository import MySQLOfficeLocationRepository
from .settings.provider import OfficeLocationProvider
from .settings.service import OfficeLocationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import HierarchyService


@dataclass(frozen=True)
class Container:
    radius_policy: RadiusPolicy

    attendance_service: AttendanceService
    approval_service: ApprovalService
    office_location_service: OfficeLocationService
    report_service: AttendanceReportService


def wire(
    *,
    attendance_repo: AttendanceRepository,
    users_repo: UserRepository,
    office_location: OfficeLocationProvider,
    status_policy: StatusPolicy,
    changelog_repo: Optional[ChangelogRepository] = None,
) -> Container:
    """Build the services over any set of repositories."""

    hierarchy = HierarchyService(users_repo)
    radius_policy = RadiusPolicy(office_location)

    return Container(
        radius_policy=radius_policy,
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            radius_policy,
            status_policy=status_policy,
            hierarchy=hierarchy,
            changelog=changelog_repo,
        ),
        approval_service=ApprovalService(attendance_repo, hierarchy, changelog_repo),
        office_location_service=OfficeLocationService(office_location, changelog_repo),
        report_service=AttendanceReportService(attendance_repo, hierarchy, status_policy=status_policy),
    )


def build_container(*, db_config: dict, office_defaults: dict, status_policy: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    office_repo = MySQLOfficeLocationRepository(conn)
    office_location = OfficeLocationProvider.load(office_repo, defaults=OfficeLocation(**office_defaults))

    return wire(
        attendance_repo=MySQLAttendanceRepository(conn),
        users_repo=MySQLUserRepository(conn),
        office_location=office_location,
        status_policy=StatusPolicy.from_settings(status_policy),
        changelog_repo=MySQLChangelogRepository(conn),
    )
