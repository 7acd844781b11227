from __future__ import annotations

from datetime import datetime

import pytest

from src.office_attendance.office_attendance.core.enums import ChangelogType, Role
from src.office_attendance.office_attendance.core.exceptions import (
    AuthorizationError,
    InvalidCoordinateError,
    InvalidRadiusError,
)
from src.office_attendance.office_attendance.settings.model import OfficeLocation
from src.office_attendance.office_attendance.settings.provider import OfficeLocationProvider
from src.office_attendance.office_attendance.settings.service import OfficeLocationService


@pytest.mark.parametrize("radius", [9.99, 5000.5, 0, -5, float("nan"), None])
def test_radius_outside_range_is_rejected(radius):
    with pytest.raises(InvalidRadiusError):
        OfficeLocation(47.9, 106.9, radius)


@pytest.mark.parametrize("radius", [10, 5000, "250"])
def test_radius_bounds_are_inclusive(radius):
    assert OfficeLocation(47.9, 106.9, radius).allowed_radius_m == float(radius)


def test_bad_office_coordinates_are_rejected():
    with pytest.raises(InvalidCoordinateError):
        OfficeLocation(95, 106.9, 100)


def test_load_falls_back_to_defaults(office_repo, office):
    provider = OfficeLocationProvider.load(office_repo, defaults=office)
    assert provider.get() == office


def test_load_prefers_stored_location(office_repo, office):
    office_repo.stored = OfficeLocation(40.0, 100.0, 500)
    provider = OfficeLocationProvider.load(office_repo, defaults=office)
    assert provider.get().allowed_radius_m == 500


def test_admin_update_persists_and_is_visible(office_repo, office, changelog):
    provider = OfficeLocationProvider(office, office_repo)
    svc = OfficeLocationService(provider, changelog)
    now = datetime(2026, 3, 2, 10, 0)

    updated = svc.update_office_location(
        current_role=Role.ADMIN,
        admin_user_id=1,
        latitude=47.92,
        longitude=106.91,
        allowed_radius_m=250,
        now=now,
    )

    assert svc.get_office_location() == updated
    assert office_repo.stored == updated
    assert updated.updated_by == 1
    assert updated.updated_at == now
    assert changelog.entries[-1]["type"] == ChangelogType.UPDATE


@pytest.mark.parametrize("role", [Role.MANAGER, Role.EMPLOYEE])
def test_only_admin_may_update(office_repo, office, role):
    svc = OfficeLocationService(OfficeLocationProvider(office, office_repo))
    with pytest.raises(AuthorizationError):
        svc.update_office_location(
            current_role=role, admin_user_id=2, latitude=47.9, longitude=106.9, allowed_radius_m=100
        )
    assert svc.get_office_location() == office
    assert office_repo.stored is None


def test_invalid_update_keeps_previous_location(office_repo, office):
    svc = OfficeLocationService(OfficeLocationProvider(office, office_repo))
    with pytest.raises(InvalidRadiusError):
        svc.update_office_location(
            current_role=Role.ADMIN, admin_user_id=1, latitude=47.9, longitude=106.9, allowed_radius_m=6000
        )
    assert svc.get_office_location() == office


def test_failed_save_keeps_previous_snapshot(office_repo, office):
    office_repo.fail_on_save = True
    provider = OfficeLocationProvider(office, office_repo)

    with pytest.raises(RuntimeError):
        provider.set(OfficeLocation(40.0, 100.0, 500))
    assert provider.get() == office
