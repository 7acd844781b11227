"""Example: drive the service layer directly, without Flask.

Controllers stay thin; the rules live in the services built by the container.
"""

import importlib

from config import get_settings_module

from src.office_attendance.office_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        office_defaults=settings.OFFICE_LOCATION,
        status_policy=settings.STATUS_POLICY,
    )

    office = container.office_location_service.get_office_location()
    check = container.radius_policy.is_within_office(office.latitude + 0.01, office.longitude)
    print(f"office={office.to_dict()} distance={check.distance_m:.0f}m within={check.is_within}")

    for record in container.attendance_service.list_history(user_id=3, limit=5):
        print(container.attendance_service.to_view(record))


if __name__ == "__main__":
    main()
