from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.office_attendance.office_attendance.database.bootstrap import ensure_demo_users
from src.office_attendance.office_attendance.database.connection import DBConfig, DatabaseConnection
from src.office_attendance.office_attendance.settings.model import OfficeLocation
from src.office_attendance.office_attendance.settings.mysql_office_location_repository import (
    MySQLOfficeLocationRepository,
)


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_users(db_config)

    # Store the configured office location only when none has been saved yet.
    office_repo = MySQLOfficeLocationRepository(DatabaseConnection(DBConfig.from_dict(db_config)))
    if office_repo.get() is None:
        office_repo.save(OfficeLocation(**settings.OFFICE_LOCATION))

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
