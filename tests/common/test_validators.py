from __future__ import annotations

import pytest

from src.office_attendance.office_attendance.common.validators import require_int
from src.office_attendance.office_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize("value,expected", [(7, 7), ("7", 7), (" 12 ", 12), (3.0, 3)])
def test_require_int_accepts_integral_values(value, expected):
    assert require_int(value, "attendanceId") == expected


@pytest.mark.parametrize("value", [None, True, "abc", "1.5", 1.5, [1], {}])
def test_require_int_rejects_everything_else(value):
    with pytest.raises(ValidationError, match="attendanceId must be an integer"):
        require_int(value, "attendanceId")
