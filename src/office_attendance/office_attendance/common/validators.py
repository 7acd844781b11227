from __future__ import annotations

import math
from typing import Any, Type

from ..core.exceptions import ValidationError


def require_finite_number(
    value: Any,
    field_name: str,
    *,
    error: Type[ValidationError] = ValidationError,
) -> float:
    """Coerce to float, rejecting None, booleans, NaN and infinities."""

    if value is None or isinstance(value, bool):
        raise error(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise error(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise error(f"{field_name} must be a finite number")
    return number


def optional_text(value: Any) -> str | None:
    text = (str(value) if value is not None else "").strip()
    return text or None


def require_int(value: Any, field_name: str) -> int:
    """Accept ints and integral strings from JSON; reject booleans, floats with a fraction and text."""

    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field_name} must be an integer")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer")
