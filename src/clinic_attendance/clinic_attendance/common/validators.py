from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError
from .datetime_utils import parse_hhmm, parse_iso_date


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_iso_date(value: str, field_name: str = "date") -> str:
    try:
        parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date") from None
    return value


def require_hhmm(value: str, field_name: str = "time") -> str:
    try:
        parse_hhmm(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be an HH:MM time") from None
    return value
