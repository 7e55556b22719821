from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

_TIME_FORMATS = ("%H:%M", "%H:%M:%S")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value, "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_iso(now: datetime | None = None) -> str:
    return (now or now_local()).strftime("%Y-%m-%d")


def current_hhmm(now: datetime | None = None) -> str:
    return (now or now_local()).strftime("%H:%M")


def timestamp_iso(now: datetime | None = None) -> str:
    return (now or now_local()).isoformat()


def parse_event_timestamp(date_value: Optional[str], time_value: Optional[str]) -> Optional[datetime]:
    """Combine an event's date and wall-clock time.

    Returns None when either part is missing or malformed.
    """
    if not date_value or not time_value:
        return None
    try:
        day = parse_iso_date(str(date_value).strip())
    except ValueError:
        return None

    raw = str(time_value).strip()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.combine(day, datetime.strptime(raw, fmt).time())
        except ValueError:
            continue
    return None
