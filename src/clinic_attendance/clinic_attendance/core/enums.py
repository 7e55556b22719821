from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Attendance event direction."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class SubjectKind(str, Enum):
    """Who the attendance book tracks."""

    DOCTOR = "doctor"
    EMPLOYEE = "employee"


class ShiftState(str, Enum):
    """Derived state of a (subject, date, shift) slot."""

    ABSENT = "ABSENT"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class ConflictKind(str, Enum):
    DUPLICATE = "duplicate"
    MISSING_CHECK_IN = "missing-check-in"
