from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..core.constants import UNKNOWN_SUBJECT_NAME
from ..core.enums import EventType, SubjectKind


def _pick(raw: Dict[str, Any], *keys: str) -> Any:
    """First non-empty value among ``keys`` (current name first, legacy aliases after)."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


_SUBJECT_ID_KEYS = ("subjectId", "doctorId", "doctor_id", "employeeId", "employee_id")
_SUBJECT_NAME_KEYS = ("subjectName", "doctorName", "doctor_name", "employeeName", "employee_name")
_EVENT_TYPE_KEYS = ("eventType", "type", "jenis")


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in or check-out event."""

    record_id: str
    subject_id: str
    subject_name: str
    subject_kind: SubjectKind
    shift: Optional[str]
    event_type: EventType
    date: str
    time: str
    notes: str = ""
    position: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    @property
    def tuple_key(self) -> Tuple[str, str, Optional[str], EventType]:
        """Uniqueness key for duplicate detection."""
        return (self.subject_id, self.date, self.shift, self.event_type)

    @property
    def slot_key(self) -> Tuple[str, str, Optional[str]]:
        return (self.subject_id, self.date, self.shift)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.record_id,
            "subjectId": self.subject_id,
            "subjectName": self.subject_name,
            "subjectKind": self.subject_kind.value,
            "shift": self.shift,
            "eventType": self.event_type.value,
            "date": self.date,
            "time": self.time,
            "notes": self.notes,
            "position": self.position,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "createdBy": self.created_by,
            "updatedBy": self.updated_by,
        }

    def summary(self) -> Dict[str, Any]:
        """Subset shown to the user when this record blocks a new entry."""
        return {
            "date": self.date,
            "time": self.time,
            "eventType": self.event_type.value,
            "shift": self.shift,
            "subjectName": self.subject_name,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], *, kind: SubjectKind) -> "AttendanceRecord":
        """Decode a stored record, including ones written by the legacy back-office.

        Raises ValueError when the record has no id/subject or an unknown event type.
        """
        record_id = _text(raw.get("id"))
        subject_id = _text(_pick(raw, *_SUBJECT_ID_KEYS))
        if not record_id or not subject_id:
            raise ValueError(f"attendance record without id/subject: {raw!r}")

        # Legacy rows without a type were check-ins.
        event_type = EventType(_pick(raw, *_EVENT_TYPE_KEYS) or EventType.CHECK_IN.value)

        return cls(
            record_id=record_id,
            subject_id=subject_id,
            subject_name=str(_pick(raw, *_SUBJECT_NAME_KEYS) or UNKNOWN_SUBJECT_NAME),
            subject_kind=kind,
            shift=_text(raw.get("shift")) if kind == SubjectKind.DOCTOR else None,
            event_type=event_type,
            date=str(_pick(raw, "date", "tanggal") or ""),
            time=str(_pick(raw, "time", "waktu") or ""),
            notes=str(_pick(raw, "notes", "catatan") or ""),
            position=_text(_pick(raw, "position", "posisi")),
            created_at=_text(_pick(raw, "createdAt", "created_at")),
            updated_at=_text(_pick(raw, "updatedAt", "updated_at", "createdAt", "created_at")),
            created_by=_text(_pick(raw, "createdBy", "created_by")),
            updated_by=_text(_pick(raw, "updatedBy", "updated_by")),
        )


@dataclass(frozen=True)
class AttendanceInput:
    """Create payload as submitted by the attendance form."""

    subject_id: Optional[str]
    event_type: Optional[str]
    shift: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = None
    subject_name: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AttendanceInput":
        notes = payload.get("notes")
        return cls(
            subject_id=_text(_pick(payload, *_SUBJECT_ID_KEYS)),
            event_type=_text(_pick(payload, *_EVENT_TYPE_KEYS)),
            shift=_text(payload.get("shift")),
            date=_text(payload.get("date")),
            time=_text(payload.get("time")),
            notes=str(notes) if notes is not None else None,
            subject_name=_text(_pick(payload, *_SUBJECT_NAME_KEYS)),
        )


@dataclass(frozen=True)
class AttendancePatch:
    """Partial update; ``None`` means "keep the stored value"."""

    subject_id: Optional[str] = None
    subject_name: Optional[str] = None
    shift: Optional[str] = None
    event_type: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AttendancePatch":
        # id, createdAt and updatedAt are not patchable.
        notes = payload.get("notes")
        return cls(
            subject_id=_text(_pick(payload, *_SUBJECT_ID_KEYS)),
            subject_name=_text(_pick(payload, *_SUBJECT_NAME_KEYS)),
            shift=_text(payload.get("shift")),
            event_type=_text(_pick(payload, *_EVENT_TYPE_KEYS)),
            date=_text(payload.get("date")),
            time=_text(payload.get("time")),
            notes=str(notes) if notes is not None else None,
        )
