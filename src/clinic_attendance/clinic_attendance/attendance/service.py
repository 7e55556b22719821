from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional

from ..common.datetime_utils import current_hhmm, now_local, parse_event_timestamp, timestamp_iso, today_iso
from ..common.ids import new_record_id
from ..common.logging import get_logger
from ..common.validators import require_hhmm, require_iso_date, require_non_empty
from ..core.constants import DOCTOR_ATTENDANCE_PREFIX, EMPLOYEE_ATTENDANCE_PREFIX, UNKNOWN_SUBJECT_NAME
from ..core.enums import ConflictKind, EventType, ShiftState, SubjectKind
from ..core.exceptions import (
    DuplicateConflictError,
    MissingPrerequisiteError,
    NotFoundError,
    ValidationError,
)
from ..directory.model import SubjectProfile
from ..directory.repository import SubjectDirectory
from ..store.repository import RecordStore
from .model import AttendanceInput, AttendancePatch, AttendanceRecord
from .validator import AttendanceValidator, ValidationResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttendanceBook:
    """Where and how one kind of subject's attendance is kept."""

    kind: SubjectKind
    record_prefix: str
    shift_required: bool


DOCTOR_BOOK = AttendanceBook(SubjectKind.DOCTOR, DOCTOR_ATTENDANCE_PREFIX, shift_required=True)
EMPLOYEE_BOOK = AttendanceBook(SubjectKind.EMPLOYEE, EMPLOYEE_ATTENDANCE_PREFIX, shift_required=False)

_DIRECTION = {EventType.CHECK_IN: "checked in", EventType.CHECK_OUT: "checked out"}


def _sort_key(record: AttendanceRecord):
    ts = parse_event_timestamp(record.date, record.time)
    # Unparseable date/time sorts after everything else (oldest).
    return (ts is not None, ts or datetime.min, record.created_at or "")


def _slot_label(date_value: str, shift: Optional[str]) -> str:
    return f"{date_value}, shift {shift}" if shift else date_value


class AttendanceService:
    def __init__(
        self,
        store: RecordStore,
        directory: SubjectDirectory,
        *,
        book: AttendanceBook = DOCTOR_BOOK,
        validator: AttendanceValidator | None = None,
    ):
        self._store = store
        self._directory = directory
        self._book = book
        self._validator = validator or AttendanceValidator()

    @property
    def book(self) -> AttendanceBook:
        return self._book

    def list(
        self,
        *,
        date: Optional[str] = None,
        subject_id: Optional[str] = None,
        event_type: Optional[str] = None,
    ) -> List[AttendanceRecord]:
        """All records of this book, most recent ``date + time`` first."""
        records = self._load_all()
        if date:
            records = [r for r in records if r.date == date]
        if subject_id:
            records = [r for r in records if r.subject_id == subject_id]
        if event_type:
            wanted = self._parse_event_type(event_type)
            records = [r for r in records if r.event_type == wanted]
        return sorted(records, key=_sort_key, reverse=True)

    def get(self, record_id: str) -> AttendanceRecord:
        return self._load(record_id)

    def create(
        self,
        data: AttendanceInput,
        *,
        actor_id: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()

        missing = [name for name, value in self._required_fields(data) if not value]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        event_type = self._parse_event_type(data.event_type)
        date_value = require_iso_date(data.date) if data.date else today_iso(now)
        time_value = require_hhmm(data.time) if data.time else current_hhmm(now)
        subject_id = require_non_empty(data.subject_id, "subjectId")
        shift = require_non_empty(data.shift, "shift") if self._book.shift_required else None

        profile = self._profile_for(subject_id, data.subject_name)

        stamp = timestamp_iso(now)
        candidate = AttendanceRecord(
            record_id=new_record_id(self._book.record_prefix),
            subject_id=subject_id,
            subject_name=profile.name,
            subject_kind=self._book.kind,
            shift=shift,
            event_type=event_type,
            date=date_value,
            time=time_value,
            notes=data.notes or "",
            position=profile.position,
            created_at=stamp,
            updated_at=stamp,
            created_by=actor_id,
            updated_by=actor_id,
        )

        result = self._validator.validate_create(candidate, self._load_all())
        self._raise_for_conflict(result, candidate)

        self._store.set(candidate.record_id, candidate.to_dict())
        logger.info(
            "Recorded %s %s for %s on %s at %s (%s)",
            self._book.kind.value,
            event_type.value,
            candidate.subject_id,
            _slot_label(date_value, shift),
            time_value,
            candidate.record_id,
        )
        return candidate

    def update(
        self,
        record_id: str,
        patch: AttendancePatch,
        *,
        actor_id: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        stored = self._load(record_id)

        subject_id = patch.subject_id or stored.subject_id
        if subject_id != stored.subject_id:
            # Position always follows the new subject; a supplied name only replaces the name.
            profile = self._profile_for(subject_id, None)
            subject_name, position = patch.subject_name or profile.name, profile.position
        else:
            subject_name, position = patch.subject_name or stored.subject_name, stored.position

        merged = replace(
            stored,
            subject_id=subject_id,
            subject_name=subject_name,
            position=position,
            shift=(patch.shift or stored.shift) if self._book.shift_required else None,
            event_type=self._parse_event_type(patch.event_type) if patch.event_type else stored.event_type,
            date=require_iso_date(patch.date) if patch.date else stored.date,
            time=require_hhmm(patch.time) if patch.time else stored.time,
            notes=patch.notes if patch.notes is not None else stored.notes,
        )

        result = self._validator.validate_update(record_id, stored, merged, self._load_all())
        self._raise_for_conflict(result, merged)

        updated = replace(
            merged,
            updated_at=timestamp_iso(now),
            updated_by=actor_id or stored.updated_by,
        )
        self._store.set(record_id, updated.to_dict())
        logger.info("Updated %s attendance %s", self._book.kind.value, record_id)
        return updated

    def delete(self, record_id: str) -> None:
        self._load(record_id)
        self._store.delete(record_id)
        logger.info("Deleted %s attendance %s", self._book.kind.value, record_id)

    def shift_state(self, subject_id: str, date_value: str, shift: Optional[str] = None) -> ShiftState:
        """Where a (subject, date, shift) slot stands: absent, checked in, or checked out."""
        slot = (subject_id, date_value, shift if self._book.shift_required else None)
        events = {r.event_type for r in self._load_all() if r.slot_key == slot}
        if EventType.CHECK_OUT in events:
            return ShiftState.CHECKED_OUT
        if EventType.CHECK_IN in events:
            return ShiftState.CHECKED_IN
        return ShiftState.ABSENT

    def _required_fields(self, data: AttendanceInput):
        fields = [("subjectId", data.subject_id)]
        if self._book.shift_required:
            fields.append(("shift", data.shift))
        fields.append(("eventType", data.event_type))
        return fields

    def _parse_event_type(self, value: Optional[str]) -> EventType:
        try:
            return EventType(value)
        except ValueError:
            allowed = ", ".join(e.value for e in EventType)
            raise ValidationError(f"eventType must be one of: {allowed}") from None

    def _profile_for(self, subject_id: str, supplied_name: Optional[str]) -> SubjectProfile:
        """Best-effort directory enrichment; never fails the caller."""
        if supplied_name:
            return SubjectProfile(subject_id, supplied_name)

        profile = None
        try:
            profile = self._directory.lookup(subject_id)
        except Exception:
            logger.warning("Directory lookup failed for %s %s", self._book.kind.value, subject_id, exc_info=True)
        return profile or SubjectProfile(subject_id, UNKNOWN_SUBJECT_NAME)

    def _raise_for_conflict(self, result: ValidationResult, candidate: AttendanceRecord) -> None:
        if result.ok:
            return

        slot = _slot_label(candidate.date, candidate.shift)
        direction = _DIRECTION[candidate.event_type]

        if result.conflict == ConflictKind.DUPLICATE:
            existing = result.existing
            who = existing.subject_name if existing and existing.subject_name else candidate.subject_id
            at = existing.time if existing else candidate.time
            logger.warning("Rejected duplicate %s for %s on %s", candidate.event_type.value, candidate.subject_id, slot)
            raise DuplicateConflictError(
                f"{who} already {direction} on {slot} at {at}; cannot record it again",
                existing=existing,
            )

        logger.warning("Rejected check-out without check-in for %s on %s", candidate.subject_id, slot)
        raise MissingPrerequisiteError(f"No check-in recorded for {candidate.subject_id} on {slot}; check in first")

    def _load(self, record_id: str) -> AttendanceRecord:
        raw = self._store.get(record_id) if record_id.startswith(self._book.record_prefix) else None
        if raw is None:
            raise NotFoundError(f"Attendance record {record_id} not found")
        try:
            return AttendanceRecord.from_dict(raw, kind=self._book.kind)
        except ValueError as e:
            raise ValidationError(f"Stored attendance record {record_id} is malformed: {e}") from e

    def _load_all(self) -> List[AttendanceRecord]:
        records = []
        for raw in self._store.list_by_prefix(self._book.record_prefix):
            try:
                records.append(AttendanceRecord.from_dict(raw, kind=self._book.kind))
            except ValueError:
                logger.warning("Skipping malformed %s attendance record %r", self._book.kind.value, raw.get("id"))
        return records
