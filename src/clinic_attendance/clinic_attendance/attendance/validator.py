from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.enums import ConflictKind, EventType
from .model import AttendanceRecord


@dataclass(frozen=True)
class ValidationResult:
    conflict: Optional[ConflictKind] = None
    existing: Optional[AttendanceRecord] = None

    @property
    def ok(self) -> bool:
        return self.conflict is None


OK = ValidationResult()


class AttendanceValidator:
    """Duplicate and check-in/check-out ordering rules.

    A (subject, date, shift) slot holds at most one event per direction, and a
    check-out needs the slot's check-in. There is no way back from a check-out
    to a new check-in on the same slot.
    """

    def validate_create(self, candidate: AttendanceRecord, existing: Sequence[AttendanceRecord]) -> ValidationResult:
        # Listing order is unspecified, so which duplicate gets reported is arbitrary.
        for record in existing:
            if record.tuple_key == candidate.tuple_key:
                return ValidationResult(ConflictKind.DUPLICATE, record)

        if candidate.event_type == EventType.CHECK_OUT:
            has_check_in = any(
                r.slot_key == candidate.slot_key and r.event_type == EventType.CHECK_IN for r in existing
            )
            if not has_check_in:
                return ValidationResult(ConflictKind.MISSING_CHECK_IN)

        return OK

    def requires_revalidation(self, stored: AttendanceRecord, candidate: AttendanceRecord) -> bool:
        """Only subject, shift, event type and date take part in the rules."""
        return stored.tuple_key != candidate.tuple_key

    def validate_update(
        self,
        record_id: str,
        stored: AttendanceRecord,
        candidate: AttendanceRecord,
        existing: Sequence[AttendanceRecord],
    ) -> ValidationResult:
        if not self.requires_revalidation(stored, candidate):
            return OK
        others = [r for r in existing if r.record_id != record_id]
        return self.validate_create(candidate, others)
