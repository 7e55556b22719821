from __future__ import annotations

from typing import Any, Dict, Optional

from ..store.repository import RecordStore
from .model import SubjectProfile
from .repository import SubjectDirectory


def _first(record: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = record.get(key)
        if value:
            return str(value)
    return None


class KVSubjectDirectory(SubjectDirectory):
    """Directory backed by ``dokter_`` / ``karyawan_`` records in the shared store.

    Directory records were written by the Indonesian-language admin screens, so
    both ``nama``/``posisi`` and ``name``/``position`` spellings exist.
    """

    def __init__(self, store: RecordStore, *, prefix: str):
        self._store = store
        self._prefix = prefix

    def lookup(self, subject_id: str) -> Optional[SubjectProfile]:
        for record in self._store.list_by_prefix(self._prefix):
            if record.get("id") != subject_id:
                continue
            name = _first(record, "nama", "name")
            if not name:
                return None
            return SubjectProfile(
                subject_id=subject_id,
                name=name,
                position=_first(record, "posisi", "position"),
            )
        return None
