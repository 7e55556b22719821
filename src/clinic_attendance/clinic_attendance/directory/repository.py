from __future__ import annotations

from typing import Optional, Protocol

from .model import SubjectProfile


class SubjectDirectory(Protocol):
    """Read-only lookup of doctors/employees used to denormalize display names."""

    def lookup(self, subject_id: str) -> Optional[SubjectProfile]:
        raise NotImplementedError
