from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SubjectProfile:
    """Doctor or employee as listed in the clinic directory."""

    subject_id: str
    name: str
    position: Optional[str] = None
