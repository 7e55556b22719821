from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain-error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation"


class AuthenticationError(DomainError):
    """Raised when the bearer token is missing or rejected."""

    kind = "unauthorized"


class NotFoundError(DomainError):
    """Raised when an update/delete target does not exist."""

    kind = "not-found"


class DuplicateConflictError(DomainError):
    """Raised when an event is already recorded for the same tuple.

    ``existing`` is the conflicting record (whichever the listing returned first).
    """

    kind = "duplicate"

    def __init__(self, message: str, existing: Optional[Any] = None):
        super().__init__(message)
        self.existing = existing


class MissingPrerequisiteError(DomainError):
    """Raised when a check-out has no matching check-in."""

    kind = "missing-check-in"


class StoreError(DomainError):
    """Raised when the underlying record store fails."""

    kind = "store-failure"
