"""Failure taxonomy for identity reconciliation.

Only the kind of failure is meaningful to callers: invalid input is reported
back field by field, everything else is an opaque internal failure. Nothing in
the domain retries; a caller that wants another attempt re-runs the whole
reconciliation.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    path: str
    message: str


class ReconciliationError(RuntimeError):
    """Base class for failures surfaced by the reconciliation core."""


class InvalidInputError(ReconciliationError):
    """Raised when an identify request cannot be accepted."""

    def __init__(self, issues: tuple[ValidationIssue, ...]) -> None:
        super().__init__("; ".join(f"{issue.path}: {issue.message}" for issue in issues))
        self.issues = issues


class StorageUnavailableError(ReconciliationError):
    """Raised when a read or write against the contact store fails."""


class MergeConflictError(ReconciliationError):
    """Raised when the unit of work collapsing two clusters cannot complete."""
