"""
Service error classes.

Raised by the duplicate finder and merge service; routers translate them
into HTTP responses.
"""

from __future__ import annotations

from typing import Optional


class CaseflowError(Exception):
    """Base exception for case-management service errors."""

    pass


class DuplicateFetchError(CaseflowError):
    """Raised when the applicant set cannot be read. Safe to retry."""

    pass


class MergeValidationError(CaseflowError):
    """Raised when merge input is rejected before any change is made."""

    pass


class ApplicantNotFoundError(CaseflowError):
    """Raised when a merge references an applicant that does not exist."""

    def __init__(self, role: str, applicant_id: str):
        self.role = role
        self.applicant_id = applicant_id
        super().__init__(f"{role.capitalize()} application not found")


class MergeReassignmentError(CaseflowError):
    """
    Raised when a merge step fails after validation.

    The merge transaction has been rolled back: the duplicate applicant
    and all of its child records are unchanged, so the merge can be retried.
    """

    def __init__(self, step: str, cause: Optional[BaseException] = None):
        self.step = step
        self.cause = cause
        super().__init__(f"Failed to merge {step}")
