"""
Services Package

Write-side case-management operations and their error types.
"""
from src.caseflow.services.errors import (
    CaseflowError,
    DuplicateFetchError,
    MergeValidationError,
    ApplicantNotFoundError,
    MergeReassignmentError,
)
from src.caseflow.services.record_merge import MergeResult, RecordMergeService, merge_comments

__all__ = [
    "CaseflowError",
    "DuplicateFetchError",
    "MergeValidationError",
    "ApplicantNotFoundError",
    "MergeReassignmentError",
    "MergeResult",
    "RecordMergeService",
    "merge_comments",
]
