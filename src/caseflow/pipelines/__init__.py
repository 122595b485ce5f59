"""
Pipelines Package

Read-side data pipelines:
- Deduplication: grouping open applicants that look like the same case
"""
from src.caseflow.pipelines.deduplication import DuplicateFinder, DuplicateGroup, group_duplicates

__all__ = ["DuplicateFinder", "DuplicateGroup", "group_duplicates"]
