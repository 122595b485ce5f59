"""
Caseflow - Case management core for a housing-assistance nonprofit

Duplicate applicant detection and record merging over the case database.
"""

__version__ = "0.1.0"
