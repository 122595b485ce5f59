"""
Caseflow - Source Package

Top-level package holding the caseflow application code.
"""
