"""
FastAPI REST API for the Caseflow case-management service

Provides REST endpoints for the admin dashboard to access:
- Duplicate applicant groups
- Record merging
- Applicant search and visit history
- Health checks
"""
