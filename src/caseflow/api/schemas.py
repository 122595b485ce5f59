"""
Pydantic Schemas for API Request/Response Models

These schemas define the JSON structure for API endpoints.
"""
from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field


class ApplicantBase(BaseModel):
    """Applicant fields shown in lists and duplicate groups."""
    id: str
    full_name: str
    property_address: str
    property_city: Optional[str] = None
    property_county: Optional[str] = None
    property_zip: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ApplicantDetail(ApplicantBase):
    """Applicant with case-tracking fields."""
    assigned_to: Optional[str] = None
    comments: Optional[str] = None
    updated_at: Optional[datetime] = None


class ApplicantWithCounts(ApplicantBase):
    """Duplicate group member annotated with child-record counts."""
    assigned_to: Optional[str] = None
    comments: Optional[str] = None
    visit_count: int = Field(0, ge=0)
    event_count: int = Field(0, ge=0)
    document_count: int = Field(0, ge=0)


class DuplicateGroup(BaseModel):
    """Applicants sharing a normalized name or address."""
    match_type: str = Field(..., alias="matchType", pattern="^(name|address)$")
    match_value: str = Field(..., alias="matchValue")
    applications: List[ApplicantWithCounts]

    class Config:
        populate_by_name = True


class DuplicateGroupList(BaseModel):
    """Envelope for the duplicates view."""
    data: List[DuplicateGroup]


class MergeRequest(BaseModel):
    """Body of a merge request; the master id is in the path."""
    duplicate_id: Optional[str] = Field(None, alias="duplicateId")

    class Config:
        populate_by_name = True


class MergeResponse(BaseModel):
    """Merge acknowledgement with the surviving record."""
    success: bool = True
    message: str = "Applications merged successfully"
    data: ApplicantDetail


class ApplicantSearchResults(BaseModel):
    data: List[ApplicantBase]


class FieldVisitInfo(BaseModel):
    """Field visit as shown on an applicant's visit history."""
    id: str
    applicant_id: str
    visit_date: Optional[date] = None
    visit_outcome: Optional[str] = None
    staff_member: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ApplicantVisits(BaseModel):
    """Applicant with visit history and outcome tallies."""
    applicant: ApplicantDetail
    visits: List[FieldVisitInfo]
    visit_count: int = Field(..., alias="visitCount")
    attempt_count: int = Field(..., alias="attemptCount")
    engagement_count: int = Field(..., alias="engagementCount")

    class Config:
        populate_by_name = True


class ErrorResponse(BaseModel):
    detail: str


class HealthCheck(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "0.1.0"
    database: str = "connected"
    timestamp: datetime
