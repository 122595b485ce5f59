"""
SQLAlchemy ORM Models

Applicants are the master case records. Field visits, case events and
application documents each reference exactly one applicant. Child foreign
keys do not cascade: an applicant that still owns child rows cannot be
deleted, so child records are never orphaned.
"""
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    String, Date, DateTime, Text, ForeignKey, Index, func
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.caseflow.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ApplicantStatus:
    """Known applicant status values (the column also accepts others)."""
    PENDING = "pending"
    CONTACTED = "contacted"
    IN_PROGRESS = "in-progress"
    CLOSED = "closed"


class Applicant(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Household/property case submitted through intake.

    Status transitions are owned by the intake and case-work screens; this
    service only reads applicants and deletes the losing side of a merge.
    """
    __tablename__ = "applicants"

    # Personal information
    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Applicant full name as entered"
    )
    phone_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Property information
    property_address: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Street address as entered"
    )
    property_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    property_county: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    property_zip: Mapped[str] = mapped_column(String(10), nullable=False, default="")

    # Case tracking
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=ApplicantStatus.PENDING,
        comment="pending / contacted / in-progress / closed / ..."
    )
    assigned_to: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="Assigned field worker"
    )
    comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_applicants_status", "status"),
        Index("idx_applicants_created_at", "created_at"),
        Index("idx_applicants_full_name", "full_name"),
    )

    def __repr__(self) -> str:
        return f"<Applicant(id={self.id}, name={self.full_name})>"


class FieldVisit(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Field worker visit to an applicant's property."""
    __tablename__ = "field_visits"

    applicant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("applicants.id"),
        nullable=False,
        comment="References applicants table"
    )
    visit_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    visit_outcome: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        comment="attempt or engagement"
    )
    staff_member: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    applicant: Mapped["Applicant"] = relationship("Applicant")

    __table_args__ = (
        Index("idx_field_visits_applicant_id", "applicant_id"),
    )

    def __repr__(self) -> str:
        return f"<FieldVisit(id={self.id}, applicant_id={self.applicant_id})>"


class CaseEvent(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Case note, status change or milestone logged against an applicant."""
    __tablename__ = "case_events"

    applicant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("applicants.id"),
        nullable=False,
        comment="References applicants table"
    )
    event_type: Mapped[str] = mapped_column(String(50), nullable=False, default="note")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    applicant: Mapped["Applicant"] = relationship("Applicant")

    __table_args__ = (
        Index("idx_case_events_applicant_id", "applicant_id"),
    )

    def __repr__(self) -> str:
        return f"<CaseEvent(id={self.id}, type={self.event_type})>"


class ApplicationDocument(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Metadata for a document uploaded to the blob store."""
    __tablename__ = "application_documents"

    application_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("applicants.id"),
        nullable=False,
        comment="References applicants table"
    )
    document_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    storage_path: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="Object key in the document store"
    )

    applicant: Mapped["Applicant"] = relationship("Applicant")

    __table_args__ = (
        Index("idx_application_documents_application_id", "application_id"),
    )

    def __repr__(self) -> str:
        return f"<ApplicationDocument(id={self.id}, file={self.file_name})>"


class Client(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Enrolled client, at most one per applicant."""
    __tablename__ = "clients"

    applicant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("applicants.id"),
        unique=True,
        nullable=False,
        comment="References applicants table (1:1)"
    )
    enrolled_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=True
    )

    applicant: Mapped["Applicant"] = relationship("Applicant")

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, applicant_id={self.applicant_id})>"
