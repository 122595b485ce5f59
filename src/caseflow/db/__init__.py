"""
Database Package

Database models, connection management, and data persistence layer.
"""
from src.caseflow.db.base import Base
from src.caseflow.db.session import (
    engine,
    SessionLocal,
    get_db_session,
    health_check,
    close_connections,
    create_all_tables,
)
from src.caseflow.db.models import (
    Applicant,
    ApplicantStatus,
    FieldVisit,
    CaseEvent,
    ApplicationDocument,
    Client,
)
from src.caseflow.db.repository import (
    BaseRepository,
    ApplicantRepository,
    ChildRecordRepository,
    FieldVisitRepository,
    CaseEventRepository,
    ApplicationDocumentRepository,
    ClientRepository,
)

__all__ = [
    # Base
    "Base",
    # Session management
    "engine",
    "SessionLocal",
    "get_db_session",
    "health_check",
    "close_connections",
    "create_all_tables",
    # Models
    "Applicant",
    "ApplicantStatus",
    "FieldVisit",
    "CaseEvent",
    "ApplicationDocument",
    "Client",
    # Repositories
    "BaseRepository",
    "ApplicantRepository",
    "ChildRecordRepository",
    "FieldVisitRepository",
    "CaseEventRepository",
    "ApplicationDocumentRepository",
    "ClientRepository",
]
