"""
FastAPI Dependencies

Provides dependency injection for database sessions, services and settings.
"""
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from config.settings import Settings, settings
from src.caseflow.db.session import SessionLocal
from src.caseflow.pipelines.deduplication import DuplicateFinder
from src.caseflow.services.record_merge import RecordMergeService


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields:
        SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_duplicate_finder(db: Session = Depends(get_db)) -> DuplicateFinder:
    return DuplicateFinder(db)


def get_merge_service(db: Session = Depends(get_db)) -> RecordMergeService:
    return RecordMergeService(db)


def get_settings() -> Settings:
    """
    Settings dependency.

    Returns:
        Application settings
    """
    return settings
