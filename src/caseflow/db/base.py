"""
SQLAlchemy Base and Mixins

Provides declarative base and reusable mixins for database models.
"""
import sqlite3
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """
    Base class for all database models.
    """

    id: Any


def generate_uuid() -> str:
    """String UUID used as primary key for applicants and child records."""
    return str(uuid.uuid4())


class UUIDPrimaryKeyMixin:
    """
    Mixin adding a string UUID primary key.

    Keys are generated client-side so records can be referenced before flush.
    """

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_uuid,
        comment="Immutable record identifier"
    )


class TimestampMixin:
    """
    Mixin to add created_at and updated_at timestamp columns.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Timestamp when record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="Timestamp when record was last updated"
    )


def import_all_models():
    """
    Import all models to register them with SQLAlchemy Base.

    Call before create_all() or Alembic autogenerate.
    """
    from src.caseflow.db import models  # noqa: F401


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """SQLite ignores foreign keys unless asked; local and test engines need them enforced."""
    if isinstance(dbapi_conn, sqlite3.Connection):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
