"""
Database Session Management

Provides database connection pooling and session management.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event, exc, pool, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config.settings import settings
from src.caseflow.utils.logger import get_logger

logger = get_logger(__name__)


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pool and driver options for the configured backend."""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    options: Dict[str, Any] = {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_timeout": settings.database_pool_timeout,
        "pool_recycle": settings.database_pool_recycle,
        "pool_pre_ping": True,  # Verify connections before using
    }
    if settings.database_statement_timeout_ms and database_url.startswith("postgresql"):
        options["connect_args"] = {
            "options": f"-c statement_timeout={settings.database_statement_timeout_ms}"
        }
    return options


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL with project defaults.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Configured engine
    """
    return create_engine(
        database_url,
        echo=settings.database_echo,  # Log SQL queries if enabled
        **_engine_options(database_url),
    )


engine = build_engine(settings.database_url)


@event.listens_for(engine, "connect")
def receive_connect(dbapi_conn, connection_record):
    logger.debug("database_connection_established")


@event.listens_for(pool.Pool, "invalidate")
def receive_invalidate(dbapi_conn, connection_record, exception):
    """
    Log when a connection is marked invalid and removed from the pool.
    """
    logger.warning(
        "database_connection_invalidated",
        exception=str(exception) if exception else None
    )


SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Get database session with automatic commit, rollback and cleanup.

    Usage:
        with get_db_session() as session:
            finder = DuplicateFinder(session)
            groups = finder.find_duplicates()

    Yields:
        Database session

    Raises:
        Exception: Re-raises any exception after rollback
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except exc.SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "database_session_rollback",
            error=str(e),
            error_type=type(e).__name__
        )
        raise
    except Exception as e:
        session.rollback()
        logger.error(
            "database_session_error",
            error=str(e),
            error_type=type(e).__name__
        )
        raise
    finally:
        session.close()


def health_check() -> bool:
    """
    Check database connection health.

    Returns:
        True if database is accessible, False otherwise
    """
    try:
        with get_db_session() as session:
            session.execute(text("SELECT 1"))
            return True
    except exc.SQLAlchemyError as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        return False


def close_connections():
    """
    Dispose of the engine. Call on application shutdown.
    """
    engine.dispose()
    logger.info("database_connections_closed")


def create_all_tables(bind: Engine = None):
    """
    Create all database tables defined in models.

    WARNING: Use Alembic migrations in production.
    """
    from src.caseflow.db.base import Base, import_all_models

    import_all_models()
    Base.metadata.create_all(bind=bind or engine)
    logger.info("database_tables_created")

