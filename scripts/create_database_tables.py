"""
Create Database Tables Using SQLAlchemy

Creates all tables directly with create_all(). Useful for local setup and
throwaway databases; production schemas are managed by Alembic.
"""
import sys
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import sqlalchemy as sa

from src.caseflow.db.session import engine, create_all_tables, health_check
from src.caseflow.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main():
    """Create all database tables."""
    setup_logging()
    logger.info("creating_database_tables", url=engine.url.render_as_string(hide_password=True))

    if not health_check():
        logger.error("database_unreachable")
        sys.exit(1)

    create_all_tables()

    tables = sa.inspect(engine).get_table_names()
    logger.info("database_tables_verified", count=len(tables), tables=tables)


if __name__ == "__main__":
    main()
