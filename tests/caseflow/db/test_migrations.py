"""
Tests for the Alembic migration environment
"""
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config

from src.caseflow.db.base import Base
from src.caseflow.db import models  # noqa: F401

PROJECT_ROOT = Path(__file__).resolve().parents[3]


@pytest.fixture
def migrated_db(tmp_path):
    """Upgrade a throwaway SQLite file to head and return its engine."""
    url = f"sqlite:///{tmp_path / 'caseflow.db'}"

    config = Config()
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    config.set_main_option("sqlalchemy.url", url)
    command.upgrade(config, "head")

    engine = sa.create_engine(url)
    yield engine
    engine.dispose()


class TestInitialSchema:

    def test_creates_every_model_table(self, migrated_db):
        tables = set(sa.inspect(migrated_db).get_table_names())
        assert set(Base.metadata.tables) <= tables

    def test_child_foreign_keys_do_not_cascade(self, migrated_db):
        inspector = sa.inspect(migrated_db)

        for table in ("field_visits", "case_events", "application_documents", "clients"):
            (fk,) = inspector.get_foreign_keys(table)
            assert fk["referred_table"] == "applicants"
            assert not fk.get("options", {}).get("ondelete")

    def test_document_foreign_key_column(self, migrated_db):
        (fk,) = sa.inspect(migrated_db).get_foreign_keys("application_documents")
        assert fk["constrained_columns"] == ["application_id"]
