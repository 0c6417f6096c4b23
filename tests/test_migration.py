"""The initial migration builds the same schema as the ORM models."""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from database import Base

MIGRATION = Path(__file__).resolve().parent.parent / "alembic" / "versions" / "1a2b3c4d5e6f_initial_migration.py"


@pytest.fixture
def migration():
    spec = importlib.util.spec_from_file_location("initial_migration", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run(connection, step):
    context = MigrationContext.configure(connection)
    with Operations.context(context):
        step()


def test_upgrade_matches_models(migration):
    engine = create_engine("sqlite://")
    with engine.begin() as connection:
        run(connection, migration.upgrade)
        inspector = inspect(connection)

        assert set(inspector.get_table_names()) == {"users", "tasks"}
        for table in Base.metadata.sorted_tables:
            migrated = {col["name"] for col in inspector.get_columns(table.name)}
            assert migrated == set(table.columns.keys()), table.name

        unique_indexes = [ix for ix in inspector.get_indexes("users") if ix["unique"]]
        assert [ix["column_names"] for ix in unique_indexes] == [["email"]]


def test_downgrade_drops_everything(migration):
    engine = create_engine("sqlite://")
    with engine.begin() as connection:
        run(connection, migration.upgrade)
        run(connection, migration.downgrade)
        assert inspect(connection).get_table_names() == []
