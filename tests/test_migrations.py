# tests/test_migrations.py - Migration chain creates the tables, columns and indexes the models declare
import importlib.util
from pathlib import Path

import pytest
import sqlalchemy as sa

from schooldesk.models import Base

VERSIONS = Path(__file__).resolve().parent.parent / "migrations" / "versions"


class RecordedSchema:
    """Takes the place of alembic's op and keeps the schema the calls would leave behind"""

    def __init__(self):
        self.tables = {}
        self.indexes = {}

    def create_table(self, name, *items, **kw):
        assert name not in self.tables, f"{name} created twice"
        self.tables[name] = {item.name for item in items if isinstance(item, sa.Column)}

    def drop_table(self, name, **kw):
        del self.tables[name]
        self.indexes = {index: table for index, table in self.indexes.items() if table != name}

    def add_column(self, table, column, **kw):
        self.tables[table].add(column.name)

    def drop_column(self, table, column, **kw):
        self.tables[table].remove(column)

    def create_index(self, name, table, columns, **kw):
        assert set(columns) <= self.tables[table]
        self.indexes[name] = table

    def drop_index(self, name, **kw):
        del self.indexes[name]

    def create_foreign_key(self, name, source, referent, local_cols, remote_cols, **kw):
        assert set(local_cols) <= self.tables[source]
        assert referent in self.tables

    def drop_constraint(self, name, table, **kw):
        assert table in self.tables

    def execute(self, statement, **kw):
        pass


def _revisions():
    modules = []
    for path in sorted(VERSIONS.glob("*.py")):
        spec = importlib.util.spec_from_file_location(path.stem, path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        modules.append(module)
    return modules


@pytest.fixture
def revisions():
    return _revisions()


@pytest.fixture
def upgraded(revisions):
    schema = RecordedSchema()
    for module in revisions:
        module.op = schema
        module.upgrade()
    return schema


def _model_indexes():
    names = set()
    for table in Base.metadata.tables.values():
        names.update(index.name for index in table.indexes)
    return names


def test_revisions_form_a_single_chain(revisions):
    assert revisions[0].down_revision is None
    for previous, current in zip(revisions, revisions[1:]):
        assert current.down_revision == previous.revision


def test_upgrade_matches_the_models(upgraded):
    assert set(upgraded.tables) == set(Base.metadata.tables)
    for name, table in Base.metadata.tables.items():
        assert upgraded.tables[name] == {column.name for column in table.columns}, name


def test_upgrade_creates_every_model_index(upgraded):
    assert _model_indexes() <= set(upgraded.indexes)


def test_downgrade_removes_everything(revisions, upgraded):
    for module in reversed(revisions):
        module.op = upgraded
        module.downgrade()

    assert upgraded.tables == {}
    assert upgraded.indexes == {}
