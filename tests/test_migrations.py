"""The initial migration must build the same indexes the models declare."""

import importlib.util
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from sqlmodel import SQLModel

import app.models  # noqa: F401

VERSIONS = Path(__file__).resolve().parent.parent / "alembic" / "versions"


@pytest.fixture
def recorded_op(monkeypatch) -> MagicMock:
    path = VERSIONS / "4f1a9c2e7b31_initial_hotel_request_schema.py"
    location = importlib.util.spec_from_file_location("initial_schema", path)
    module = importlib.util.module_from_spec(location)
    location.loader.exec_module(module)

    op = MagicMock()
    monkeypatch.setattr(module, "op", op)
    module.upgrade()
    return op


def _migration_indexes(op: MagicMock) -> dict[str, tuple[str, tuple[str, ...], bool]]:
    found = {}
    for call in op.create_index.call_args_list:
        name, table, columns = call.args
        found[name] = (table, tuple(columns), bool(call.kwargs.get("unique", False)))
    return found


def _model_indexes() -> dict[str, tuple[str, tuple[str, ...], bool]]:
    found = {}
    for table in SQLModel.metadata.tables.values():
        for index in table.indexes:
            found[index.name] = (table.name, tuple(c.name for c in index.columns), bool(index.unique))
    return found


def test_indexes_match_models(recorded_op):
    assert _migration_indexes(recorded_op) == _model_indexes()


def test_unique_lookups_are_unique_indexes(recorded_op):
    indexes = _migration_indexes(recorded_op)
    for name in ("ix_hotels_email", "ix_users_email", "ix_rooms_access_token"):
        assert indexes[name][2] is True, name

    # No second, column-level constraint on the same columns
    for call in recorded_op.create_table.call_args_list:
        for column in call.args[1:]:
            if getattr(column, "name", None) in ("email", "access_token"):
                assert not column.unique, f"{call.args[0]}.{column.name}"
