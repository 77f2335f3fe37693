from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING

from sqlalchemy import inspect

from argumerge.adapters.sqlalchemy.mappings import (
    TABLE_BY_ENTITY_TYPE,
    StringTupleType,
    UTCDateTime,
    entity_to_values,
    row_to_entity,
)
from argumerge.domain.model import EntityType
from tests.helpers.debate import make_claim

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_migrations_create_every_table(sqlite_engine: Engine) -> None:
    tables = set(inspect(sqlite_engine).get_table_names())

    assert {table.name for table in TABLE_BY_ENTITY_TYPE.values()} <= tables
    assert "alembic_version" in tables


def test_claim_fingerprint_column_is_indexed(sqlite_engine: Engine) -> None:
    indexes = inspect(sqlite_engine).get_indexes("claim")

    assert any(index["column_names"] == ["fingerprint"] for index in indexes)


def test_every_entity_field_has_a_column() -> None:
    claim = make_claim()

    values = entity_to_values(claim)

    assert set(values) == {column.name for column in TABLE_BY_ENTITY_TYPE[EntityType.CLAIM].c}


def test_row_to_entity_builds_the_right_class() -> None:
    values = entity_to_values(make_claim(topic_ids=("t1",)))

    class _Row:
        _mapping = values

    claim = row_to_entity(EntityType.CLAIM, _Row())  # pyright: ignore[reportArgumentType]

    assert claim.entity_type is EntityType.CLAIM
    assert claim.primary_text == values["text"]


def test_string_tuple_type_serializes_json_arrays() -> None:
    column_type = StringTupleType()

    stored = column_type.process_bind_param(("a", "b"), None)  # pyright: ignore[reportArgumentType]

    assert stored == '["a", "b"]'
    assert column_type.process_result_value(stored, None) == ("a", "b")  # pyright: ignore
    assert column_type.process_result_value(None, None) == ()  # pyright: ignore
    assert column_type.process_bind_param(None, None) == "[]"  # pyright: ignore


def test_utc_datetime_normalizes_offsets() -> None:
    column_type = UTCDateTime()
    paris = datetime(2024, 1, 1, 13, tzinfo=timezone(timedelta(hours=1)))

    stored = column_type.process_bind_param(paris, None)  # pyright: ignore[reportArgumentType]
    naive = column_type.process_result_value(datetime(2024, 1, 1, 12), None)  # pyright: ignore

    assert stored == datetime(2024, 1, 1, 12, tzinfo=UTC)
    assert naive == datetime(2024, 1, 1, 12, tzinfo=UTC)
