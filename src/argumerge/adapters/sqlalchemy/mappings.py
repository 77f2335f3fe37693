"""SQLAlchemy table metadata for the debate collection.

Entities are frozen dataclasses, so they are not mapped onto the ORM; rows are
converted explicitly. Every column is named after the dataclass field it
stores.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Final, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

from argumerge.domain.model import (
    CLASS_BY_ENTITY_TYPE,
    EntityType,
    EvidenceType,
    Posture,
    Quality,
    QuestionKind,
    Stance,
    Strength,
)

if TYPE_CHECKING:
    from enum import StrEnum

    from sqlalchemy import Row

    from argumerge.domain.model import DebateEntity

ID_LENGTH: Final[int] = 64


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class StringTupleType(TypeDecorator[tuple[str, ...]]):
    """Ordered list of strings stored as a JSON array."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: tuple[str, ...] | None, dialect: Dialect) -> str:
        _ = dialect
        return json.dumps(list(value or ()))

    def process_result_value(self, value: str | None, dialect: Dialect) -> tuple[str, ...]:
        _ = dialect
        if value is None:
            return ()
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return ()
        items = cast(list[Any], loaded)
        return tuple(item for item in items if isinstance(item, str))


def _enum_column_type(enum_cls: type[StrEnum]) -> Enum:
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [member.value for member in members],
    )


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


def _timestamps() -> tuple[Column[datetime], Column[datetime]]:
    return (
        Column("created_at", UTCDateTime(), nullable=False),
        Column("updated_at", UTCDateTime(), nullable=False),
    )


topic_table = Table(
    "topic",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("title", Text, nullable=False),
    Column("summary", Text, nullable=False, default=""),
    Column("posture", _enum_column_type(Posture), nullable=False),
    Column("tags", StringTupleType(), nullable=False),
    *_timestamps(),
)

claim_table = Table(
    "claim",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("text", Text, nullable=False),
    Column("stance", _enum_column_type(Stance), nullable=False),
    Column("strength", _enum_column_type(Strength), nullable=False),
    Column("topic_ids", StringTupleType(), nullable=False),
    Column("fallacy_ids", StringTupleType(), nullable=False),
    Column("fingerprint", String(16), nullable=True),
    *_timestamps(),
    Index("ix_claim_fingerprint", "fingerprint"),
)

rebuttal_table = Table(
    "rebuttal",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("claim_id", String(ID_LENGTH), ForeignKey("claim.id"), nullable=False),
    Column("text", Text, nullable=False),
    Column("fallacy_ids", StringTupleType(), nullable=False),
    *_timestamps(),
)

evidence_table = Table(
    "evidence",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("claim_id", String(ID_LENGTH), ForeignKey("claim.id"), nullable=False),
    Column("content", Text, nullable=False),
    Column("type", _enum_column_type(EvidenceType), nullable=False),
    Column("source_id", String(ID_LENGTH), ForeignKey("source.id"), nullable=True),
    Column("quality", _enum_column_type(Quality), nullable=False),
    *_timestamps(),
)

question_table = Table(
    "question",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    # topic or claim id
    Column("target_id", String(ID_LENGTH), nullable=False),
    Column("text", Text, nullable=False),
    Column("kind", _enum_column_type(QuestionKind), nullable=False),
    *_timestamps(),
)

source_table = Table(
    "source",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("title", Text, nullable=False),
    Column("citation", Text, nullable=True),
    Column("url", Text, nullable=True),
    Column("publisher", Text, nullable=True),
    Column("date", String(64), nullable=True),
    Column("reliability_score", Float, nullable=True),
    Column("notes", Text, nullable=True),
    *_timestamps(),
)

tag_table = Table(
    "tag",
    metadata,
    Column("id", String(ID_LENGTH), primary_key=True),
    Column("label", Text, nullable=False),
    Column("color", String(32), nullable=True),
    *_timestamps(),
)

TABLE_BY_ENTITY_TYPE: Final[dict[EntityType, Table]] = {
    EntityType.TOPIC: topic_table,
    EntityType.CLAIM: claim_table,
    EntityType.REBUTTAL: rebuttal_table,
    EntityType.EVIDENCE: evidence_table,
    EntityType.QUESTION: question_table,
    EntityType.SOURCE: source_table,
    EntityType.TAG: tag_table,
}


def entity_to_values(entity: DebateEntity) -> dict[str, object]:
    """Column values for ``entity``."""

    return {field.name: getattr(entity, field.name) for field in dataclasses.fields(entity)}


def row_to_entity(entity_type: EntityType, row: Row[Any]) -> DebateEntity:
    entity_cls = CLASS_BY_ENTITY_TYPE[entity_type]
    return cast("DebateEntity", entity_cls(**dict(row._mapping)))  # noqa: SLF001

