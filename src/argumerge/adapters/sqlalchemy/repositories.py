"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, cast

from sqlalchemy import insert, select, update

from argumerge.adapters.sqlalchemy.mappings import (
    TABLE_BY_ENTITY_TYPE,
    claim_table,
    entity_to_values,
    row_to_entity,
)
from argumerge.domain.model import (
    Claim,
    EntityType,
    Evidence,
    Question,
    Rebuttal,
    Source,
    Tag,
    Topic,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from argumerge.domain.model import DebateEntity


class SqlAlchemyEntityRepository[TEntity: DebateEntity]:
    """Shared row conversion for every entity kind."""

    entity_type: ClassVar[EntityType]

    def __init__(self, session: Session) -> None:
        self.session = session
        self._table = TABLE_BY_ENTITY_TYPE[self.entity_type]

    def add(self, entity: TEntity) -> None:
        self.session.execute(insert(self._table).values(**entity_to_values(entity)))

    def update(self, entity: TEntity) -> None:
        values = entity_to_values(entity)
        entity_id = values.pop("id")
        result = self.session.execute(
            update(self._table).where(self._table.c.id == entity_id).values(**values)
        )
        if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
            raise LookupError(f"{self.entity_type} {entity_id} does not exist")

    def get(self, entity_id: str) -> TEntity | None:
        row = self.session.execute(
            select(self._table).where(self._table.c.id == entity_id)
        ).one_or_none()
        if row is None:
            return None
        return cast("TEntity", row_to_entity(self.entity_type, row))

    def list_all(self) -> list[TEntity]:
        stmt = select(self._table).order_by(self._table.c.created_at, self._table.c.id)
        return [
            cast("TEntity", row_to_entity(self.entity_type, row))
            for row in self.session.execute(stmt)
        ]


class SqlAlchemyTopicRepository(SqlAlchemyEntityRepository[Topic]):
    entity_type = EntityType.TOPIC


class SqlAlchemyClaimRepository(SqlAlchemyEntityRepository[Claim]):
    entity_type = EntityType.CLAIM

    def find_by_fingerprint(self, fingerprint: str) -> list[Claim]:
        stmt = (
            select(claim_table)
            .where(claim_table.c.fingerprint == fingerprint)
            .order_by(claim_table.c.created_at, claim_table.c.id)
        )
        return [
            cast("Claim", row_to_entity(self.entity_type, row))
            for row in self.session.execute(stmt)
        ]


class SqlAlchemyRebuttalRepository(SqlAlchemyEntityRepository[Rebuttal]):
    entity_type = EntityType.REBUTTAL


class SqlAlchemyEvidenceRepository(SqlAlchemyEntityRepository[Evidence]):
    entity_type = EntityType.EVIDENCE


class SqlAlchemyQuestionRepository(SqlAlchemyEntityRepository[Question]):
    entity_type = EntityType.QUESTION


class SqlAlchemySourceRepository(SqlAlchemyEntityRepository[Source]):
    entity_type = EntityType.SOURCE


class SqlAlchemyTagRepository(SqlAlchemyEntityRepository[Tag]):
    entity_type = EntityType.TAG
