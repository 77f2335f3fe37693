"""Snapshot containers exchanged between the snapshot adapter and the engine.

``Snapshot`` is an import-side snapshot after boundary translation: per kind,
the records in document order, each either a domain entity (still carrying
snapshot ids in its reference fields) or an ``InvalidRecord`` that failed
translation. ``CollectionSnapshot`` is the export-side view of a collection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from argumerge.domain.model import EntityType

if TYPE_CHECKING:
    from datetime import datetime

    from argumerge.domain.model import (
        Claim,
        DebateEntity,
        Evidence,
        Question,
        Rebuttal,
        Source,
        Tag,
        Topic,
    )

SCHEMA_VERSION: Final[str] = "1.0"

# kinds without references first, then in dependency order
RESOLUTION_ORDER: Final[tuple[EntityType, ...]] = (
    EntityType.TAG,
    EntityType.SOURCE,
    EntityType.TOPIC,
    EntityType.CLAIM,
    EntityType.REBUTTAL,
    EntityType.EVIDENCE,
    EntityType.QUESTION,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class InvalidRecord:
    """Snapshot record rejected at the boundary."""

    entity_type: EntityType
    position: int
    record_id: str | None
    message: str


type SnapshotEntry = DebateEntity | InvalidRecord


def _new_entry_index() -> dict[EntityType, tuple[SnapshotEntry, ...]]:
    return {entity_type: () for entity_type in EntityType}


@dataclass(slots=True, kw_only=True)
class Snapshot:
    schema_version: str = SCHEMA_VERSION
    exported_at: datetime | None = None
    app: str | None = None
    entries: dict[EntityType, tuple[SnapshotEntry, ...]] = field(
        default_factory=_new_entry_index
    )

    def entries_for(self, entity_type: EntityType) -> tuple[SnapshotEntry, ...]:
        return self.entries.get(entity_type, ())

    @property
    def total_items(self) -> int:
        return sum(len(entries) for entries in self.entries.values())


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionSnapshot:
    """Every entity of a collection, grouped by kind, in stable order."""

    exported_at: datetime
    topics: tuple[Topic, ...] = ()
    claims: tuple[Claim, ...] = ()
    rebuttals: tuple[Rebuttal, ...] = ()
    evidences: tuple[Evidence, ...] = ()
    questions: tuple[Question, ...] = ()
    sources: tuple[Source, ...] = ()
    tags: tuple[Tag, ...] = ()

    def entities_for(self, entity_type: EntityType) -> tuple[DebateEntity, ...]:
        match entity_type:
            case EntityType.TOPIC:
                return self.topics
            case EntityType.CLAIM:
                return self.claims
            case EntityType.REBUTTAL:
                return self.rebuttals
            case EntityType.EVIDENCE:
                return self.evidences
            case EntityType.QUESTION:
                return self.questions
            case EntityType.SOURCE:
                return self.sources
            case EntityType.TAG:
                return self.tags

    def as_snapshot(self) -> Snapshot:
        """View this export as an import-side snapshot."""

        return Snapshot(
            exported_at=self.exported_at,
            entries={entity_type: self.entities_for(entity_type) for entity_type in EntityType},
        )
