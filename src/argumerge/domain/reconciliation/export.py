"""Collection export: the structural inverse of an import."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from argumerge.domain.model import EntityType, utcnow

from .apply import materialize
from .index import creation_order
from .persist import load_collection
from .snapshot import CollectionSnapshot

if TYPE_CHECKING:
    from datetime import datetime

    from argumerge.domain.model import DebateEntity

    from .persist import UnitOfWorkFactory

log = logging.getLogger(__name__)


def export_collection(
    unit_of_work_factory: UnitOfWorkFactory,
    *,
    clock: Callable[[], datetime] = utcnow,
) -> CollectionSnapshot:
    """Read the whole collection in one unit of work and return it as a snapshot.

    Nothing is written. Entities are ordered by creation time and claims carry
    a freshly computed fingerprint, so importing the result back into the same
    collection classifies every record as a duplicate.
    """

    entities = load_collection(unit_of_work_factory)

    def ordered(entity_type: EntityType) -> tuple[DebateEntity, ...]:
        return tuple(
            materialize(entity)
            for entity in sorted(entities.get(entity_type, ()), key=creation_order)
        )

    snapshot = CollectionSnapshot(
        exported_at=clock(),
        topics=ordered(EntityType.TOPIC),  # pyright: ignore[reportArgumentType]
        claims=ordered(EntityType.CLAIM),  # pyright: ignore[reportArgumentType]
        rebuttals=ordered(EntityType.REBUTTAL),  # pyright: ignore[reportArgumentType]
        evidences=ordered(EntityType.EVIDENCE),  # pyright: ignore[reportArgumentType]
        questions=ordered(EntityType.QUESTION),  # pyright: ignore[reportArgumentType]
        sources=ordered(EntityType.SOURCE),  # pyright: ignore[reportArgumentType]
        tags=ordered(EntityType.TAG),  # pyright: ignore[reportArgumentType]
    )
    log.info(
        "Exported %s entities", sum(len(snapshot.entities_for(kind)) for kind in EntityType)
    )
    return snapshot
