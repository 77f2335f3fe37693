"""Persistence stage: read the collection, write a change set.

Both directions go through one unit of work each. A failed write rolls the
whole unit of work back and surfaces as ``StorageError``; nothing from the
change set survives.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from argumerge.domain.model import EntityType

from .errors import ReconciliationError, StorageError
from .snapshot import RESOLUTION_ORDER

if TYPE_CHECKING:
    from argumerge.domain.model import DebateEntity
    from argumerge.domain.ports import CollectionUnitOfWork

    from .apply import ChangeSet

log = logging.getLogger(__name__)

type UnitOfWorkFactory = Callable[[], CollectionUnitOfWork]


@dataclass(slots=True)
class PersistenceResult:
    """Summary of persisted changes for one import."""

    committed: bool
    created: int = 0
    updated: int = 0


class PersistChangeSet(Protocol):
    """Persist a change set and commit the transaction."""

    def __call__(self, change_set: ChangeSet) -> PersistenceResult: ...


@dataclass(slots=True)
class UnitOfWorkPersister:
    """Write a change set in one unit of work."""

    unit_of_work_factory: UnitOfWorkFactory

    def __call__(self, change_set: ChangeSet) -> PersistenceResult:
        result = PersistenceResult(committed=False)
        if not change_set:
            log.debug("Nothing to persist")
            result.committed = True
            return result
        try:
            with self.unit_of_work_factory() as uow:
                for entity_type in RESOLUTION_ORDER:
                    repository = uow.repositories.for_type(entity_type)
                    for entity in change_set.creates_for(entity_type):
                        repository.add(entity)
                        result.created += 1
                    for entity in change_set.updates_for(entity_type):
                        repository.update(entity)
                        result.updated += 1
                uow.commit()
        except ReconciliationError:
            raise
        except Exception as exc:
            raise StorageError(f"Failed to persist import: {exc}") from exc
        result.committed = True
        log.debug("Persisted %s creates and %s updates", result.created, result.updated)
        return result


def load_collection(
    unit_of_work_factory: UnitOfWorkFactory,
) -> dict[EntityType, list[DebateEntity]]:
    """Read every entity of the collection, grouped by kind, without writing."""

    try:
        with unit_of_work_factory() as uow:
            return {
                entity_type: list(uow.repositories.for_type(entity_type).list_all())
                for entity_type in EntityType
            }
    except ReconciliationError:
        raise
    except Exception as exc:
        raise StorageError(f"Failed to read collection: {exc}") from exc
