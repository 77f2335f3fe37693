"""Collect accepted resolutions into a batch of writes.

Responsibilities of this stage:
- turn NEW resolutions into creates and backfilled DUPLICATE targets into updates
- fold a backfill on a record created in the same session into its create
- materialize derived fields (``Claim.fingerprint``) on everything written

No persistence happens here; ``persist`` writes the change set in one unit of
work.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from argumerge.domain.model import Claim

from .contracts import DuplicateResolution, NewResolution
from .fingerprint import claim_fingerprint

if TYPE_CHECKING:
    from argumerge.domain.model import DebateEntity, EntityType

    from .contracts import EntityResolution


@dataclass(slots=True)
class ChangeSet:
    """Creates and updates for one import, in processing order."""

    creates: dict[str, DebateEntity] = field(default_factory=dict["str", "DebateEntity"])
    updates: dict[str, DebateEntity] = field(default_factory=dict["str", "DebateEntity"])

    def __len__(self) -> int:
        return len(self.creates) + len(self.updates)

    def add(self, resolution: EntityResolution) -> None:
        match resolution:
            case NewResolution(entity=entity):
                self.creates[entity.id] = materialize(entity)
            case DuplicateResolution(merged=merged) if merged is not None:
                written = materialize(merged)
                if merged.id in self.creates:
                    self.creates[merged.id] = written
                else:
                    self.updates[merged.id] = written
            case _:
                pass

    def creates_for(self, entity_type: EntityType) -> list[DebateEntity]:
        return [entity for entity in self.creates.values() if entity.entity_type is entity_type]

    def updates_for(self, entity_type: EntityType) -> list[DebateEntity]:
        return [entity for entity in self.updates.values() if entity.entity_type is entity_type]


class ApplyResolutions(Protocol):
    """Build the change set for a sequence of resolutions."""

    def __call__(self, resolutions: list[EntityResolution]) -> ChangeSet: ...


def build_change_set(resolutions: list[EntityResolution]) -> ChangeSet:
    change_set = ChangeSet()
    for resolution in resolutions:
        change_set.add(resolution)
    return change_set


def materialize[TEntity: DebateEntity](entity: TEntity) -> TEntity:
    """Refresh derived fields before ``entity`` is written."""

    if isinstance(entity, Claim):
        value = claim_fingerprint(entity)
        if entity.fingerprint != value:
            return entity.with_changes(fingerprint=value)
    return entity


if TYPE_CHECKING:
    _apply_check: ApplyResolutions = build_change_set
