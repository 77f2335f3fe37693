"""Per-record classification against the collection index.

Responsibilities of this stage:
- classify one incoming record as NEW/DUPLICATE/NEAR_DUPLICATE/CONFLICT
- backfill empty fields on duplicate targets without overwriting anything
- take a newer version of a record that arrives under its own id
- keep session-local state: records accepted so far, ids allocated so far

Out of scope for this stage:
- reference rewriting (done before a record reaches the resolver)
- statistics and review bookkeeping
- persistence
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from argumerge.domain.model import EntityType, new_id

from .contracts import (
    ConflictResolution,
    DuplicateResolution,
    MatchKind,
    NearDuplicateResolution,
    NewResolution,
    ReviewAction,
)
from .fingerprint import FingerprintCache
from .index import DEFAULT_CANDIDATE_CAP, DEFAULT_MAX_TEXT_LENGTH
from .normalize import normalize_text
from .similarity import similarity_ratio

if TYPE_CHECKING:
    from argumerge.domain.model import DebateEntity

    from .contracts import EntityResolution
    from .index import CollectionIndex, IndexedEntity, ScopedKey

log = logging.getLogger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.90

type IdFactory = Callable[[], str]


def _per_kind[TValue]() -> dict[EntityType, dict[str, TValue]]:
    return {entity_type: {} for entity_type in EntityType}


class EntityResolver:
    """Resolve incoming records of one import session, in processing order."""

    def __init__(
        self,
        index: CollectionIndex,
        *,
        threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        candidate_cap: int = DEFAULT_CANDIDATE_CAP,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
        fingerprints: FingerprintCache | None = None,
        id_factory: IdFactory = new_id,
    ) -> None:
        self.index = index
        self.threshold = threshold
        self.candidate_cap = candidate_cap
        self.max_text_length = max_text_length
        self.fingerprints = fingerprints or FingerprintCache()
        self._id_factory = id_factory
        # records created or revised in this session, by parent and fingerprint
        self._batch: dict[EntityType, dict[ScopedKey, DebateEntity]] = {
            entity_type: {} for entity_type in EntityType
        }
        # fingerprint and accepted entity of the first record under each snapshot id
        self._seen: dict[EntityType, dict[str, tuple[str, DebateEntity]]] = _per_kind()
        # latest version of every entity touched in this session
        self._latest: dict[str, DebateEntity] = {}
        self._allocated: set[str] = set()

    def resolve(
        self,
        entity: DebateEntity,
        *,
        decision: ReviewAction | None = None,
    ) -> EntityResolution:
        """Classify ``entity``; its reference fields must already be local ids.

        ``decision`` applies only when the record turns out to be a
        near-duplicate: ``CONFIRM`` merges it, ``REJECT`` creates it.
        """

        kind = entity.entity_type
        snapshot_id = entity.id
        value = self.fingerprints(entity)

        seen = self._seen[kind].get(snapshot_id)
        if seen is not None and seen[0] != value:
            accepted = seen[1]
            return ConflictResolution(
                entity=entity,
                snapshot_id=snapshot_id,
                existing=self._latest.get(accepted.id, accepted),
                reason="snapshot id reused with different content",
            )

        resolution = self._classify(entity, value, decision=decision)
        if not isinstance(resolution, NearDuplicateResolution):
            self._seen[kind].setdefault(snapshot_id, (value, _accepted_entity(resolution)))
        return resolution

    def _classify(
        self,
        entity: DebateEntity,
        value: str,
        *,
        decision: ReviewAction | None,
    ) -> EntityResolution:
        kind = entity.entity_type
        snapshot_id = entity.id

        existing = self.index[kind].find_by_fingerprint(value, parent=entity.parent_id)
        if existing is not None:
            return self._duplicate(entity, existing, MatchKind.FINGERPRINT)

        batch = self._batch[kind].get((entity.parent_id, value))
        if batch is not None:
            return self._duplicate(entity, batch, MatchKind.BATCH_FINGERPRINT)

        same_id = self.index[kind].get(snapshot_id)
        if same_id is not None:
            return self._revise(entity, same_id, value)

        match = self._best_match(entity)
        if match is not None:
            candidate, score = match
            if decision is ReviewAction.CONFIRM:
                return self._duplicate(entity, candidate.entity, MatchKind.CONFIRMED_REVIEW)
            if decision is ReviewAction.REJECT:
                return self._create(entity, value, reason="review_rejected")
            log.debug(
                "%s %s is %.3f similar to %s", kind, snapshot_id, score, candidate.entity.id
            )
            return NearDuplicateResolution(
                entity=entity,
                snapshot_id=snapshot_id,
                target=self._latest.get(candidate.entity.id, candidate.entity),
                score=score,
            )

        return self._create(entity, value, reason="no_match")

    def _duplicate(
        self,
        entity: DebateEntity,
        target: DebateEntity,
        match_kind: MatchKind,
    ) -> DuplicateResolution:
        current = self._latest.get(target.id, target)
        merged = backfill(current, entity)
        if merged is not None:
            self._latest[merged.id] = merged
        return DuplicateResolution(
            target=current,
            snapshot_id=entity.id,
            match_kind=match_kind,
            merged=merged,
        )

    def _revise(
        self,
        entity: DebateEntity,
        existing: DebateEntity,
        value: str,
    ) -> DuplicateResolution:
        """Match an edited record to the stored record carrying the same id.

        A newer incoming version replaces the stored content; empty incoming
        fields keep their stored values. An older or equally old version only
        backfills.
        """

        current = self._latest.get(existing.id, existing)
        if entity.updated_at <= current.updated_at:
            return self._duplicate(entity, existing, MatchKind.ID)
        revised = entity.with_changes(created_at=current.created_at)
        revised = backfill(revised, current) or revised
        log.debug("%s %s replaced by a newer version", entity.entity_type, entity.id)
        self._latest[revised.id] = revised
        self._batch[entity.entity_type].setdefault((revised.parent_id, value), revised)
        return DuplicateResolution(
            target=current,
            snapshot_id=entity.id,
            match_kind=MatchKind.ID,
            merged=revised,
        )

    def _create(self, entity: DebateEntity, value: str, *, reason: str) -> NewResolution:
        snapshot_id = entity.id
        local_id = snapshot_id
        while local_id in self.index.all_ids or local_id in self._allocated:
            local_id = self._id_factory()
        if local_id != snapshot_id:
            log.debug(
                "Id %s already taken; %s created as %s", snapshot_id, entity.entity_type, local_id
            )
            entity = entity.with_changes(id=local_id)
        self._allocated.add(local_id)
        self._batch[entity.entity_type].setdefault((entity.parent_id, value), entity)
        self._latest[local_id] = entity
        return NewResolution(entity=entity, snapshot_id=snapshot_id, reason=reason)

    def _best_match(self, entity: DebateEntity) -> tuple[IndexedEntity, float] | None:
        text = entity.primary_text
        if len(text) > self.max_text_length:
            log.debug("Skipping similarity scan for oversized %s %s", entity.entity_type, entity.id)
            return None
        normalized = normalize_text(text)
        best: tuple[IndexedEntity, float] | None = None
        for candidate in self.index[entity.entity_type].similarity_candidates(
            normalized,
            threshold=self.threshold,
            parent=entity.parent_id,
            cap=self.candidate_cap,
            max_text_length=self.max_text_length,
        ):
            score = similarity_ratio(normalized, candidate.normalized_text)
            # strict comparison keeps the earliest-created candidate on ties
            if best is None or score > best[1]:
                best = (candidate, score)
        if best is None or best[1] < self.threshold:
            return None
        return best


def backfill[TEntity: DebateEntity](existing: TEntity, incoming: DebateEntity) -> TEntity | None:
    """Fill fields that are empty on ``existing`` from ``incoming``.

    Returns ``None`` when nothing was filled. Non-empty fields are never
    overwritten.
    """

    changes: dict[str, object] = {}
    for name in existing.BACKFILL_FIELDS:
        incoming_value = getattr(incoming, name)
        if _is_empty(getattr(existing, name)) and not _is_empty(incoming_value):
            changes[name] = incoming_value
    if not changes:
        return None
    changes["updated_at"] = max(existing.updated_at, incoming.updated_at)
    return existing.with_changes(**changes)


def _is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, tuple):
        return not value
    return False


def _accepted_entity(resolution: EntityResolution) -> DebateEntity:
    match resolution:
        case NewResolution(entity=entity):
            return entity
        case DuplicateResolution(target=target, merged=merged):
            return merged or target
        case NearDuplicateResolution(entity=entity) | ConflictResolution(entity=entity):
            return entity
