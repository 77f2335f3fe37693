"""Snapshot-to-local id translation for cross-entity references."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from argumerge.domain.model import Claim, EntityType, Evidence, Question, Rebuttal, Topic

from .errors import AmbiguousReferenceError, DanglingReferenceError

if TYPE_CHECKING:
    from argumerge.domain.model import DebateEntity

    from .index import CollectionIndex

log = logging.getLogger(__name__)

QUESTION_TARGET_TYPES: tuple[EntityType, ...] = (EntityType.TOPIC, EntityType.CLAIM)


def _empty_tables() -> dict[EntityType, dict[str, str]]:
    return {entity_type: {} for entity_type in EntityType}


@dataclass(slots=True)
class _Lookup:
    local_id: str | None
    reason: str = "not found"


@dataclass(slots=True)
class ReferenceRewriter:
    """Translate snapshot ids into the post-merge local id space.

    ``translations`` holds, per kind, the local id each resolved snapshot id
    ended up with: itself for a plain create, a fresh id after a collision,
    or the matched entity's id for a duplicate. Ids that were not part of the
    snapshot fall back to identity when the existing collection has them.

    Near-duplicates waiting for a decision are tracked separately. With
    ``provisional=True`` (preview pass) references to them resolve to the
    incoming id; otherwise the reference is dangling because the record was
    skipped.
    """

    index: CollectionIndex
    provisional: bool = True
    translations: dict[EntityType, dict[str, str]] = field(default_factory=_empty_tables)
    pending: dict[EntityType, dict[str, str]] = field(default_factory=_empty_tables)

    def record(self, entity_type: EntityType, snapshot_id: str, local_id: str) -> None:
        self.translations[entity_type][snapshot_id] = local_id
        if snapshot_id != local_id:
            log.debug("Translated %s id %s -> %s", entity_type, snapshot_id, local_id)

    def mark_pending(self, entity_type: EntityType, snapshot_id: str, incoming_id: str) -> None:
        self.pending[entity_type][snapshot_id] = incoming_id

    def translate(self, entity_type: EntityType, snapshot_id: str) -> str | None:
        return self._lookup(entity_type, snapshot_id).local_id

    def rewrite(self, entity: DebateEntity) -> DebateEntity:
        """Return ``entity`` with every reference field in local ids.

        Raises ``DanglingReferenceError`` or ``AmbiguousReferenceError``.
        The input object is returned unchanged when nothing needed rewriting.
        """

        match entity:
            case Topic():
                return self._rewrite_topic(entity)
            case Claim():
                topic_ids = tuple(
                    self._require(entity, "topic_ids", EntityType.TOPIC, topic_id)
                    for topic_id in entity.topic_ids
                )
                return _changed(entity, topic_ids=topic_ids)
            case Rebuttal():
                claim_id = self._require(entity, "claim_id", EntityType.CLAIM, entity.claim_id)
                return _changed(entity, claim_id=claim_id)
            case Evidence():
                claim_id = self._require(entity, "claim_id", EntityType.CLAIM, entity.claim_id)
                source_id = entity.source_id
                if source_id is not None:
                    source_id = self._require(entity, "source_id", EntityType.SOURCE, source_id)
                return _changed(entity, claim_id=claim_id, source_id=source_id)
            case Question():
                return _changed(entity, target_id=self._question_target(entity))
            case _:
                return entity

    def _rewrite_topic(self, topic: Topic) -> Topic:
        # tag entries are labels unless they name a tag from this snapshot
        tag_table = self.translations[EntityType.TAG]
        tags = tuple(tag_table.get(tag, tag) for tag in topic.tags)
        return _changed(topic, tags=tags)

    def _require(
        self,
        entity: DebateEntity,
        field_name: str,
        target_type: EntityType,
        target_id: str,
    ) -> str:
        lookup = self._lookup(target_type, target_id)
        if lookup.local_id is None:
            raise DanglingReferenceError(
                entity_type=entity.entity_type,
                record_id=entity.id,
                field_name=field_name,
                target_types=(target_type,),
                target_id=target_id,
                reason=lookup.reason,
            )
        return lookup.local_id

    def _question_target(self, question: Question) -> str:
        lookups = [
            (target_type, self._lookup(target_type, question.target_id))
            for target_type in QUESTION_TARGET_TYPES
        ]
        matches = tuple(
            (target_type, lookup.local_id)
            for target_type, lookup in lookups
            if lookup.local_id is not None
        )
        if len(matches) > 1:
            raise AmbiguousReferenceError(
                entity_type=question.entity_type,
                record_id=question.id,
                field_name="target_id",
                target_id=question.target_id,
                matches=matches,
            )
        if matches:
            return matches[0][1]
        reasons = [lookup.reason for _, lookup in lookups if lookup.reason != "not found"]
        raise DanglingReferenceError(
            entity_type=question.entity_type,
            record_id=question.id,
            field_name="target_id",
            target_types=QUESTION_TARGET_TYPES,
            target_id=question.target_id,
            reason=reasons[0] if reasons else "not found",
        )

    def _lookup(self, entity_type: EntityType, snapshot_id: str) -> _Lookup:
        translated = self.translations[entity_type].get(snapshot_id)
        if translated is not None:
            return _Lookup(translated)
        pending = self.pending[entity_type].get(snapshot_id)
        if pending is not None:
            if self.provisional:
                return _Lookup(pending)
            return _Lookup(None, reason="was skipped pending review")
        if self.index.contains(entity_type, snapshot_id):
            return _Lookup(snapshot_id)
        return _Lookup(None)


def _changed[TEntity: DebateEntity](entity: TEntity, **changes: object) -> TEntity:
    current = {name: getattr(entity, name) for name in changes}
    if current == changes:
        return entity
    return entity.with_changes(**changes)

