"""Read-only lookup structures over the existing collection.

One ``KindIndex`` per entity kind is built before resolution starts and never
changes afterwards. It answers two questions: which existing entity carries a
given fingerprint, and which existing entities are worth a similarity scan
for a given normalized text. Rebuttals and evidence are looked up only among
records attached to the same claim.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from argumerge.domain.model import EntityType

from .normalize import normalize_text
from .similarity import max_similarity_bound

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from argumerge.domain.model import DebateEntity

    from .fingerprint import FingerprintCache

DEFAULT_CANDIDATE_CAP: Final[int] = 500
DEFAULT_MAX_TEXT_LENGTH: Final[int] = 5000

# (parent id, fingerprint)
type ScopedKey = tuple[str | None, str]


def creation_order(entity: DebateEntity) -> tuple[object, str]:
    return (entity.created_at, entity.id)


@dataclass(frozen=True, slots=True)
class IndexedEntity:
    entity: DebateEntity
    normalized_text: str


@dataclass(slots=True)
class KindIndex:
    """Existing entities of one kind, ordered by creation."""

    entity_type: EntityType
    by_id: dict[str, DebateEntity] = field(default_factory=dict["str", "DebateEntity"])
    by_fingerprint: dict[ScopedKey, DebateEntity] = field(
        default_factory=dict["ScopedKey", "DebateEntity"]
    )
    by_length: dict[str | None, dict[int, list[IndexedEntity]]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(list["IndexedEntity"]))
    )

    @classmethod
    def build(
        cls,
        entity_type: EntityType,
        entities: Iterable[DebateEntity],
        *,
        fingerprints: FingerprintCache,
    ) -> KindIndex:
        index = cls(entity_type)
        for entity in sorted(entities, key=creation_order):
            index.by_id[entity.id] = entity
            # earliest-created entity wins a fingerprint
            index.by_fingerprint.setdefault((entity.parent_id, fingerprints(entity)), entity)
            normalized = normalize_text(entity.primary_text)
            index.by_length[entity.parent_id][len(normalized)].append(
                IndexedEntity(entity, normalized)
            )
        return index

    def __len__(self) -> int:
        return len(self.by_id)

    def get(self, entity_id: str) -> DebateEntity | None:
        return self.by_id.get(entity_id)

    def find_by_fingerprint(self, value: str, *, parent: str | None = None) -> DebateEntity | None:
        return self.by_fingerprint.get((parent, value))

    def similarity_candidates(
        self,
        normalized_text: str,
        *,
        threshold: float,
        parent: str | None = None,
        cap: int = DEFAULT_CANDIDATE_CAP,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
    ) -> list[IndexedEntity]:
        """Entities whose length allows a ratio of at least ``threshold``.

        Only entities under ``parent`` are considered. At most ``cap``
        candidates are returned, earliest created first.
        """

        length = len(normalized_text)
        eligible = [
            candidate
            for bucket_length, bucket in self.by_length.get(parent, {}).items()
            if bucket_length <= max_text_length
            and max_similarity_bound(length, bucket_length) >= threshold
            for candidate in bucket
        ]
        eligible.sort(key=lambda candidate: creation_order(candidate.entity))
        return eligible[:cap]


@dataclass(slots=True)
class CollectionIndex:
    """Per-kind indexes plus the id space shared by every kind."""

    kinds: dict[EntityType, KindIndex]
    all_ids: frozenset[str]

    @classmethod
    def build(
        cls,
        entities_by_kind: Mapping[EntityType, Iterable[DebateEntity]],
        *,
        fingerprints: FingerprintCache,
    ) -> CollectionIndex:
        kinds = {
            entity_type: KindIndex.build(
                entity_type,
                entities_by_kind.get(entity_type, ()),
                fingerprints=fingerprints,
            )
            for entity_type in EntityType
        }
        all_ids = frozenset(entity_id for index in kinds.values() for entity_id in index.by_id)
        return cls(kinds=kinds, all_ids=all_ids)

    def __getitem__(self, entity_type: EntityType) -> KindIndex:
        return self.kinds[entity_type]

    def contains(self, entity_type: EntityType, entity_id: str) -> bool:
        return entity_id in self.kinds[entity_type].by_id

    @property
    def total(self) -> int:
        return sum(len(index) for index in self.kinds.values())
