"""Shared reconciliation contract components.

This module holds the resolution tagged union produced by the resolver, the
review items and decisions exchanged with callers, and the statistics types
returned by the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Literal

from argumerge.domain.model import EntityType

from .state import ImportPhase

if TYPE_CHECKING:
    from argumerge.domain.model import DebateEntity

    from .errors import AmbiguousReferenceError

REVIEW_EXCERPT_LENGTH: Final[int] = 100


class ResolutionStatus(StrEnum):
    """Classification of one incoming record against the collection."""

    NEW = "new"
    DUPLICATE = "duplicate"
    NEAR_DUPLICATE = "near_duplicate"
    CONFLICT = "conflict"


class MatchKind(StrEnum):
    """How a duplicate was matched to its target."""

    FINGERPRINT = "fingerprint"
    BATCH_FINGERPRINT = "batch_fingerprint"
    CONFIRMED_REVIEW = "confirmed_review"
    ID = "id"


@dataclass(slots=True, kw_only=True)
class NewResolution:
    """Record has no match and will be created as ``entity``."""

    entity: DebateEntity
    snapshot_id: str
    reason: str | None = None
    status: Literal[ResolutionStatus.NEW] = ResolutionStatus.NEW

    @property
    def id_was_reassigned(self) -> bool:
        return self.entity.id != self.snapshot_id


@dataclass(slots=True, kw_only=True)
class DuplicateResolution:
    """Record matches ``target``; ``merged`` is set when the stored record changes."""

    target: DebateEntity
    snapshot_id: str
    match_kind: MatchKind
    merged: DebateEntity | None = None
    status: Literal[ResolutionStatus.DUPLICATE] = ResolutionStatus.DUPLICATE

    @property
    def updated(self) -> bool:
        return self.merged is not None


@dataclass(slots=True, kw_only=True)
class NearDuplicateResolution:
    """Record is similar to ``target`` above the threshold; needs a decision."""

    entity: DebateEntity
    snapshot_id: str
    target: DebateEntity
    score: float
    status: Literal[ResolutionStatus.NEAR_DUPLICATE] = ResolutionStatus.NEAR_DUPLICATE


@dataclass(slots=True, kw_only=True)
class ConflictResolution:
    """Record is forced onto an id already claimed by different content."""

    entity: DebateEntity
    snapshot_id: str
    existing: DebateEntity
    reason: str
    status: Literal[ResolutionStatus.CONFLICT] = ResolutionStatus.CONFLICT


type EntityResolution = (
    NewResolution | DuplicateResolution | NearDuplicateResolution | ConflictResolution
)


class ReviewReason(StrEnum):
    NEAR_DUPLICATE = "near_duplicate"
    CONFLICT = "conflict"


@dataclass(frozen=True, slots=True, kw_only=True)
class ReviewItem:
    """Incoming record surfaced to the caller for a decision or inspection."""

    entity_type: EntityType
    incoming_id: str
    existing_id: str
    incoming_text: str
    existing_text: str
    reason: ReviewReason
    similarity_score: float | None = None

    @property
    def key(self) -> tuple[EntityType, str]:
        return (self.entity_type, self.incoming_id)

    @classmethod
    def for_near_duplicate(cls, resolution: NearDuplicateResolution) -> ReviewItem:
        return cls(
            entity_type=resolution.entity.entity_type,
            incoming_id=resolution.snapshot_id,
            existing_id=resolution.target.id,
            incoming_text=_excerpt(resolution.entity.primary_text),
            existing_text=_excerpt(resolution.target.primary_text),
            reason=ReviewReason.NEAR_DUPLICATE,
            similarity_score=resolution.score,
        )

    @classmethod
    def for_conflict(cls, resolution: ConflictResolution) -> ReviewItem:
        return cls(
            entity_type=resolution.entity.entity_type,
            incoming_id=resolution.snapshot_id,
            existing_id=resolution.existing.id,
            incoming_text=_excerpt(resolution.entity.primary_text),
            existing_text=_excerpt(resolution.existing.primary_text),
            reason=ReviewReason.CONFLICT,
        )

    @classmethod
    def for_ambiguous_reference(
        cls, entity: DebateEntity, error: AmbiguousReferenceError
    ) -> ReviewItem:
        return cls(
            entity_type=entity.entity_type,
            incoming_id=entity.id,
            existing_id=error.target_id,
            incoming_text=_excerpt(entity.primary_text),
            existing_text=_excerpt(_describe_matches(error.matches)),
            reason=ReviewReason.CONFLICT,
        )


def _describe_matches(matches: tuple[tuple[EntityType, str], ...]) -> str:
    return ", ".join(f"{kind} {entity_id}" for kind, entity_id in matches)


def _excerpt(text: str) -> str:
    return text[:REVIEW_EXCERPT_LENGTH]


class ReviewAction(StrEnum):
    CONFIRM = "confirm"
    REJECT = "reject"


@dataclass(frozen=True, slots=True, kw_only=True)
class ReviewDecision:
    """Caller decision for one near-duplicate review item.

    ``CONFIRM`` merges the incoming record into the matched entity; ``REJECT``
    imports it as a new entity.
    """

    entity_type: EntityType
    incoming_id: str
    action: ReviewAction

    @property
    def key(self) -> tuple[EntityType, str]:
        return (self.entity_type, self.incoming_id)

    @classmethod
    def confirm(cls, item: ReviewItem) -> ReviewDecision:
        return cls(
            entity_type=item.entity_type,
            incoming_id=item.incoming_id,
            action=ReviewAction.CONFIRM,
        )

    @classmethod
    def reject(cls, item: ReviewItem) -> ReviewDecision:
        return cls(
            entity_type=item.entity_type,
            incoming_id=item.incoming_id,
            action=ReviewAction.REJECT,
        )


type DecisionsByItem = dict[tuple[EntityType, str], ReviewAction]


@dataclass(slots=True)
class KindStats:
    """Per-kind counters. Every record lands in exactly one bucket."""

    created: int = 0
    updated: int = 0
    duplicates: int = 0
    near_duplicates: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated + self.duplicates + self.near_duplicates + self.errors

    def add(self, other: KindStats) -> None:
        self.created += other.created
        self.updated += other.updated
        self.duplicates += other.duplicates
        self.near_duplicates += other.near_duplicates
        self.errors += other.errors


def _new_stats_index() -> dict[EntityType, KindStats]:
    return {entity_type: KindStats() for entity_type in EntityType}


@dataclass(slots=True, kw_only=True)
class ImportSummary:
    """Outcome of one import call, reported even when records were skipped."""

    state: ImportPhase
    total_items: int = 0
    by_kind: dict[EntityType, KindStats] = field(default_factory=_new_stats_index)
    error_messages: list[str] = field(default_factory=list["str"])
    items_for_review: list[ReviewItem] = field(default_factory=list["ReviewItem"])

    @property
    def success(self) -> bool:
        return self.state is ImportPhase.COMMITTED and self.errors == 0

    @property
    def totals(self) -> KindStats:
        aggregate = KindStats()
        for stats in self.by_kind.values():
            aggregate.add(stats)
        return aggregate

    @property
    def created(self) -> int:
        return self.totals.created

    @property
    def updated(self) -> int:
        return self.totals.updated

    @property
    def duplicates(self) -> int:
        return self.totals.duplicates

    @property
    def near_duplicates(self) -> int:
        return self.totals.near_duplicates

    @property
    def errors(self) -> int:
        return self.totals.errors

    def review_page(self, page: int, page_size: int = 50) -> list[ReviewItem]:
        """Return one page of review items (zero-based)."""

        if page < 0:
            raise ValueError("page must be non-negative")
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        start = page * page_size
        return self.items_for_review[start : start + page_size]
