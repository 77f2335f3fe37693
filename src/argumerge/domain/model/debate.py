"""Debate artifacts: the seven entity kinds a collection holds."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar

from argumerge.domain.model.entity import Entity
from argumerge.domain.model.enums import (
    EntityType,
    EvidenceType,
    Posture,
    Quality,
    QuestionKind,
    Stance,
    Strength,
)


@dataclass(frozen=True, eq=False, kw_only=True)
class Topic(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TOPIC
    PRIMARY_TEXT_FIELD: ClassVar[str] = "title"
    BACKFILL_FIELDS: ClassVar[tuple[str, ...]] = ("summary", "tags")

    title: str
    summary: str = ""
    posture: Posture = Posture.NEUTRAL_CRITICAL
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, eq=False, kw_only=True)
class Claim(Entity):
    """An affirmation attached to one or more topics.

    ``fingerprint`` is the stored copy of the content fingerprint. It is
    refreshed whenever the engine writes the claim and is never trusted as
    input for duplicate detection.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CLAIM
    PRIMARY_TEXT_FIELD: ClassVar[str] = "text"
    BACKFILL_FIELDS: ClassVar[tuple[str, ...]] = ("topic_ids", "fallacy_ids")

    text: str
    stance: Stance = Stance.NEUTRAL
    strength: Strength = Strength.MEDIUM
    topic_ids: tuple[str, ...] = ()
    fallacy_ids: tuple[str, ...] = ()
    fingerprint: str | None = None


@dataclass(frozen=True, eq=False, kw_only=True)
class Rebuttal(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.REBUTTAL
    PRIMARY_TEXT_FIELD: ClassVar[str] = "text"
    BACKFILL_FIELDS: ClassVar[tuple[str, ...]] = ("fallacy_ids",)
    PARENT_FIELD: ClassVar[str | None] = "claim_id"

    claim_id: str
    text: str
    fallacy_ids: tuple[str, ...] = ()


@dataclass(frozen=True, eq=False, kw_only=True)
class Evidence(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.EVIDENCE
    PRIMARY_TEXT_FIELD: ClassVar[str] = "content"
    BACKFILL_FIELDS: ClassVar[tuple[str, ...]] = ("source_id",)
    PARENT_FIELD: ClassVar[str | None] = "claim_id"

    claim_id: str
    content: str
    type: EvidenceType = EvidenceType.EXAMPLE
    source_id: str | None = None
    quality: Quality = Quality.MEDIUM


@dataclass(frozen=True, eq=False, kw_only=True)
class Question(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.QUESTION
    PRIMARY_TEXT_FIELD: ClassVar[str] = "text"

    target_id: str
    text: str
    kind: QuestionKind = QuestionKind.CLARIFYING


@dataclass(frozen=True, eq=False, kw_only=True)
class Source(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.SOURCE
    PRIMARY_TEXT_FIELD: ClassVar[str] = "title"
    BACKFILL_FIELDS: ClassVar[tuple[str, ...]] = (
        "citation",
        "url",
        "notes",
        "reliability_score",
    )

    title: str
    citation: str | None = None
    url: str | None = None
    publisher: str | None = None
    date: str | None = None
    reliability_score: float | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        score = self.reliability_score
        if score is not None and (math.isnan(score) or not 0.0 <= score <= 1.0):
            raise ValueError(f"reliabilityScore must be between 0.0 and 1.0, got {score}")


@dataclass(frozen=True, eq=False, kw_only=True)
class Tag(Entity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TAG
    PRIMARY_TEXT_FIELD: ClassVar[str] = "label"
    BACKFILL_FIELDS: ClassVar[tuple[str, ...]] = ("color",)

    label: str
    color: str | None = None


type DebateEntity = Topic | Claim | Rebuttal | Evidence | Question | Source | Tag

CLASS_BY_ENTITY_TYPE: dict[EntityType, type[Entity]] = {
    EntityType.TOPIC: Topic,
    EntityType.CLAIM: Claim,
    EntityType.REBUTTAL: Rebuttal,
    EntityType.EVIDENCE: Evidence,
    EntityType.QUESTION: Question,
    EntityType.SOURCE: Source,
    EntityType.TAG: Tag,
}
