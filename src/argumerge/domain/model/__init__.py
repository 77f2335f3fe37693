"""Public domain model surface."""

from __future__ import annotations

from argumerge.domain.model.debate import (
    CLASS_BY_ENTITY_TYPE,
    Claim,
    DebateEntity,
    Evidence,
    Question,
    Rebuttal,
    Source,
    Tag,
    Topic,
)
from argumerge.domain.model.entity import Entity, EntityRef, new_id, utcnow
from argumerge.domain.model.enums import (
    EntityType,
    EvidenceType,
    Posture,
    Quality,
    QuestionKind,
    Stance,
    Strength,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "EntityRef",
    "new_id",
    "utcnow",
    # artifacts
    "CLASS_BY_ENTITY_TYPE",
    "Claim",
    "DebateEntity",
    "Evidence",
    "Question",
    "Rebuttal",
    "Source",
    "Tag",
    "Topic",
    # enums
    "EntityType",
    "EvidenceType",
    "Posture",
    "Quality",
    "QuestionKind",
    "Stance",
    "Strength",
]
