"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for the seven debate artifact kinds."""

    TOPIC = "topic"
    CLAIM = "claim"
    REBUTTAL = "rebuttal"
    EVIDENCE = "evidence"
    QUESTION = "question"
    SOURCE = "source"
    TAG = "tag"


class Posture(StrEnum):
    NEUTRAL_CRITICAL = "neutral_critical"
    SKEPTICAL = "skeptical"
    ACADEMIC_COMPARATIVE = "academic_comparative"


class Stance(StrEnum):
    PRO = "pro"
    CON = "con"
    NEUTRAL = "neutral"


class Strength(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EvidenceType(StrEnum):
    STUDY = "study"
    STAT = "stat"
    QUOTE = "quote"
    EXAMPLE = "example"


class Quality(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class QuestionKind(StrEnum):
    SOCRATIC = "socratic"
    CLARIFYING = "clarifying"
    CHALLENGE = "challenge"
    EVIDENCE = "evidence"
