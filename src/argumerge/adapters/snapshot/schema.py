"""Pydantic models describing the versioned JSON snapshot document."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from argumerge.domain.model import EvidenceType, Posture, Quality, QuestionKind, Stance, Strength

POSTURE_ALIASES: Mapping[str, str] = {
    "neutral_critique": Posture.NEUTRAL_CRITICAL,
    "neutre_critique": Posture.NEUTRAL_CRITICAL,
    "sceptique": Posture.SKEPTICAL,
    "comparatif_academique": Posture.ACADEMIC_COMPARATIVE,
}
LEVEL_ALIASES: Mapping[str, str] = {"med": "medium"}


def _enum_alias(aliases: Mapping[str, str]) -> Callable[[object], object]:
    def _normalize(value: object) -> object:
        if isinstance(value, str):
            lowered = value.strip().lower()
            return aliases.get(lowered, lowered)
        return value

    return _normalize


def _lowercase(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _none_to_empty_list(value: object) -> object:
    return [] if value is None else value


def _none_to_empty_string(value: object) -> object:
    return "" if value is None else value


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


def _assume_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class SnapshotBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RecordPayload(SnapshotBaseModel):
    id: str
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    _check_id = field_validator("id")(_require_text)
    _normalize_timestamps = field_validator("created_at", "updated_at")(_assume_utc)


class TopicPayload(RecordPayload):
    title: str
    summary: str = ""
    posture: Posture = Posture.NEUTRAL_CRITICAL
    tags: list[str] = Field(default_factory=list["str"])

    _check_title = field_validator("title")(_require_text)
    _normalize_summary = field_validator("summary", mode="before")(_none_to_empty_string)
    _normalize_posture = field_validator("posture", mode="before")(_enum_alias(POSTURE_ALIASES))
    _normalize_tags = field_validator("tags", mode="before")(_none_to_empty_list)


class ClaimPayload(RecordPayload):
    text: str
    stance: Stance = Stance.NEUTRAL
    strength: Strength = Strength.MEDIUM
    topic_ids: list[str] = Field(
        default_factory=list["str"],
        validation_alias=AliasChoices("topics", "topicIds", "topic_ids"),
        serialization_alias="topics",
    )
    fallacy_ids: list[str] = Field(default_factory=list["str"], alias="fallacyIds")
    claim_fingerprint: str | None = Field(default=None, alias="claimFingerprint")

    _check_text = field_validator("text")(_require_text)
    _normalize_stance = field_validator("stance", mode="before")(_lowercase)
    _normalize_strength = field_validator("strength", mode="before")(_enum_alias(LEVEL_ALIASES))
    _normalize_lists = field_validator("topic_ids", "fallacy_ids", mode="before")(
        _none_to_empty_list
    )
    _normalize_fingerprint = field_validator("claim_fingerprint", mode="before")(_blank_to_none)


class RebuttalPayload(RecordPayload):
    claim_id: str = Field(alias="claimId")
    text: str
    fallacy_ids: list[str] = Field(default_factory=list["str"], alias="fallacyIds")

    _check_text = field_validator("text", "claim_id")(_require_text)
    _normalize_fallacies = field_validator("fallacy_ids", mode="before")(_none_to_empty_list)


class EvidencePayload(RecordPayload):
    claim_id: str = Field(alias="claimId")
    type: EvidenceType = EvidenceType.EXAMPLE
    content: str
    source_id: str | None = Field(default=None, alias="sourceId")
    quality: Quality = Quality.MEDIUM

    _check_text = field_validator("content", "claim_id")(_require_text)
    _normalize_type = field_validator("type", mode="before")(_lowercase)
    _normalize_quality = field_validator("quality", mode="before")(_enum_alias(LEVEL_ALIASES))
    _normalize_source = field_validator("source_id", mode="before")(_blank_to_none)


class QuestionPayload(RecordPayload):
    target_id: str = Field(alias="targetId")
    text: str
    kind: QuestionKind = QuestionKind.CLARIFYING

    _check_text = field_validator("text", "target_id")(_require_text)
    _normalize_kind = field_validator("kind", mode="before")(_lowercase)


class SourcePayload(RecordPayload):
    title: str
    citation: str | None = None
    url: str | None = None
    publisher: str | None = None
    date: str | None = None
    reliability_score: float | None = Field(
        default=None, alias="reliabilityScore", ge=0.0, le=1.0
    )
    notes: str | None = None

    _check_title = field_validator("title")(_require_text)
    _normalize_optional = field_validator(
        "citation", "url", "publisher", "date", "notes", mode="before"
    )(_blank_to_none)


class TagPayload(RecordPayload):
    label: str
    color: str | None = None

    _check_label = field_validator("label")(_require_text)
    _normalize_color = field_validator("color", mode="before")(_blank_to_none)


class SnapshotDocument(SnapshotBaseModel):
    """Envelope of a snapshot; records stay raw until translated one by one."""

    schema_version: str = Field(alias="schemaVersion")
    exported_at: datetime | None = Field(default=None, alias="exportedAt")
    app: str | None = None
    topics: list[object] = Field(default_factory=list["object"])
    claims: list[object] = Field(default_factory=list["object"])
    rebuttals: list[object] = Field(default_factory=list["object"])
    evidences: list[object] = Field(default_factory=list["object"])
    questions: list[object] = Field(default_factory=list["object"])
    sources: list[object] = Field(default_factory=list["object"])
    tags: list[object] = Field(default_factory=list["object"])

    _normalize_exported_at = field_validator("exported_at")(_assume_utc)
    _normalize_arrays = field_validator(
        "topics",
        "claims",
        "rebuttals",
        "evidences",
        "questions",
        "sources",
        "tags",
        mode="before",
    )(_none_to_empty_list)


type RecordPayloadType = (
    TopicPayload
    | ClaimPayload
    | RebuttalPayload
    | EvidencePayload
    | QuestionPayload
    | SourcePayload
    | TagPayload
)
