"""Translate snapshot documents into domain snapshots and back.

Records are validated one at a time: a malformed record becomes an
``InvalidRecord`` and is reported by the engine, while a malformed envelope
(bad JSON, wrong shape, unsupported schema version) raises
``SnapshotParseError`` before anything is resolved.
"""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from argumerge.domain.model import (
    Claim,
    EntityType,
    Evidence,
    Question,
    Rebuttal,
    Source,
    Tag,
    Topic,
    utcnow,
)
from argumerge.domain.reconciliation.errors import SnapshotParseError
from argumerge.domain.reconciliation.fingerprint import claim_fingerprint
from argumerge.domain.reconciliation.snapshot import SCHEMA_VERSION, InvalidRecord, Snapshot

from .schema import (
    ClaimPayload,
    EvidencePayload,
    QuestionPayload,
    RebuttalPayload,
    RecordPayload,
    SnapshotDocument,
    SourcePayload,
    TagPayload,
    TopicPayload,
)

if TYPE_CHECKING:
    from datetime import datetime

    from argumerge.domain.model import DebateEntity
    from argumerge.domain.reconciliation.snapshot import CollectionSnapshot, SnapshotEntry

    from .schema import RecordPayloadType

log = getLogger(__name__)

DEFAULT_APP_NAME = "argumerge"

type SnapshotSource = str | bytes | Path

PAYLOAD_BY_ENTITY_TYPE: dict[EntityType, type[RecordPayload]] = {
    EntityType.TOPIC: TopicPayload,
    EntityType.CLAIM: ClaimPayload,
    EntityType.REBUTTAL: RebuttalPayload,
    EntityType.EVIDENCE: EvidencePayload,
    EntityType.QUESTION: QuestionPayload,
    EntityType.SOURCE: SourcePayload,
    EntityType.TAG: TagPayload,
}

DOCUMENT_FIELD_BY_ENTITY_TYPE: dict[EntityType, str] = {
    EntityType.TOPIC: "topics",
    EntityType.CLAIM: "claims",
    EntityType.REBUTTAL: "rebuttals",
    EntityType.EVIDENCE: "evidences",
    EntityType.QUESTION: "questions",
    EntityType.SOURCE: "sources",
    EntityType.TAG: "tags",
}


def load_snapshot(source: SnapshotSource) -> Snapshot:
    """Parse a snapshot from a file path or from JSON text."""

    if isinstance(source, Path):
        try:
            source = source.read_bytes()
        except OSError as exc:
            raise SnapshotParseError(f"Cannot read snapshot file: {exc}") from exc
    try:
        document = SnapshotDocument.model_validate_json(source)
    except ValidationError as exc:
        raise SnapshotParseError(f"Malformed snapshot document: {_describe(exc)}") from exc
    return parse_document(document)


def parse_document(document: SnapshotDocument) -> Snapshot:
    if document.schema_version != SCHEMA_VERSION:
        raise SnapshotParseError(
            f"Unsupported snapshot schema version {document.schema_version!r} "
            f"(expected {SCHEMA_VERSION!r})"
        )
    entries: dict[EntityType, tuple[SnapshotEntry, ...]] = {}
    for entity_type, field_name in DOCUMENT_FIELD_BY_ENTITY_TYPE.items():
        records: list[object] = getattr(document, field_name)
        entries[entity_type] = tuple(
            parse_record(entity_type, raw, position=position)
            for position, raw in enumerate(records)
        )
    return Snapshot(
        schema_version=document.schema_version,
        exported_at=document.exported_at,
        app=document.app,
        entries=entries,
    )


def parse_record(entity_type: EntityType, raw: object, *, position: int) -> SnapshotEntry:
    """Translate one raw record; failures come back as ``InvalidRecord``."""

    record_id = _raw_id(raw)
    if not isinstance(raw, Mapping):
        return InvalidRecord(
            entity_type=entity_type,
            position=position,
            record_id=None,
            message="Record is not an object",
        )
    try:
        payload = PAYLOAD_BY_ENTITY_TYPE[entity_type].model_validate(raw)
        return to_entity(payload)  # pyright: ignore[reportArgumentType]
    except ValidationError as exc:
        message = _describe(exc)
    except ValueError as exc:
        message = str(exc)
    log.debug("Invalid %s record at position %s: %s", entity_type, position, message)
    return InvalidRecord(
        entity_type=entity_type,
        position=position,
        record_id=record_id,
        message=message,
    )


def to_entity(payload: RecordPayloadType) -> DebateEntity:
    created_at = payload.created_at or utcnow()
    updated_at = payload.updated_at or created_at
    match payload:
        case TopicPayload():
            return Topic(
                id=payload.id,
                created_at=created_at,
                updated_at=updated_at,
                title=payload.title,
                summary=payload.summary,
                posture=payload.posture,
                tags=tuple(payload.tags),
            )
        case ClaimPayload():
            return _build_claim(payload, created_at=created_at, updated_at=updated_at)
        case RebuttalPayload():
            return Rebuttal(
                id=payload.id,
                created_at=created_at,
                updated_at=updated_at,
                claim_id=payload.claim_id,
                text=payload.text,
                fallacy_ids=tuple(payload.fallacy_ids),
            )
        case EvidencePayload():
            return Evidence(
                id=payload.id,
                created_at=created_at,
                updated_at=updated_at,
                claim_id=payload.claim_id,
                content=payload.content,
                type=payload.type,
                source_id=payload.source_id,
                quality=payload.quality,
            )
        case QuestionPayload():
            return Question(
                id=payload.id,
                created_at=created_at,
                updated_at=updated_at,
                target_id=payload.target_id,
                text=payload.text,
                kind=payload.kind,
            )
        case SourcePayload():
            return Source(
                id=payload.id,
                created_at=created_at,
                updated_at=updated_at,
                title=payload.title,
                citation=payload.citation,
                url=payload.url,
                publisher=payload.publisher,
                date=payload.date,
                reliability_score=payload.reliability_score,
                notes=payload.notes,
            )
        case TagPayload():
            return Tag(
                id=payload.id,
                created_at=created_at,
                updated_at=updated_at,
                label=payload.label,
                color=payload.color,
            )


def _build_claim(payload: ClaimPayload, *, created_at: datetime, updated_at: datetime) -> Claim:
    claim = Claim(
        id=payload.id,
        created_at=created_at,
        updated_at=updated_at,
        text=payload.text,
        stance=payload.stance,
        strength=payload.strength,
        topic_ids=tuple(payload.topic_ids),
        fallacy_ids=tuple(payload.fallacy_ids),
    )
    computed = claim_fingerprint(claim)
    supplied = payload.claim_fingerprint
    if supplied is not None and supplied != computed:
        log.warning(
            "Claim %s carries fingerprint %s, recomputed as %s", payload.id, supplied, computed
        )
    return claim.with_changes(fingerprint=computed)


def to_payload(entity: DebateEntity) -> RecordPayloadType:
    match entity:
        case Topic():
            return TopicPayload(
                id=entity.id,
                created_at=entity.created_at,
                updated_at=entity.updated_at,
                title=entity.title,
                summary=entity.summary,
                posture=entity.posture,
                tags=list(entity.tags),
            )
        case Claim():
            return ClaimPayload(
                id=entity.id,
                created_at=entity.created_at,
                updated_at=entity.updated_at,
                text=entity.text,
                stance=entity.stance,
                strength=entity.strength,
                topic_ids=list(entity.topic_ids),
                fallacy_ids=list(entity.fallacy_ids),
                claim_fingerprint=claim_fingerprint(entity),
            )
        case Rebuttal():
            return RebuttalPayload(
                id=entity.id,
                created_at=entity.created_at,
                updated_at=entity.updated_at,
                claim_id=entity.claim_id,
                text=entity.text,
                fallacy_ids=list(entity.fallacy_ids),
            )
        case Evidence():
            return EvidencePayload(
                id=entity.id,
                created_at=entity.created_at,
                updated_at=entity.updated_at,
                claim_id=entity.claim_id,
                type=entity.type,
                content=entity.content,
                source_id=entity.source_id,
                quality=entity.quality,
            )
        case Question():
            return QuestionPayload(
                id=entity.id,
                created_at=entity.created_at,
                updated_at=entity.updated_at,
                target_id=entity.target_id,
                text=entity.text,
                kind=entity.kind,
            )
        case Source():
            return SourcePayload(
                id=entity.id,
                created_at=entity.created_at,
                updated_at=entity.updated_at,
                title=entity.title,
                citation=entity.citation,
                url=entity.url,
                publisher=entity.publisher,
                date=entity.date,
                reliability_score=entity.reliability_score,
                notes=entity.notes,
            )
        case Tag():
            return TagPayload(
                id=entity.id,
                created_at=entity.created_at,
                updated_at=entity.updated_at,
                label=entity.label,
                color=entity.color,
            )


def build_document(
    collection: CollectionSnapshot, *, app: str = DEFAULT_APP_NAME
) -> SnapshotDocument:
    """Return the snapshot document for an exported collection."""

    records = {
        field_name: [
            to_payload(entity).model_dump(mode="json", by_alias=True)
            for entity in collection.entities_for(entity_type)
        ]
        for entity_type, field_name in DOCUMENT_FIELD_BY_ENTITY_TYPE.items()
    }
    return SnapshotDocument(
        schema_version=SCHEMA_VERSION,
        exported_at=collection.exported_at,
        app=app,
        **records,
    )


def dump_document(document: SnapshotDocument) -> str:
    return document.model_dump_json(by_alias=True, indent=2)


def _raw_id(raw: object) -> str | None:
    if isinstance(raw, Mapping):
        value = raw.get("id")  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        if isinstance(value, str) and value.strip():
            return value
    return None


def _describe(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "document"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
