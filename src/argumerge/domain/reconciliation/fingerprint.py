"""Deterministic content fingerprints per entity kind.

A fingerprint is the first 16 hex characters of the SHA-256 digest of the
kind name and the entity's normalized identity fields, joined with ``|`` in a
fixed order. Equal fingerprints mean "content-identical for deduplication";
this is a deliberate approximation, not cryptographic identity.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from functools import singledispatch
from typing import TYPE_CHECKING, Final

from argumerge.domain.model import Claim, Evidence, Question, Rebuttal, Source, Tag, Topic

from .normalize import normalize_text

if TYPE_CHECKING:
    from argumerge.domain.model import DebateEntity, Entity

FINGERPRINT_LENGTH: Final[int] = 16
_FIELD_SEPARATOR: Final[str] = "|"


def fingerprint(entity: Entity) -> str:
    """Return the fingerprint of ``entity``."""

    parts = (entity.entity_type.value, *_identity_fields(entity))
    payload = _FIELD_SEPARATOR.join(parts).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()[:FINGERPRINT_LENGTH]


def claim_fingerprint(claim: Claim) -> str:
    return fingerprint(claim)


@dataclass(slots=True)
class FingerprintCache:
    """Memoize fingerprints for one reconciliation session.

    Entities are immutable, so a cached value can never go stale; an edited
    entity is a different object and gets its own entry.
    """

    _values: dict[DebateEntity, str] = field(default_factory=dict["DebateEntity", "str"])

    def __call__(self, entity: DebateEntity) -> str:
        value = self._values.get(entity)
        if value is None:
            value = fingerprint(entity)
            self._values[entity] = value
        return value

    def __len__(self) -> int:
        return len(self._values)


@singledispatch
def _identity_fields(entity: object) -> tuple[str, ...]:
    raise TypeError(f"No fingerprint strategy for {type(entity).__name__}")


@_identity_fields.register
def _(topic: Topic) -> tuple[str, ...]:
    return (normalize_text(topic.title),)


@_identity_fields.register
def _(claim: Claim) -> tuple[str, ...]:
    return (normalize_text(claim.text), claim.stance.value, claim.strength.value)


@_identity_fields.register
def _(rebuttal: Rebuttal) -> tuple[str, ...]:
    return (normalize_text(rebuttal.text),)


@_identity_fields.register
def _(evidence: Evidence) -> tuple[str, ...]:
    return (normalize_text(evidence.content), evidence.claim_id)


@_identity_fields.register
def _(question: Question) -> tuple[str, ...]:
    return (normalize_text(question.text),)


@_identity_fields.register
def _(source: Source) -> tuple[str, ...]:
    return (
        normalize_text(source.title),
        normalize_text(source.publisher or ""),
        normalize_text(source.date or ""),
    )


@_identity_fields.register
def _(tag: Tag) -> tuple[str, ...]:
    return (normalize_text(tag.label),)
