"""Ports for persisting debate artifacts."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from argumerge.domain.model import Claim, Evidence, Question, Rebuttal, Source, Tag, Topic


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for one entity kind."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class EntityRepository[TEntity](Repository[TEntity], Protocol):
    """Read-all and write-batch contract used by the reconciliation engine."""

    def list_all(self) -> list[TEntity]: ...

    def update(self, entity: TEntity) -> None: ...


@runtime_checkable
class TopicRepository(EntityRepository[Topic], Protocol):
    """Repository contract for topics."""


@runtime_checkable
class ClaimRepository(EntityRepository[Claim], Protocol):
    """Repository contract for claims."""

    def find_by_fingerprint(self, fingerprint: str) -> list[Claim]: ...


@runtime_checkable
class RebuttalRepository(EntityRepository[Rebuttal], Protocol):
    """Repository contract for rebuttals."""


@runtime_checkable
class EvidenceRepository(EntityRepository[Evidence], Protocol):
    """Repository contract for evidences."""


@runtime_checkable
class QuestionRepository(EntityRepository[Question], Protocol):
    """Repository contract for questions."""


@runtime_checkable
class SourceRepository(EntityRepository[Source], Protocol):
    """Repository contract for sources."""


@runtime_checkable
class TagRepository(EntityRepository[Tag], Protocol):
    """Repository contract for tags."""
