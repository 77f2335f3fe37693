"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from argumerge.domain.model import EntityType

if TYPE_CHECKING:
    from types import TracebackType

    from argumerge.domain.ports.persistence import (
        ClaimRepository,
        EntityRepository,
        EvidenceRepository,
        QuestionRepository,
        RebuttalRepository,
        SourceRepository,
        TagRepository,
        TopicRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CollectionRepositories(RepositoryCollection):
    """Repositories of one local debate collection."""

    topics: TopicRepository
    claims: ClaimRepository
    rebuttals: RebuttalRepository
    evidences: EvidenceRepository
    questions: QuestionRepository
    sources: SourceRepository
    tags: TagRepository

    def for_type(self, entity_type: EntityType) -> EntityRepository[object]:
        match entity_type:
            case EntityType.TOPIC:
                return self.topics
            case EntityType.CLAIM:
                return self.claims
            case EntityType.REBUTTAL:
                return self.rebuttals
            case EntityType.EVIDENCE:
                return self.evidences
            case EntityType.QUESTION:
                return self.questions
            case EntityType.SOURCE:
                return self.sources
            case EntityType.TAG:
                return self.tags


type CollectionUnitOfWork = UnitOfWork[CollectionRepositories]
