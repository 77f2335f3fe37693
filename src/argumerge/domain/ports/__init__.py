"""Domain ports (protocols) for persistence."""

from __future__ import annotations

from argumerge.domain.ports.persistence import (
    ClaimRepository,
    EntityRepository,
    EvidenceRepository,
    QuestionRepository,
    RebuttalRepository,
    Repository,
    SourceRepository,
    TagRepository,
    TopicRepository,
)
from argumerge.domain.ports.unit_of_work import (
    CollectionRepositories,
    CollectionUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ClaimRepository",
    "CollectionRepositories",
    "CollectionUnitOfWork",
    "EntityRepository",
    "EvidenceRepository",
    "QuestionRepository",
    "RebuttalRepository",
    "Repository",
    "RepositoryCollection",
    "SourceRepository",
    "TagRepository",
    "TopicRepository",
    "UnitOfWork",
]
