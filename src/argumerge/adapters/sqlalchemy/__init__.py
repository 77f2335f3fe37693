"""SQLAlchemy adapter package for argumerge."""

from __future__ import annotations

from .mappings import TABLE_BY_ENTITY_TYPE, metadata
from .repositories import (
    SqlAlchemyClaimRepository,
    SqlAlchemyEntityRepository,
    SqlAlchemyEvidenceRepository,
    SqlAlchemyQuestionRepository,
    SqlAlchemyRebuttalRepository,
    SqlAlchemySourceRepository,
    SqlAlchemyTagRepository,
    SqlAlchemyTopicRepository,
)
from .unit_of_work import SqlAlchemyCollectionUnitOfWork, shutdown, startup

__all__ = [
    "TABLE_BY_ENTITY_TYPE",
    "SqlAlchemyClaimRepository",
    "SqlAlchemyCollectionUnitOfWork",
    "SqlAlchemyEntityRepository",
    "SqlAlchemyEvidenceRepository",
    "SqlAlchemyQuestionRepository",
    "SqlAlchemyRebuttalRepository",
    "SqlAlchemySourceRepository",
    "SqlAlchemyTagRepository",
    "SqlAlchemyTopicRepository",
    "metadata",
    "shutdown",
    "startup",
]
