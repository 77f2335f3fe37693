"""Factories and in-memory fakes for debate collection tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import TYPE_CHECKING, Literal

from argumerge.domain.model import (
    Claim,
    EntityType,
    Evidence,
    Question,
    Rebuttal,
    Source,
    Stance,
    Strength,
    Tag,
    Topic,
)
from argumerge.domain.ports.unit_of_work import CollectionRepositories
from argumerge.domain.reconciliation.snapshot import Snapshot

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from argumerge.domain.model import DebateEntity
    from argumerge.domain.reconciliation.snapshot import SnapshotEntry

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


def at(minutes: int) -> datetime:
    return BASE_TIME + timedelta(minutes=minutes)


def make_topic(
    title: str = "Energy transition",
    *,
    entity_id: str = "topic-1",
    minutes: int = 0,
    summary: str = "",
    tags: tuple[str, ...] = (),
) -> Topic:
    return Topic(
        id=entity_id,
        created_at=at(minutes),
        updated_at=at(minutes),
        title=title,
        summary=summary,
        tags=tags,
    )


def make_claim(
    text: str = "Nuclear power is a safe source of energy",
    *,
    entity_id: str = "claim-1",
    minutes: int = 0,
    topic_ids: tuple[str, ...] = (),
    stance: Stance = Stance.PRO,
    strength: Strength = Strength.MEDIUM,
    fallacy_ids: tuple[str, ...] = (),
) -> Claim:
    return Claim(
        id=entity_id,
        created_at=at(minutes),
        updated_at=at(minutes),
        text=text,
        stance=stance,
        strength=strength,
        topic_ids=topic_ids,
        fallacy_ids=fallacy_ids,
    )


def make_rebuttal(
    text: str = "Waste storage remains unsolved",
    *,
    entity_id: str = "rebuttal-1",
    claim_id: str = "claim-1",
    minutes: int = 0,
) -> Rebuttal:
    return Rebuttal(
        id=entity_id,
        created_at=at(minutes),
        updated_at=at(minutes),
        claim_id=claim_id,
        text=text,
    )


def make_evidence(
    content: str = "Deaths per TWh are lower than for coal",
    *,
    entity_id: str = "evidence-1",
    claim_id: str = "claim-1",
    source_id: str | None = None,
    minutes: int = 0,
) -> Evidence:
    return Evidence(
        id=entity_id,
        created_at=at(minutes),
        updated_at=at(minutes),
        claim_id=claim_id,
        content=content,
        source_id=source_id,
    )


def make_question(
    text: str = "What counts as safe?",
    *,
    entity_id: str = "question-1",
    target_id: str = "claim-1",
    minutes: int = 0,
) -> Question:
    return Question(
        id=entity_id,
        created_at=at(minutes),
        updated_at=at(minutes),
        target_id=target_id,
        text=text,
    )


def make_source(
    title: str = "World energy outlook",
    *,
    entity_id: str = "source-1",
    publisher: str | None = "IEA",
    date: str | None = "2023",
    url: str | None = None,
    reliability_score: float | None = None,
    minutes: int = 0,
) -> Source:
    return Source(
        id=entity_id,
        created_at=at(minutes),
        updated_at=at(minutes),
        title=title,
        publisher=publisher,
        date=date,
        url=url,
        reliability_score=reliability_score,
    )


def make_tag(
    label: str = "energy",
    *,
    entity_id: str = "tag-1",
    color: str | None = None,
    minutes: int = 0,
) -> Tag:
    return Tag(
        id=entity_id,
        created_at=at(minutes),
        updated_at=at(minutes),
        label=label,
        color=color,
    )


def make_snapshot(*entries: SnapshotEntry) -> Snapshot:
    """Group entries by kind, keeping their order."""

    grouped: dict[EntityType, list[SnapshotEntry]] = {entity_type: [] for entity_type in EntityType}
    for entry in entries:
        grouped[entry.entity_type].append(entry)
    return Snapshot(entries={kind: tuple(items) for kind, items in grouped.items()})


def sequential_ids(prefix: str = "generated") -> Callable[[], str]:
    counter = count(1)
    return lambda: f"{prefix}-{next(counter)}"


class FakeEntityRepository[TEntity: DebateEntity]:
    """Dict-backed repository over a working copy of one kind."""

    def __init__(self, entities: dict[str, TEntity]) -> None:
        self.entities = entities

    def add(self, entity: TEntity) -> None:
        if entity.id in self.entities:
            raise ValueError(f"duplicate id {entity.id}")
        self.entities[entity.id] = entity

    def update(self, entity: TEntity) -> None:
        if entity.id not in self.entities:
            raise LookupError(entity.id)
        self.entities[entity.id] = entity

    def list_all(self) -> list[TEntity]:
        return list(self.entities.values())


class FakeClaimRepository(FakeEntityRepository[Claim]):
    def find_by_fingerprint(self, fingerprint: str) -> list[Claim]:
        return [claim for claim in self.entities.values() if claim.fingerprint == fingerprint]


FailurePoint = Literal["add", "commit"]


@dataclass
class FakeCollection:
    """Committed state of an in-memory collection plus failure injection."""

    entities: dict[EntityType, dict[str, DebateEntity]] = field(
        default_factory=lambda: {entity_type: {} for entity_type in EntityType}
    )
    fail_on: FailurePoint | None = None
    commits: int = 0
    rollbacks: int = 0
    units_opened: int = 0

    def seed(self, *entities: DebateEntity) -> FakeCollection:
        for entity in entities:
            self.entities[entity.entity_type][entity.id] = entity
        return self

    def all(self, entity_type: EntityType) -> list[DebateEntity]:
        return list(self.entities[entity_type].values())

    def get(self, entity_type: EntityType, entity_id: str) -> DebateEntity | None:
        return self.entities[entity_type].get(entity_id)

    @property
    def total(self) -> int:
        return sum(len(items) for items in self.entities.values())

    def unit_of_work(self) -> FakeCollectionUnitOfWork:
        return FakeCollectionUnitOfWork(self)


class _FailingRepository(FakeEntityRepository["DebateEntity"]):
    def add(self, entity: DebateEntity) -> None:
        raise RuntimeError("disk full")


class FakeCollectionUnitOfWork:
    """Transactional unit of work: writes become visible on commit only."""

    def __init__(self, collection: FakeCollection) -> None:
        self.collection = collection
        self._working: dict[EntityType, dict[str, DebateEntity]] | None = None
        self._repositories: CollectionRepositories | None = None

    def __enter__(self) -> FakeCollectionUnitOfWork:
        self.collection.units_opened += 1
        self._working = _copy(self.collection.entities)
        repository_cls = _FailingRepository if self.collection.fail_on == "add" else None

        def build(entity_type: EntityType) -> FakeEntityRepository[DebateEntity]:
            assert self._working is not None
            if repository_cls is not None:
                return repository_cls(self._working[entity_type])
            if entity_type is EntityType.CLAIM:
                claims = self._working[entity_type]
                return FakeClaimRepository(claims)  # pyright: ignore[reportArgumentType]
            return FakeEntityRepository(self._working[entity_type])

        self._repositories = CollectionRepositories(
            topics=build(EntityType.TOPIC),  # pyright: ignore[reportArgumentType]
            claims=build(EntityType.CLAIM),  # pyright: ignore[reportArgumentType]
            rebuttals=build(EntityType.REBUTTAL),  # pyright: ignore[reportArgumentType]
            evidences=build(EntityType.EVIDENCE),  # pyright: ignore[reportArgumentType]
            questions=build(EntityType.QUESTION),  # pyright: ignore[reportArgumentType]
            sources=build(EntityType.SOURCE),  # pyright: ignore[reportArgumentType]
            tags=build(EntityType.TAG),  # pyright: ignore[reportArgumentType]
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool:
        if exc_type is not None:
            self.rollback()
        self._working = None
        self._repositories = None
        return False

    @property
    def repositories(self) -> CollectionRepositories:
        assert self._repositories is not None
        return self._repositories

    def commit(self) -> None:
        if self.collection.fail_on == "commit":
            raise RuntimeError("disk full")
        assert self._working is not None
        self.collection.entities = _copy(self._working)
        self.collection.commits += 1

    def rollback(self) -> None:
        self.collection.rollbacks += 1


def _copy(
    entities: dict[EntityType, dict[str, DebateEntity]],
) -> dict[EntityType, dict[str, DebateEntity]]:
    return {entity_type: dict(items) for entity_type, items in entities.items()}
