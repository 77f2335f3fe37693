"""
Base building blocks:
identity, timestamps and the entity_type contract shared by every artifact.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar, Protocol, Self, runtime_checkable
from uuid import uuid4

if TYPE_CHECKING:
    from argumerge.domain.model.enums import EntityType


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@runtime_checkable
class EntityRef(Protocol):
    """Reference to a typed entity using its local identity."""

    @property
    def entity_type(self) -> EntityType: ...

    @property
    def id(self) -> str: ...


@dataclass(frozen=True, eq=False, kw_only=True)
class Entity:
    """Immutable debate artifact.

    Entities are never changed in place. ``with_changes`` returns a new object,
    so anything derived from an instance (its fingerprint, for one) stays valid
    for as long as that instance lives.
    """

    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # class-level discriminators; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]
    PRIMARY_TEXT_FIELD: ClassVar[str]
    # fields a duplicate may fill in on an existing record when they are empty there
    BACKFILL_FIELDS: ClassVar[tuple[str, ...]] = ()
    # reference field that scopes matching; records under different parents never match
    PARENT_FIELD: ClassVar[str | None] = None

    def __post_init__(self) -> None:
        if not self.id.strip():
            raise ValueError(f"{self.ENTITY_TYPE} id must not be blank")
        if not self.primary_text.strip():
            raise ValueError(f"{self.ENTITY_TYPE} {self.PRIMARY_TEXT_FIELD} must not be blank")

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE

    @property
    def primary_text(self) -> str:
        """Text used for similarity scans and review excerpts."""
        value = getattr(self, self.PRIMARY_TEXT_FIELD)
        return value if isinstance(value, str) else ""

    @property
    def parent_id(self) -> str | None:
        if self.PARENT_FIELD is None:
            return None
        value = getattr(self, self.PARENT_FIELD)
        return value if isinstance(value, str) else None

    def with_changes(self, **changes: object) -> Self:
        return replace(self, **changes)  # pyright: ignore[reportArgumentType]
