from __future__ import annotations

import math

import pytest

from argumerge.domain.model import (
    CLASS_BY_ENTITY_TYPE,
    Claim,
    EntityRef,
    EntityType,
    Question,
    Source,
    Topic,
)
from tests.helpers.debate import at, make_claim, make_topic


def test_every_entity_type_has_a_class() -> None:
    assert set(CLASS_BY_ENTITY_TYPE) == set(EntityType)
    for entity_type, entity_cls in CLASS_BY_ENTITY_TYPE.items():
        assert entity_cls.ENTITY_TYPE is entity_type


def test_entities_get_generated_ids_and_timestamps() -> None:
    first = Topic(title="Energy")
    second = Topic(title="Energy")

    assert first.id != second.id
    assert first.created_at.tzinfo is not None
    assert isinstance(first, EntityRef)


def test_primary_text_follows_kind() -> None:
    assert make_topic("Energy transition").primary_text == "Energy transition"
    assert make_claim("Taxes fund schools").primary_text == "Taxes fund schools"
    assert Question(target_id="x", text="Why?").primary_text == "Why?"


@pytest.mark.parametrize(
    "build",
    [
        lambda: Topic(title="   "),
        lambda: Claim(text=""),
        lambda: Question(target_id="x", text="\n"),
        lambda: Topic(id=" ", title="Energy"),
    ],
)
def test_blank_required_text_is_rejected(build: object) -> None:
    with pytest.raises(ValueError, match="must not be blank"):
        build()  # pyright: ignore[reportCallIssue]


@pytest.mark.parametrize("score", [-0.01, 1.01, math.nan])
def test_source_reliability_must_be_a_unit_score(score: float) -> None:
    with pytest.raises(ValueError, match="reliabilityScore"):
        Source(title="Outlook", reliability_score=score)


def test_source_reliability_bounds_are_inclusive() -> None:
    assert Source(title="Outlook", reliability_score=0.0).reliability_score == 0.0
    assert Source(title="Outlook", reliability_score=1.0).reliability_score == 1.0


def test_with_changes_returns_a_new_entity() -> None:
    claim = make_claim("Taxes fund schools", minutes=0)

    edited = claim.with_changes(text="Taxes fund hospitals", updated_at=at(5))

    assert edited is not claim
    assert edited.id == claim.id
    assert claim.text == "Taxes fund schools"
    assert edited.updated_at == at(5)


def test_entities_compare_by_identity() -> None:
    claim = make_claim()
    same_fields = make_claim()

    assert claim != same_fields
    assert len({claim, same_fields}) == 2
