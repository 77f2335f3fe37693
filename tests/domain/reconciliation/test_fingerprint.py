from __future__ import annotations

import hashlib

from argumerge.domain.model import EntityType, Stance, Strength
from argumerge.domain.reconciliation.fingerprint import (
    FINGERPRINT_LENGTH,
    FingerprintCache,
    claim_fingerprint,
    fingerprint,
)
from tests.helpers.debate import (
    make_claim,
    make_evidence,
    make_source,
    make_tag,
    make_topic,
)


def test_claim_fingerprint_matches_documented_layout() -> None:
    claim = make_claim("Nuclear power is SAFE!", stance=Stance.PRO, strength=Strength.HIGH)

    expected = hashlib.sha256(b"claim|nuclear power is safe|pro|high").hexdigest()[:16]

    assert claim_fingerprint(claim) == expected
    assert len(expected) == FINGERPRINT_LENGTH


def test_fingerprint_ignores_identity_and_timestamps() -> None:
    first = make_claim("Taxes fund schools", entity_id="a", minutes=0)
    second = make_claim("  taxes FUND schools. ", entity_id="b", minutes=90)

    assert fingerprint(first) == fingerprint(second)


def test_fingerprint_folds_accents_and_case() -> None:
    assert fingerprint(make_topic("Café")) == fingerprint(make_topic("CAFE"))
    assert fingerprint(make_claim("Café")) == fingerprint(make_claim("CAFE"))


def test_claim_fingerprint_includes_stance_and_strength() -> None:
    base = make_claim("Taxes fund schools")

    assert fingerprint(base) != fingerprint(base.with_changes(stance=Stance.CON))
    assert fingerprint(base) != fingerprint(base.with_changes(strength=Strength.LOW))


def test_fingerprint_is_scoped_by_kind() -> None:
    topic = make_topic("Energy")
    tag = make_tag("Energy")

    assert topic.entity_type is EntityType.TOPIC
    assert fingerprint(topic) != fingerprint(tag)


def test_evidence_fingerprint_depends_on_claim() -> None:
    first = make_evidence("Deaths per TWh are low", claim_id="claim-1")
    second = make_evidence("Deaths per TWh are low", claim_id="claim-2")

    assert fingerprint(first) != fingerprint(second)


def test_source_fingerprint_treats_missing_and_blank_fields_alike() -> None:
    missing = make_source("Outlook", publisher=None, date=None)
    blank = make_source("Outlook", publisher="  ", date="")
    dated = make_source("Outlook", publisher=None, date="2024")

    assert fingerprint(missing) == fingerprint(blank)
    assert fingerprint(missing) != fingerprint(dated)


def test_source_fingerprint_ignores_url() -> None:
    bare = make_source(url=None)
    linked = make_source(url="https://example.org/outlook")

    assert fingerprint(bare) == fingerprint(linked)


def test_fingerprint_cache_memoizes_per_entity() -> None:
    cache = FingerprintCache()
    claim = make_claim()

    first = cache(claim)
    second = cache(claim)

    assert first == second == fingerprint(claim)
    assert len(cache) == 1

    cache(claim.with_changes(text="Something else entirely"))
    assert len(cache) == 2
