from __future__ import annotations

import pytest

from argumerge.domain.reconciliation.similarity import (
    are_similar,
    levenshtein,
    max_similarity_bound,
    similarity,
    similarity_ratio,
)


@pytest.mark.parametrize(
    ("a", "b", "expected"),
    [
        ("kitten", "sitting", 3),
        ("", "abc", 3),
        ("abc", "", 3),
        ("test", "test", 0),
        ("test", "tests", 1),
        ("flaw", "lawn", 2),
    ],
)
def test_levenshtein_distance(a: str, b: str, expected: int) -> None:
    assert levenshtein(a, b) == expected
    assert levenshtein(b, a) == expected


def test_similarity_uses_longest_length() -> None:
    assert similarity("test", "tests") == pytest.approx(0.8)


def test_similarity_of_empty_strings_is_one() -> None:
    assert similarity("", "") == 1.0
    assert similarity_ratio("", "") == 1.0


def test_similarity_compares_normalized_text() -> None:
    assert similarity("Hello", "hello!!") == 1.0
    assert are_similar("This is a test", "This is a test!", 0.90)


def test_similarity_is_bounded() -> None:
    assert similarity("abc", "xyz") == 0.0
    assert 0.0 <= similarity("energy", "entropy") <= 1.0


@pytest.mark.parametrize(
    ("a", "b", "threshold", "expected"),
    [
        ("test", "tests", 0.70, True),
        ("test", "tests", 0.80, True),
        ("test", "tests", 0.81, False),
        ("test", "tests", 0.90, False),
        ("This is a test", "This is a test!", 0.90, True),
    ],
)
def test_are_similar_respects_threshold(a: str, b: str, threshold: float, expected: bool) -> None:
    assert are_similar(a, b, threshold) is expected


def test_max_similarity_bound() -> None:
    assert max_similarity_bound(8, 10) == pytest.approx(0.8)
    assert max_similarity_bound(10, 8) == pytest.approx(0.8)
    assert max_similarity_bound(0, 0) == 1.0
    assert max_similarity_bound(0, 5) == 0.0
