from __future__ import annotations

import pytest

from argumerge.config import ConfigurationError, ReconciliationConfig, get_reconciliation_config

ENV_VARS = (
    "ARGUMERGE_SIMILARITY_THRESHOLD",
    "ARGUMERGE_REVIEW_PAGE_SIZE",
    "ARGUMERGE_CANDIDATE_CAP",
    "ARGUMERGE_MAX_TEXT_LENGTH",
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = get_reconciliation_config()

    assert config == ReconciliationConfig()
    assert config.similarity_threshold == 0.90
    assert config.review_page_size == 50
    assert config.candidate_cap == 500
    assert config.max_text_length == 5000


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ARGUMERGE_SIMILARITY_THRESHOLD", "0.75")
    monkeypatch.setenv("ARGUMERGE_REVIEW_PAGE_SIZE", "10")
    monkeypatch.setenv("ARGUMERGE_CANDIDATE_CAP", "20")
    monkeypatch.setenv("ARGUMERGE_MAX_TEXT_LENGTH", "300")

    config = get_reconciliation_config()

    assert config == ReconciliationConfig(
        similarity_threshold=0.75,
        review_page_size=10,
        candidate_cap=20,
        max_text_length=300,
    )


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("ARGUMERGE_SIMILARITY_THRESHOLD", "1.2"),
        ("ARGUMERGE_SIMILARITY_THRESHOLD", "nan"),
        ("ARGUMERGE_REVIEW_PAGE_SIZE", "0"),
        ("ARGUMERGE_CANDIDATE_CAP", "-1"),
        ("ARGUMERGE_MAX_TEXT_LENGTH", "many"),
    ],
)
def test_invalid_values_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_reconciliation_config()
