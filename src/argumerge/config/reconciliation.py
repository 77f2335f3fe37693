"""Reconciliation engine settings."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .env import env_float, env_int
from .errors import ConfigurationError

DEFAULT_SIMILARITY_THRESHOLD = 0.90
DEFAULT_REVIEW_PAGE_SIZE = 50
DEFAULT_CANDIDATE_CAP = 500
DEFAULT_MAX_TEXT_LENGTH = 5000


@dataclass(frozen=True, slots=True)
class ReconciliationConfig:
    """Tunables for imports.

    ``review_page_size`` only affects how review items are presented; the
    engine itself never pages.
    """

    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD
    review_page_size: int = DEFAULT_REVIEW_PAGE_SIZE
    candidate_cap: int = DEFAULT_CANDIDATE_CAP
    max_text_length: int = DEFAULT_MAX_TEXT_LENGTH

    def __post_init__(self) -> None:
        threshold = self.similarity_threshold
        if math.isnan(threshold) or not 0.0 <= threshold <= 1.0:
            raise ConfigurationError(
                f"similarity threshold must be between 0.0 and 1.0, got {threshold}"
            )
        for name in ("review_page_size", "candidate_cap", "max_text_length"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")


def get_reconciliation_config() -> ReconciliationConfig:
    return ReconciliationConfig(
        similarity_threshold=env_float(
            "ARGUMERGE_SIMILARITY_THRESHOLD", DEFAULT_SIMILARITY_THRESHOLD
        ),
        review_page_size=env_int("ARGUMERGE_REVIEW_PAGE_SIZE", DEFAULT_REVIEW_PAGE_SIZE),
        candidate_cap=env_int("ARGUMERGE_CANDIDATE_CAP", DEFAULT_CANDIDATE_CAP),
        max_text_length=env_int("ARGUMERGE_MAX_TEXT_LENGTH", DEFAULT_MAX_TEXT_LENGTH),
    )
