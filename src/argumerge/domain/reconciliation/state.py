"""Import session state machine.

States are a tagged union of small frozen dataclasses; ``transition`` is the
only way the orchestrator moves between them and rejects every move that is
not listed in ``ALLOWED_TRANSITIONS``.

    Idle -> Loading -> Resolving -> (AwaitingReview | Applying) -> Committed | Failed

AwaitingReview goes back to Resolving once decisions arrive. Committed and
Failed may start a new session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Literal

from .errors import InvalidTransitionError

if TYPE_CHECKING:
    from .contracts import ImportSummary


class ImportPhase(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    RESOLVING = "resolving"
    AWAITING_REVIEW = "awaiting_review"
    APPLYING = "applying"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Idle:
    phase: Literal[ImportPhase.IDLE] = ImportPhase.IDLE


@dataclass(frozen=True, slots=True)
class Loading:
    phase: Literal[ImportPhase.LOADING] = ImportPhase.LOADING


@dataclass(frozen=True, slots=True)
class Resolving:
    with_decisions: bool = False
    phase: Literal[ImportPhase.RESOLVING] = ImportPhase.RESOLVING


@dataclass(frozen=True, slots=True, kw_only=True)
class AwaitingReview:
    summary: ImportSummary
    phase: Literal[ImportPhase.AWAITING_REVIEW] = ImportPhase.AWAITING_REVIEW


@dataclass(frozen=True, slots=True)
class Applying:
    phase: Literal[ImportPhase.APPLYING] = ImportPhase.APPLYING


@dataclass(frozen=True, slots=True, kw_only=True)
class Committed:
    summary: ImportSummary
    phase: Literal[ImportPhase.COMMITTED] = ImportPhase.COMMITTED


@dataclass(frozen=True, slots=True, kw_only=True)
class Failed:
    reason: str
    summary: ImportSummary | None = None
    phase: Literal[ImportPhase.FAILED] = ImportPhase.FAILED


type ImportState = Idle | Loading | Resolving | AwaitingReview | Applying | Committed | Failed

ALLOWED_TRANSITIONS: Final[dict[ImportPhase, frozenset[ImportPhase]]] = {
    ImportPhase.IDLE: frozenset({ImportPhase.LOADING}),
    ImportPhase.LOADING: frozenset({ImportPhase.RESOLVING, ImportPhase.FAILED}),
    ImportPhase.RESOLVING: frozenset(
        {ImportPhase.AWAITING_REVIEW, ImportPhase.APPLYING, ImportPhase.FAILED}
    ),
    ImportPhase.AWAITING_REVIEW: frozenset({ImportPhase.RESOLVING, ImportPhase.FAILED}),
    ImportPhase.APPLYING: frozenset({ImportPhase.COMMITTED, ImportPhase.FAILED}),
    ImportPhase.COMMITTED: frozenset({ImportPhase.LOADING}),
    ImportPhase.FAILED: frozenset({ImportPhase.LOADING}),
}

# phases during which the session lock is held
ACTIVE_PHASES: Final[frozenset[ImportPhase]] = frozenset(
    {
        ImportPhase.LOADING,
        ImportPhase.RESOLVING,
        ImportPhase.AWAITING_REVIEW,
        ImportPhase.APPLYING,
    }
)


def transition(current: ImportState, target: ImportState) -> ImportState:
    """Return ``target`` if the move from ``current`` is allowed."""

    if target.phase not in ALLOWED_TRANSITIONS[current.phase]:
        raise InvalidTransitionError(
            f"Invalid import state transition: {current.phase} -> {target.phase}"
        )
    return target


def require_phase(current: ImportState, expected: ImportPhase, *, operation: str) -> None:
    if current.phase is not expected:
        raise InvalidTransitionError(
            f"{operation} is only allowed in state {expected}, current state is {current.phase}"
        )
