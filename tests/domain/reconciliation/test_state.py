from __future__ import annotations

import pytest

from argumerge.domain.reconciliation.contracts import ImportSummary
from argumerge.domain.reconciliation.errors import InvalidTransitionError
from argumerge.domain.reconciliation.state import (
    Applying,
    AwaitingReview,
    Committed,
    Failed,
    Idle,
    ImportPhase,
    Loading,
    Resolving,
    require_phase,
    transition,
)


def test_happy_path_transitions() -> None:
    summary = ImportSummary(state=ImportPhase.COMMITTED)
    state = transition(Idle(), Loading())
    state = transition(state, Resolving())
    state = transition(state, Applying())
    state = transition(state, Committed(summary=summary))

    assert state.phase is ImportPhase.COMMITTED


def test_review_loops_back_to_resolving() -> None:
    summary = ImportSummary(state=ImportPhase.AWAITING_REVIEW)
    state = transition(Resolving(), AwaitingReview(summary=summary))
    state = transition(state, Resolving(with_decisions=True))

    assert isinstance(state, Resolving)
    assert state.with_decisions


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (Idle(), Resolving()),
        (Idle(), Applying()),
        (Loading(), Applying()),
        (Applying(), Resolving()),
        (Committed(summary=ImportSummary(state=ImportPhase.COMMITTED)), Resolving()),
    ],
)
def test_invalid_transitions_are_rejected(current: object, target: object) -> None:
    with pytest.raises(InvalidTransitionError):
        transition(current, target)  # pyright: ignore[reportArgumentType]


def test_terminal_states_may_start_a_new_session() -> None:
    assert transition(Failed(reason="boom"), Loading()).phase is ImportPhase.LOADING
    committed = Committed(summary=ImportSummary(state=ImportPhase.COMMITTED))
    assert transition(committed, Loading()).phase is ImportPhase.LOADING


def test_require_phase_names_the_operation() -> None:
    with pytest.raises(InvalidTransitionError, match="confirm_review_decisions"):
        require_phase(Idle(), ImportPhase.AWAITING_REVIEW, operation="confirm_review_decisions")

    require_phase(Idle(), ImportPhase.IDLE, operation="noop")
