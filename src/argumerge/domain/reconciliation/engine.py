"""Orchestrator for snapshot imports.

The orchestrator owns the import state machine of one collection. It loads the
collection through a unit of work, runs the resolver over every snapshot record
in dependency order, pauses for review when near-duplicates show up, and hands
the accepted changes to the persistence stage as one batch.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from argumerge.domain.model import new_id

from .apply import build_change_set
from .contracts import (
    ConflictResolution,
    DuplicateResolution,
    ImportSummary,
    NearDuplicateResolution,
    NewResolution,
    ReviewItem,
)
from .errors import (
    AmbiguousReferenceError,
    IdentityConflictError,
    ImportCancelledError,
    ImportInProgressError,
    RecordError,
    UnknownReviewItemError,
)
from .fingerprint import FingerprintCache
from .index import DEFAULT_CANDIDATE_CAP, DEFAULT_MAX_TEXT_LENGTH, CollectionIndex
from .persist import UnitOfWorkPersister, load_collection
from .references import ReferenceRewriter
from .resolve import DEFAULT_SIMILARITY_THRESHOLD, EntityResolver
from .snapshot import RESOLUTION_ORDER, InvalidRecord
from .state import (
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

if TYPE_CHECKING:
    from collections.abc import Iterable

    from argumerge.domain.model import EntityType

    from .contracts import DecisionsByItem, EntityResolution, KindStats, ReviewDecision
    from .persist import PersistChangeSet, UnitOfWorkFactory
    from .resolve import IdFactory
    from .snapshot import Snapshot
    from .state import ImportState

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CancellationToken:
    """Cooperative cancellation flag, checked between records while resolving."""

    _event: threading.Event = field(default_factory=threading.Event)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ImportCancelledError("Import cancelled")


@dataclass(slots=True)
class ResolutionPass:
    """Outcome of one pass of the resolver over a snapshot."""

    summary: ImportSummary
    resolutions: list[EntityResolution] = field(default_factory=list["EntityResolution"])
    pending: dict[tuple[EntityType, str], NearDuplicateResolution] = field(
        default_factory=dict[tuple["EntityType", str], NearDuplicateResolution]
    )


@dataclass(slots=True)
class _Session:
    snapshot: Snapshot
    threshold: float
    cancel: CancellationToken | None
    fingerprints: FingerprintCache = field(default_factory=FingerprintCache)
    index: CollectionIndex | None = None
    preview: ResolutionPass | None = None


class ImportOrchestrator:
    """Run snapshot imports against one local collection.

    Only one session runs at a time. The session lock is taken when an import
    starts loading and released once the session is committed or failed; a
    session paused for review keeps it.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        *,
        candidate_cap: int = DEFAULT_CANDIDATE_CAP,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
        id_factory: IdFactory = new_id,
        persist: PersistChangeSet | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self._candidate_cap = candidate_cap
        self._max_text_length = max_text_length
        self._id_factory = id_factory
        self._persist = persist or UnitOfWorkPersister(unit_of_work_factory)
        self._lock = threading.Lock()
        self._state: ImportState = Idle()
        self._session: _Session | None = None

    @property
    def state(self) -> ImportState:
        return self._state

    @property
    def phase(self) -> ImportPhase:
        return self._state.phase

    def import_snapshot(
        self,
        snapshot: Snapshot,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        *,
        cancel: CancellationToken | None = None,
    ) -> ImportSummary:
        """Import ``snapshot`` into the collection.

        Returns a summary in state ``committed`` when no record needs review,
        or ``awaiting_review`` when near-duplicates were found; in that case
        the session waits for ``confirm_review_decisions`` or
        ``discard_review``. Storage failures and cancellation raise after the
        session has moved to ``failed``.
        """

        _validate_threshold(similarity_threshold)
        if not self._lock.acquire(blocking=False):
            raise ImportInProgressError("An import is already in progress for this collection")

        session = _Session(snapshot=snapshot, threshold=similarity_threshold, cancel=cancel)
        try:
            self._move(Loading())
            self._session = session
            log.info(
                "Importing snapshot with %s records (threshold %.2f)",
                snapshot.total_items,
                similarity_threshold,
            )
            session.index = CollectionIndex.build(
                load_collection(self._unit_of_work_factory),
                fingerprints=session.fingerprints,
            )
            self._move(Resolving())
            preview = self._resolve(session, decisions=None)
        except BaseException as exc:
            self._fail(exc, summary=None)
            raise

        if preview.pending:
            session.preview = preview
            preview.summary.state = ImportPhase.AWAITING_REVIEW
            self._move(AwaitingReview(summary=preview.summary))
            log.info(
                "Import paused: %s items await review",
                len(preview.summary.items_for_review),
            )
            return preview.summary

        return self._apply(preview)

    def confirm_review_decisions(self, decisions: Iterable[ReviewDecision]) -> ImportSummary:
        """Finish a session paused for review.

        Confirmed items are merged into the entity they matched, rejected
        items are created as new entities, and items without a decision are
        skipped; records referencing a skipped item fail with a reference
        error.
        """

        require_phase(
            self._state, ImportPhase.AWAITING_REVIEW, operation="confirm_review_decisions"
        )
        session = self._require_session()
        preview = session.preview
        if preview is None:
            raise UnknownReviewItemError("No review items are pending")

        decided: DecisionsByItem = {}
        for decision in decisions:
            if decision.key not in preview.pending:
                raise UnknownReviewItemError(
                    f"No pending review item for {decision.entity_type} '{decision.incoming_id}'"
                )
            decided[decision.key] = decision.action

        try:
            self._move(Resolving(with_decisions=True))
            final = self._resolve(session, decisions=decided)
        except BaseException as exc:
            self._fail(exc, summary=preview.summary)
            raise
        log.info(
            "Applying %s review decisions (%s undecided)",
            len(decided),
            len(preview.pending) - len(decided),
        )
        return self._apply(final)

    def discard_review(self) -> ImportSummary:
        """Abandon a session paused for review without writing anything."""

        require_phase(self._state, ImportPhase.AWAITING_REVIEW, operation="discard_review")
        session = self._require_session()
        summary = (
            session.preview.summary
            if session.preview is not None
            else ImportSummary(state=ImportPhase.FAILED)
        )
        summary.state = ImportPhase.FAILED
        self._move(Failed(reason="review discarded", summary=summary))
        self._release()
        log.info("Import discarded during review")
        return summary

    def _resolve(self, session: _Session, *, decisions: DecisionsByItem | None) -> ResolutionPass:
        if session.index is None:
            raise RuntimeError("Collection index was not loaded")
        final = decisions is not None
        rewriter = ReferenceRewriter(session.index, provisional=not final)
        resolver = EntityResolver(
            session.index,
            threshold=session.threshold,
            candidate_cap=self._candidate_cap,
            max_text_length=self._max_text_length,
            fingerprints=session.fingerprints,
            id_factory=self._id_factory,
        )
        result = ResolutionPass(
            summary=ImportSummary(
                state=ImportPhase.RESOLVING,
                total_items=session.snapshot.total_items,
            )
        )

        for entity_type in RESOLUTION_ORDER:
            stats = result.summary.by_kind[entity_type]
            for entry in session.snapshot.entries_for(entity_type):
                if session.cancel is not None:
                    session.cancel.raise_if_cancelled()
                if isinstance(entry, InvalidRecord):
                    _record_error(result.summary, stats, _invalid_record_message(entry))
                    continue
                try:
                    entity = rewriter.rewrite(entry)
                except AmbiguousReferenceError as exc:
                    _record_error(result.summary, stats, str(exc))
                    result.summary.items_for_review.append(
                        ReviewItem.for_ambiguous_reference(entry, exc)
                    )
                    continue
                except RecordError as exc:
                    _record_error(result.summary, stats, str(exc))
                    continue

                decision = decisions.get((entity_type, entry.id)) if decisions else None
                resolution = resolver.resolve(entity, decision=decision)
                self._tally(result, stats, rewriter, resolution)

        return result

    @staticmethod
    def _tally(
        result: ResolutionPass,
        stats: KindStats,
        rewriter: ReferenceRewriter,
        resolution: EntityResolution,
    ) -> None:
        match resolution:
            case NewResolution(entity=entity, snapshot_id=snapshot_id):
                stats.created += 1
                rewriter.record(entity.entity_type, snapshot_id, entity.id)
                result.resolutions.append(resolution)
            case DuplicateResolution(target=target, snapshot_id=snapshot_id):
                if resolution.updated:
                    stats.updated += 1
                else:
                    stats.duplicates += 1
                rewriter.record(target.entity_type, snapshot_id, target.id)
                result.resolutions.append(resolution)
            case NearDuplicateResolution(entity=entity, snapshot_id=snapshot_id):
                stats.near_duplicates += 1
                rewriter.mark_pending(entity.entity_type, snapshot_id, entity.id)
                result.pending[(entity.entity_type, snapshot_id)] = resolution
                result.summary.items_for_review.append(ReviewItem.for_near_duplicate(resolution))
            case ConflictResolution():
                error = IdentityConflictError(
                    entity_type=resolution.entity.entity_type,
                    record_id=resolution.snapshot_id,
                    message=resolution.reason,
                )
                _record_error(result.summary, stats, str(error))
                result.summary.items_for_review.append(ReviewItem.for_conflict(resolution))

    def _apply(self, result: ResolutionPass) -> ImportSummary:
        summary = result.summary
        try:
            self._move(Applying())
            change_set = build_change_set(result.resolutions)
            self._persist(change_set)
        except BaseException as exc:
            self._fail(exc, summary=summary)
            raise
        summary.state = ImportPhase.COMMITTED
        self._move(Committed(summary=summary))
        self._release()
        log.info(
            "Import committed: created=%s updated=%s duplicates=%s near_duplicates=%s errors=%s",
            summary.created,
            summary.updated,
            summary.duplicates,
            summary.near_duplicates,
            summary.errors,
        )
        return summary

    def _move(self, target: ImportState) -> None:
        previous = self._state.phase
        self._state = transition(self._state, target)
        log.debug("Import state %s -> %s", previous, target.phase)

    def _fail(self, exc: BaseException, *, summary: ImportSummary | None) -> None:
        if summary is not None:
            summary.state = ImportPhase.FAILED
        reason = str(exc) or type(exc).__name__
        if self._state.phase is not ImportPhase.FAILED:
            self._move(Failed(reason=reason, summary=summary))
        self._release()
        log.error("Import failed: %s", reason)

    def _release(self) -> None:
        self._session = None
        if self._lock.locked():
            self._lock.release()

    def _require_session(self) -> _Session:
        if self._session is None:
            raise UnknownReviewItemError("No import session is active")
        return self._session


def _validate_threshold(value: float) -> None:
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise ValueError(f"similarity_threshold must be between 0.0 and 1.0, got {value}")


def _record_error(summary: ImportSummary, stats: KindStats, message: str) -> None:
    stats.errors += 1
    summary.error_messages.append(message)
    log.warning("Skipped record: %s", message)


def _invalid_record_message(record: InvalidRecord) -> str:
    label = record.record_id if record.record_id is not None else f"#{record.position}"
    return f"{record.entity_type.value.capitalize()} '{label}': {record.message}"

