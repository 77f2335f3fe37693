"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from argumerge.adapters.snapshot import build_document, dump_document, load_snapshot
from argumerge.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCollectionUnitOfWork,
    is_started,
    startup,
)
from argumerge.config import get_reconciliation_config
from argumerge.domain.ports.unit_of_work import CollectionUnitOfWork
from argumerge.domain.reconciliation import ImportOrchestrator, export_collection

if TYPE_CHECKING:
    from concurrent.futures import Executor, Future
    from pathlib import Path

    from argumerge.adapters.snapshot import SnapshotDocument
    from argumerge.adapters.snapshot.translator import SnapshotSource
    from argumerge.config import ReconciliationConfig
    from argumerge.domain.reconciliation import CancellationToken, ImportSummary

UnitOfWorkFactory = Callable[[], CollectionUnitOfWork]


log = getLogger(__name__)


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyCollectionUnitOfWork


def build_orchestrator(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ReconciliationConfig | None = None,
) -> ImportOrchestrator:
    """Return an orchestrator bound to the configured collection."""

    settings = config or get_reconciliation_config()
    return ImportOrchestrator(
        unit_of_work_factory or _default_unit_of_work_factory(),
        candidate_cap=settings.candidate_cap,
        max_text_length=settings.max_text_length,
    )


def import_snapshot(
    source: SnapshotSource,
    *,
    orchestrator: ImportOrchestrator,
    similarity_threshold: float | None = None,
    cancel: CancellationToken | None = None,
) -> ImportSummary:
    """Parse ``source`` (a path or JSON text) and import it."""

    threshold = (
        similarity_threshold
        if similarity_threshold is not None
        else get_reconciliation_config().similarity_threshold
    )
    snapshot = load_snapshot(source)
    log.info(
        "Loaded snapshot (schema %s, app=%s, exported=%s) with %s records",
        snapshot.schema_version,
        snapshot.app,
        snapshot.exported_at,
        snapshot.total_items,
    )
    return orchestrator.import_snapshot(snapshot, threshold, cancel=cancel)


def submit_import(
    executor: Executor,
    source: SnapshotSource,
    *,
    orchestrator: ImportOrchestrator,
    similarity_threshold: float | None = None,
    cancel: CancellationToken | None = None,
) -> Future[ImportSummary]:
    """Run ``import_snapshot`` on ``executor``; the future carries the summary or error."""

    return executor.submit(
        import_snapshot,
        source,
        orchestrator=orchestrator,
        similarity_threshold=similarity_threshold,
        cancel=cancel,
    )


def export_snapshot(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SnapshotDocument:
    """Export the whole collection as a snapshot document."""

    collection = export_collection(unit_of_work_factory or _default_unit_of_work_factory())
    return build_document(collection)


def export_snapshot_file(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SnapshotDocument:
    """Export the collection and write the document to ``path``."""

    document = export_snapshot(unit_of_work_factory=unit_of_work_factory)
    path.write_text(dump_document(document), encoding="utf-8")
    log.info("Wrote snapshot to %s", path)
    return document
