"""Reconciliation engine for merging debate snapshots into a local collection.

Layered flow:
1) translate the snapshot document at the adapter boundary
2) index the existing collection (fingerprints, length buckets)
3) per kind, in dependency order: rewrite references, then resolve each record
4) pause for review when near-duplicates were found
5) collect accepted creates and backfills into one change set
6) persist the change set in one unit of work
"""

from __future__ import annotations

from .contracts import (
    ConflictResolution,
    DuplicateResolution,
    EntityResolution,
    ImportSummary,
    KindStats,
    MatchKind,
    NearDuplicateResolution,
    NewResolution,
    ResolutionStatus,
    ReviewAction,
    ReviewDecision,
    ReviewItem,
    ReviewReason,
)
from .engine import CancellationToken, ImportOrchestrator
from .errors import (
    AmbiguousReferenceError,
    DanglingReferenceError,
    EntityValidationError,
    IdentityConflictError,
    ImportCancelledError,
    ImportInProgressError,
    InvalidTransitionError,
    ReconciliationError,
    RecordError,
    SnapshotParseError,
    StorageError,
    UnknownReviewItemError,
)
from .export import export_collection
from .fingerprint import FingerprintCache, claim_fingerprint, fingerprint
from .normalize import normalize_text
from .similarity import are_similar, levenshtein, similarity
from .snapshot import SCHEMA_VERSION, CollectionSnapshot, InvalidRecord, Snapshot
from .state import ImportPhase, ImportState

__all__ = [
    "SCHEMA_VERSION",
    "AmbiguousReferenceError",
    "CancellationToken",
    "CollectionSnapshot",
    "ConflictResolution",
    "DanglingReferenceError",
    "DuplicateResolution",
    "EntityResolution",
    "EntityValidationError",
    "FingerprintCache",
    "IdentityConflictError",
    "ImportCancelledError",
    "ImportInProgressError",
    "ImportOrchestrator",
    "ImportPhase",
    "ImportState",
    "ImportSummary",
    "InvalidRecord",
    "InvalidTransitionError",
    "KindStats",
    "MatchKind",
    "NearDuplicateResolution",
    "NewResolution",
    "ReconciliationError",
    "RecordError",
    "ResolutionStatus",
    "ReviewAction",
    "ReviewDecision",
    "ReviewItem",
    "ReviewReason",
    "Snapshot",
    "SnapshotParseError",
    "StorageError",
    "UnknownReviewItemError",
    "are_similar",
    "claim_fingerprint",
    "export_collection",
    "fingerprint",
    "levenshtein",
    "normalize_text",
    "similarity",
]
