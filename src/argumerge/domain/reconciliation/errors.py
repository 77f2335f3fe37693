"""Error taxonomy for reconciliation sessions.

Session-level errors (parse, storage) abort the whole import. Record-level
errors (validation, reference, conflict) skip one record and are counted in
the summary; siblings keep processing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from argumerge.domain.model import EntityType


class ReconciliationError(Exception):
    """Base class for every error raised by the reconciliation engine."""


class SnapshotParseError(ReconciliationError):
    """Raised when a snapshot cannot be parsed or uses an unsupported schema."""


class StorageError(ReconciliationError):
    """Raised when the collection could not be read or the commit failed."""


class RecordError(ReconciliationError):
    """A single snapshot record was rejected."""

    def __init__(self, *, entity_type: EntityType, record_id: str | None, message: str) -> None:
        self.entity_type = entity_type
        self.record_id = record_id
        self.message = message
        label = record_id if record_id is not None else "<missing id>"
        super().__init__(f"{entity_type.value.capitalize()} '{label}': {message}")


class EntityValidationError(RecordError):
    """Raised for blank required text, out-of-range values or unknown enums."""


class DanglingReferenceError(RecordError):
    """Raised when a foreign key cannot be resolved in the post-merge id space."""

    def __init__(
        self,
        *,
        entity_type: EntityType,
        record_id: str,
        field_name: str,
        target_types: tuple[EntityType, ...],
        target_id: str,
        reason: str = "not found",
    ) -> None:
        self.field_name = field_name
        self.target_types = target_types
        self.target_id = target_id
        expected = " or ".join(target.value for target in target_types)
        super().__init__(
            entity_type=entity_type,
            record_id=record_id,
            message=f"Referenced {expected} '{target_id}' ({field_name}) {reason}",
        )


class IdentityConflictError(RecordError):
    """Raised when two records are forced onto one id with different content."""


class InvalidTransitionError(ReconciliationError):
    """Raised when an operation is not allowed in the current import state."""


class ImportInProgressError(ReconciliationError):
    """Raised when a second session is started against a locked collection."""


class ImportCancelledError(ReconciliationError):
    """Raised when a session observes its cancellation flag while resolving."""


class UnknownReviewItemError(ReconciliationError, ValueError):
    """Raised when a review decision does not match a pending review item."""


class AmbiguousReferenceError(IdentityConflictError):
    """Raised when one reference id resolves in more than one target kind."""

    def __init__(
        self,
        *,
        entity_type: EntityType,
        record_id: str,
        field_name: str,
        target_id: str,
        matches: tuple[tuple[EntityType, str], ...],
    ) -> None:
        self.field_name = field_name
        self.target_id = target_id
        self.matches = matches
        kinds = " and ".join(kind.value for kind, _ in matches)
        super().__init__(
            entity_type=entity_type,
            record_id=record_id,
            message=f"Referenced id '{target_id}' ({field_name}) matches both {kinds}",
        )
