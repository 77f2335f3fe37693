"""Public interface for the snapshot document adapter."""

from __future__ import annotations

from .schema import SnapshotDocument
from .translator import build_document, dump_document, load_snapshot, parse_document

__all__ = [
    "SnapshotDocument",
    "build_document",
    "dump_document",
    "load_snapshot",
    "parse_document",
]
