from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from argumerge.app import build_orchestrator, export_snapshot_file, import_snapshot
from argumerge.config import configure_logging, get_reconciliation_config
from argumerge.domain.reconciliation import (
    ImportPhase,
    ReviewDecision,
    ReviewReason,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from argumerge.domain.reconciliation import ImportSummary, ReviewItem

log = logging.getLogger(__name__)

REVIEW_POLICIES = ("skip", "confirm", "reject")


def _threshold(value: str) -> float:
    try:
        threshold = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid threshold: {value}") from exc
    if not 0.0 <= threshold <= 1.0:
        raise argparse.ArgumentTypeError("Threshold must be between 0.0 and 1.0")
    return threshold


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid number: {value}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError("Value must be positive")
    return number


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Merge debate snapshots into a local collection")
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import", help="Import a snapshot file")
    importer.add_argument("path", type=Path, help="Snapshot JSON file")
    importer.add_argument(
        "--threshold",
        type=_threshold,
        default=None,
        help="Similarity threshold for near-duplicates (defaults to config)",
    )
    importer.add_argument(
        "--on-review",
        choices=REVIEW_POLICIES,
        default="skip",
        help="Decision applied to every near-duplicate (default: %(default)s)",
    )
    importer.add_argument(
        "--page-size",
        type=_positive_int,
        default=None,
        help="Review items listed per page (defaults to config)",
    )

    exporter = subparsers.add_parser("export", help="Export the collection to a snapshot file")
    exporter.add_argument("path", type=Path, help="Destination JSON file")

    return parser.parse_args(list(argv))


def _decisions_for(summary: ImportSummary, policy: str) -> list[ReviewDecision]:
    items = [
        item for item in summary.items_for_review if item.reason is ReviewReason.NEAR_DUPLICATE
    ]
    if policy == "confirm":
        return [ReviewDecision.confirm(item) for item in items]
    if policy == "reject":
        return [ReviewDecision.reject(item) for item in items]
    return []


def _log_review_items(summary: ImportSummary, page_size: int) -> None:
    page = 0
    while items := summary.review_page(page, page_size):
        log.info("Review items, page %s:", page + 1)
        for item in items:
            _log_review_item(item)
        page += 1


def _log_review_item(item: ReviewItem) -> None:
    score = f"{item.similarity_score:.2f}" if item.similarity_score is not None else "-"
    log.info(
        "  [%s] %s %s ~ %s (score %s): %r vs %r",
        item.reason,
        item.entity_type,
        item.incoming_id,
        item.existing_id,
        score,
        item.incoming_text,
        item.existing_text,
    )


def _log_summary(summary: ImportSummary) -> None:
    log.info(
        "Import %s: total=%s created=%s updated=%s duplicates=%s near_duplicates=%s errors=%s",
        summary.state,
        summary.total_items,
        summary.created,
        summary.updated,
        summary.duplicates,
        summary.near_duplicates,
        summary.errors,
    )
    for message in summary.error_messages:
        log.warning("  %s", message)


def run_import(args: argparse.Namespace) -> ImportSummary:
    config = get_reconciliation_config()
    orchestrator = build_orchestrator(config=config)
    summary = import_snapshot(
        args.path,
        orchestrator=orchestrator,
        similarity_threshold=args.threshold,
    )
    if summary.state is ImportPhase.AWAITING_REVIEW:
        _log_review_items(summary, args.page_size or config.review_page_size)
        decisions = _decisions_for(summary, args.on_review)
        log.info("Applying review policy %r to %s items", args.on_review, len(decisions))
        summary = orchestrator.confirm_review_decisions(decisions)
    _log_summary(summary)
    return summary


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        if parsed_args.command == "import":
            summary = run_import(parsed_args)
            if summary.state is not ImportPhase.COMMITTED:
                sys.exit(1)
        elif parsed_args.command == "export":
            export_snapshot_file(parsed_args.path)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
