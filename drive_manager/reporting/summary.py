"""Summary generation for cleanup runs."""

from __future__ import annotations

from collections import Counter
from typing import Any

from drive_manager.domain.models import RemovalOutcome, RemovalRecord


def compute_summary(records: list[RemovalRecord]) -> dict[str, Any]:
    """Compute aggregate outcome counts from removal records."""
    outcome_counts = Counter(record.outcome for record in records)
    return {
        "total_targets": len(records),
        "removed": outcome_counts.get(RemovalOutcome.REMOVED, 0),
        "not_found": outcome_counts.get(RemovalOutcome.NOT_FOUND, 0),
        "failed": outcome_counts.get(RemovalOutcome.FAILED, 0),
        "failed_paths": [record.path for record in records if record.outcome is RemovalOutcome.FAILED],
    }


def format_summary(summary: dict[str, Any]) -> str:
    return (
        "Cleanup summary: "
        f"removed={summary['removed']} "
        f"not_found={summary['not_found']} "
        f"failed={summary['failed']}"
    )
