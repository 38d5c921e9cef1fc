"""Write the change log to CSV tables."""

from __future__ import annotations

import csv
from pathlib import Path

from ..models import Change, ChangeLog

REPORT_HEADER = ["Date", "BWB ID", "Modification type", "Before", "After", "Adds", "Modifies", "Deletes"]
COUNTS_HEADER = ["Date", "Documents added", "Documents modified", "Documents deleted"]


def _change_row(change: Change) -> list[str | int]:
    # csv writes None as an empty cell
    return [
        change.date,
        change.bwb_id,
        change.kind.value,
        change.before,
        change.after,
        change.is_add,
        change.is_modify,
        change.is_delete,
    ]


def write_report(changes: ChangeLog, path: Path) -> int:
    """Write one row per change record, overwriting `path`.

    Returns:
        Number of rows written (header excluded)
    """
    rows = 0
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(REPORT_HEADER)
        for change in changes.changes():
            writer.writerow(_change_row(change))
            rows += 1
    return rows


def write_counts(changes: ChangeLog, path: Path) -> int:
    """Write the per-date add/modify/delete counts, overwriting `path`."""
    counts = changes.counts()
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(COUNTS_HEADER)
        for row in counts:
            writer.writerow([row.date, row.adds, row.modifies, row.deletes])
    return len(counts)
