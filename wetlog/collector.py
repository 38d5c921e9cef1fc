"""Turn the path-level diff of a commit pair into dated change records."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from .diffing.classifier import edit_fragments, first_normative_edit
from .diffing.differ import BIG_FILE_THRESHOLD, DEFAULT_ALGORITHM, LineDiffUnavailable, diff_lines, load_text
from .diffing.normalizer import MalformedMarkdown
from .history.patterns import extract_bwb_id
from .history.repository import ObjectTooLarge
from .models import Change, ChangeKind, ChangeLog, CommitPair, Edit, EntryKind, PathEntry

logger = logging.getLogger(__name__)

BlobLoader = Callable[[str], bytes]


class ChangeCollector:
    """
    Records additions, deletions and normative modifications per date.

    Key behaviors:
    - Paths without a BWB id are skipped with a warning
    - A modified file yields at most one record per commit pair, for its
      first normative edit; cosmetic-only modifications yield none
    - Failures on one entry are logged and never stop the other entries;
      an edit that cannot be rendered is skipped and the next edit checked
    """

    def __init__(
        self,
        load_blob: BlobLoader,
        changes: ChangeLog | None = None,
        algorithm: str = DEFAULT_ALGORITHM,
        big_file_threshold: int | None = BIG_FILE_THRESHOLD,
        capture_text: bool = False,
    ):
        """
        Args:
            load_blob: Returns the bytes of a blob given its hex id
            changes: Change log to append to (a new one if omitted)
            algorithm: Name of the line diff algorithm
            big_file_threshold: Blobs larger than this are not diffed
            capture_text: Store the raw text of the first normative edit
        """
        self.load_blob = load_blob
        self.changes = changes if changes is not None else ChangeLog()
        self.algorithm = algorithm
        self.big_file_threshold = big_file_threshold
        self.capture_text = capture_text

        self.skipped_paths = 0
        self.anomalies = 0
        self.unavailable = 0
        self.failures = 0

    def observe(self, pair: CommitPair, entries: Iterable[PathEntry]) -> None:
        date = pair.date
        for entry in entries:
            path = entry.effective_path or ""
            bwb_id = extract_bwb_id(path)
            if bwb_id is None:
                self.skipped_paths += 1
                logger.warning("Could not find BWB ID in %s; %s", path, date)
                continue

            if entry.kind is EntryKind.ADDED:
                # The whole text is added; recording it would swamp the report
                self.changes.add(Change(date, bwb_id, ChangeKind.ADD))
            elif entry.kind is EntryKind.DELETED:
                self.changes.add(Change(date, bwb_id, ChangeKind.DELETE))
            elif entry.kind is EntryKind.MODIFIED:
                self._observe_modification(date, bwb_id, entry)
            else:
                self.anomalies += 1
                logger.warning(
                    "%s should not occur (from %s to %s); %s",
                    entry.kind.value.capitalize(),
                    entry.old_path,
                    entry.new_path,
                    date,
                )

    def _observe_modification(self, date: str, bwb_id: str, entry: PathEntry) -> None:
        path = entry.effective_path
        try:
            change = self._classify_modification(date, bwb_id, entry)
        except (LineDiffUnavailable, ObjectTooLarge) as e:
            self.unavailable += 1
            logger.warning("No line diff for %s (%s) on %s: %s", bwb_id, path, date, e)
            return
        except Exception:
            self.failures += 1
            logger.exception("Could not process an edit for %s; %s (%s)", date, bwb_id, path)
            return

        if change is not None:
            self.changes.add(change)

    def _classify_modification(self, date: str, bwb_id: str, entry: PathEntry) -> Change | None:
        if entry.old_ref is None or entry.new_ref is None:
            # Mode-only change, no content to compare
            return None

        old = load_text(self.load_blob(entry.old_ref), self.big_file_threshold)
        new = load_text(self.load_blob(entry.new_ref), self.big_file_threshold)

        def skip_malformed(edit: Edit, error: MalformedMarkdown) -> None:
            self.failures += 1
            logger.warning(
                "Could not process an edit for %s; %s (%s, lines %d-%d): %s",
                date,
                bwb_id,
                entry.effective_path,
                edit.begin_b + 1,
                edit.end_b,
                error,
            )

        edits = diff_lines(old, new, self.algorithm)
        edit = first_normative_edit(old, new, edits, on_malformed=skip_malformed)
        if edit is None:
            return None

        before = after = None
        if self.capture_text:
            before, after = edit_fragments(old, new, edit)
        return Change(date, bwb_id, ChangeKind.MODIFY, before, after)
