"""Analyze command - walk the law corpus history and write the change report."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.table import Table

from ..collector import ChangeCollector
from ..config import AnalyzeConfig
from ..diffing.differ import DEFAULT_ALGORITHM, DIFF_ALGORITHMS
from ..history.repository import (
    HistoryWalkError,
    RepositoryNotFound,
    configured_diff_algorithm,
    diff_trees,
    load_blob,
    open_repository,
    walk_history,
)
from ..history.walker import CommitWalker
from ..models import ChangeLog
from .report import write_counts, write_report

logger = logging.getLogger(__name__)


def _resolve_algorithm(config: AnalyzeConfig, configured: str | None) -> str:
    if config.algorithm:
        return config.algorithm
    if configured is None:
        return DEFAULT_ALGORITHM
    if configured not in DIFF_ALGORITHMS:
        logger.warning("diff.algorithm %r is not supported, using %s", configured, DEFAULT_ALGORITHM)
        return DEFAULT_ALGORITHM
    return configured


def collect_changes(config: AnalyzeConfig, console: Console | None = None) -> tuple[ChangeLog, ChangeCollector]:
    """Walk the history and collect change records.

    Raises:
        RepositoryNotFound: if the repository cannot be opened
        HistoryWalkError: if the history or a tree diff cannot be read
    """
    changes = ChangeLog()
    with open_repository(config.repo) as repo:
        algorithm = _resolve_algorithm(config, configured_diff_algorithm(repo))
        collector = ChangeCollector(
            lambda ref: load_blob(repo, ref, config.big_file_threshold),
            changes,
            algorithm=algorithm,
            big_file_threshold=config.big_file_threshold,
            capture_text=config.capture_text,
        )

        for pair in CommitWalker(walk_history(repo, config.start)):
            if console is not None:
                console.print(f"New commit date: {pair.date}", style="dim")
            collector.observe(pair, diff_trees(repo, pair.older, pair.newer))

    return changes, collector


def _print_summary(console: Console, changes: ChangeLog, collector: ChangeCollector) -> None:
    counts = changes.counts()
    table = Table(title="Changes")
    table.add_column("Kind")
    table.add_column("Records", justify="right")
    table.add_row("add", str(sum(c.adds for c in counts)))
    table.add_row("modify", str(sum(c.modifies for c in counts)))
    table.add_row("delete", str(sum(c.deletes for c in counts)))
    console.print(table)
    console.print(
        f"{len(counts)} dates; skipped {collector.skipped_paths} paths, "
        f"{collector.anomalies} renames/copies, {collector.unavailable} undiffable blobs, "
        f"{collector.failures} failed edits",
        style="dim",
    )


def run_analyze(config: AnalyzeConfig) -> int:
    """Run the full change walk and write the report(s).

    Returns:
        Exit code (0 = success, 1 = fatal error)
    """
    console = Console(stderr=True)
    console.print(f"Walking history of {config.repo} from {config.start}...", style="dim")

    try:
        changes, collector = collect_changes(config, console)
    except RepositoryNotFound as e:
        console.print(f"Error: {e}", style="bold red")
        return 1
    except HistoryWalkError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    try:
        rows = write_report(changes, config.output)
        if config.counts_output is not None:
            write_counts(changes, config.counts_output)
    except OSError as e:
        console.print(f"Error: cannot write report: {e}", style="bold red")
        return 1

    _print_summary(console, changes, collector)
    console.print(f"Wrote {rows} rows to {config.output}", style="green")
    return 0
