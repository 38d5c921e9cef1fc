"""Data models for commits, diff entries, edits and change records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from .history.patterns import date_tag

NO_FILE = "/dev/null"


class ChangeKind(str, Enum):
    """Kinds of change recorded in the report."""

    ADD = "add"
    MODIFY = "modify"
    DELETE = "delete"


class EntryKind(str, Enum):
    """Change status of a single path in a tree diff."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"


@dataclass(frozen=True)
class CommitMarker:
    """A commit in the walked history."""

    hexsha: str
    message: str
    tree_sha: str

    @property
    def date_tag(self) -> str | None:
        """The YYYY-MM-DD tag this commit is named after, if any."""
        return date_tag(self.message)

    @property
    def is_dated(self) -> bool:
        return self.date_tag is not None


@dataclass(frozen=True)
class CommitPair:
    """A dated commit and the previous dated commit (None = empty tree)."""

    newer: CommitMarker
    older: CommitMarker | None

    @property
    def date(self) -> str:
        tag = self.newer.date_tag
        if tag is None:
            raise ValueError(f"Commit {self.newer.hexsha} is not dated")
        return tag


@dataclass(frozen=True)
class PathEntry:
    """One changed file between two tree snapshots."""

    old_path: str | None
    new_path: str | None
    kind: EntryKind
    old_ref: str | None = None  # blob hexsha
    new_ref: str | None = None

    @property
    def effective_path(self) -> str | None:
        if self.new_path is None or self.new_path == NO_FILE:
            return self.old_path
        return self.new_path


@dataclass(frozen=True)
class Edit:
    """Half-open line ranges [begin_a, end_a) and [begin_b, end_b) that differ."""

    begin_a: int
    end_a: int
    begin_b: int
    end_b: int

    @property
    def length_a(self) -> int:
        return self.end_a - self.begin_a

    @property
    def length_b(self) -> int:
        return self.end_b - self.begin_b

    @property
    def kind(self) -> str:
        if self.length_a == 0:
            return "insert"
        if self.length_b == 0:
            return "delete"
        return "replace"


@dataclass(frozen=True)
class Change:
    """A single row of the change report."""

    date: str
    bwb_id: str
    kind: ChangeKind
    before: str | None = None
    after: str | None = None

    def __post_init__(self):
        # Raises ValueError for anything that is not add / modify / delete
        object.__setattr__(self, "kind", ChangeKind(self.kind))

    @property
    def is_add(self) -> int:
        return int(self.kind is ChangeKind.ADD)

    @property
    def is_modify(self) -> int:
        return int(self.kind is ChangeKind.MODIFY)

    @property
    def is_delete(self) -> int:
        return int(self.kind is ChangeKind.DELETE)


@dataclass(frozen=True)
class DateCounts:
    """Number of documents added, modified and deleted on one date."""

    date: str
    adds: int = 0
    modifies: int = 0
    deletes: int = 0

    @property
    def total(self) -> int:
        return self.adds + self.modifies + self.deletes


@dataclass
class ChangeLog:
    """Change records grouped by date, in the order they were observed."""

    _by_date: dict[str, list[Change]] = field(default_factory=dict)

    def add(self, change: Change) -> None:
        self._by_date.setdefault(change.date, []).append(change)

    def for_date(self, date: str) -> list[Change]:
        """Records for a date; an unseen date reads as empty and is not added."""
        return list(self._by_date.get(date, []))

    @property
    def dates(self) -> list[str]:
        return list(self._by_date)

    def changes(self) -> Iterator[Change]:
        """All records: dates in insertion order, records in append order."""
        for changes in self._by_date.values():
            yield from changes

    def counts(self) -> list[DateCounts]:
        """Per-date totals derived from the recorded changes."""
        result = []
        for date, changes in self._by_date.items():
            result.append(
                DateCounts(
                    date=date,
                    adds=sum(c.is_add for c in changes),
                    modifies=sum(c.is_modify for c in changes),
                    deletes=sum(c.is_delete for c in changes),
                )
            )
        return result

    def __len__(self) -> int:
        return sum(len(changes) for changes in self._by_date.values())
