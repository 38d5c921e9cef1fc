"""Pair each dated commit with the previous dated commit in the history."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator

from ..models import CommitMarker, CommitPair


class WalkerState(str, Enum):
    AT_COMMIT = "at_commit"
    DONE = "done"


class CommitWalker:
    """
    Walks a newest-first commit history and yields dated commit pairs.

    Commits whose message is not a YYYY-MM-DD tag are never pair endpoints;
    their changes show up in the pair of the next newer dated commit. The
    oldest dated commit is paired with None, i.e. the empty tree.

    Errors raised while iterating the history propagate to the caller.
    """

    def __init__(self, commits: Iterable[CommitMarker]):
        self._commits = iter(commits)
        self.current: CommitMarker | None = self._next_dated()

    @property
    def state(self) -> WalkerState:
        return WalkerState.DONE if self.current is None else WalkerState.AT_COMMIT

    def _next_dated(self) -> CommitMarker | None:
        for commit in self._commits:
            if commit.is_dated:
                return commit
        return None

    def advance(self) -> CommitPair | None:
        """Produce the pair for the current commit and move to the older one."""
        if self.current is None:
            return None
        older = self._next_dated()
        pair = CommitPair(newer=self.current, older=older)
        self.current = older
        return pair

    def __iter__(self) -> Iterator[CommitPair]:
        while True:
            pair = self.advance()
            if pair is None:
                return
            yield pair
