"""
Git access for the change walk, built on GitPython.

Provides:
- Opening the repository that holds the law corpus
- A first-parent, newest-first walk over commits
- Path-level diffs between two tree snapshots (or the empty tree)
- Size-checked blob loading
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from git import Repo
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects import Tree
from git.util import hex_to_bin

from ..models import CommitMarker, EntryKind, PathEntry

logger = logging.getLogger(__name__)

# git's well-known id of the tree with no entries
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_ENTRY_KINDS = {
    "A": EntryKind.ADDED,
    "D": EntryKind.DELETED,
    "M": EntryKind.MODIFIED,
    "T": EntryKind.MODIFIED,  # type change, e.g. file <-> symlink
    "R": EntryKind.RENAMED,
    "C": EntryKind.COPIED,
}


class RepositoryError(Exception):
    """Base class for failures of the git collaborator."""


class RepositoryNotFound(RepositoryError):
    def __init__(self, path: Path | str):
        super().__init__(f"No git repository found at {path}")
        self.path = path


class HistoryWalkError(RepositoryError):
    """The history (or a tree diff) could not be read."""


class ObjectNotFound(RepositoryError):
    def __init__(self, ref: str):
        super().__init__(f"Object {ref} not found")
        self.ref = ref


class ObjectTooLarge(RepositoryError):
    def __init__(self, ref: str, size: int, limit: int):
        super().__init__(f"Object {ref} is {size} bytes (limit {limit})")
        self.ref = ref
        self.size = size
        self.limit = limit


def open_repository(path: Path | str) -> Repo:
    """Open the git repository at `path` (or one of its parents)."""
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise RepositoryNotFound(path) from e


def configured_diff_algorithm(repo: Repo) -> str | None:
    """Read `diff.algorithm` from the repository's git config."""
    with repo.config_reader() as reader:
        value = reader.get_value("diff", "algorithm", "")
    value = str(value).strip().lower()
    return value or None


def walk_history(repo: Repo, start: str = "HEAD") -> Iterator[CommitMarker]:
    """Yield commits from `start` backwards along first parents."""
    try:
        start_commit = repo.commit(start)
    except (BadName, BadObject, ValueError) as e:
        raise HistoryWalkError(f"Cannot resolve start commit {start!r}: {e}") from e

    try:
        for commit in repo.iter_commits(start_commit, first_parent=True):
            message = commit.message
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            yield CommitMarker(
                hexsha=commit.hexsha,
                message=message,
                tree_sha=commit.tree.hexsha,
            )
    except (GitCommandError, BadObject, ValueError) as e:
        raise HistoryWalkError(f"History walk from {start!r} failed: {e}") from e


def diff_trees(repo: Repo, older: CommitMarker | None, newer: CommitMarker) -> list[PathEntry]:
    """List changed paths between two commits' trees.

    With `older=None` the newer tree is compared against the empty tree, so
    every file in it shows up as added. Rename detection is off: a BWB id
    is a document's identity, so a moved text is a deletion plus an addition.
    """
    old_sha = older.tree_sha if older is not None else EMPTY_TREE_SHA
    old_tree = Tree(repo, hex_to_bin(old_sha))
    new_tree = Tree(repo, hex_to_bin(newer.tree_sha))

    try:
        diffs = old_tree.diff(new_tree, no_renames=True)
    except GitCommandError as e:
        raise HistoryWalkError(f"Cannot diff {old_sha} against {newer.tree_sha}: {e}") from e

    entries = []
    for diff in diffs:
        kind = _ENTRY_KINDS.get(diff.change_type)
        if kind is None:
            logger.warning("Unknown change type %r for %s", diff.change_type, diff.b_path or diff.a_path)
            continue
        entries.append(
            PathEntry(
                old_path=None if kind is EntryKind.ADDED else diff.a_path,
                new_path=None if kind is EntryKind.DELETED else diff.b_path,
                kind=kind,
                old_ref=diff.a_blob.hexsha if diff.a_blob is not None else None,
                new_ref=diff.b_blob.hexsha if diff.b_blob is not None else None,
            )
        )
    return entries


def load_blob(repo: Repo, ref: str, limit: int | None = None) -> bytes:
    """Read a blob's bytes, refusing blobs larger than `limit`."""
    binsha = hex_to_bin(ref)
    try:
        size = repo.odb.info(binsha).size
    except (BadName, BadObject, ValueError) as e:
        raise ObjectNotFound(ref) from e

    if limit is not None and size > limit:
        raise ObjectTooLarge(ref, size, limit)

    return repo.odb.stream(binsha).read()
