"""Pytest configuration and fixtures."""

import shutil
from pathlib import Path
from typing import Callable

import pytest
from git import Actor, Repo

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")

AUTHOR = Actor("Test", "test@example.com")


def commit_files(repo: Repo, message: str, files: dict[str, str | bytes | None]) -> str:
    """Write (or delete, for None) files in the work tree and commit them.

    Returns the new commit's hexsha.
    """
    root = Path(repo.working_tree_dir)
    added, removed = [], []
    for rel, content in files.items():
        path = root / rel
        if content is None:
            removed.append(rel)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        added.append(rel)

    if added:
        repo.index.add(added)
    if removed:
        repo.index.remove(removed, working_tree=True)
    commit = repo.index.commit(message, author=AUTHOR, committer=AUTHOR)
    return commit.hexsha


@pytest.fixture
def law_repo(tmp_path: Path) -> Repo:
    """An empty git repository for building a law corpus history."""
    repo = Repo.init(tmp_path / "laws")
    yield repo
    repo.close()


@pytest.fixture
def commit(law_repo: Repo) -> Callable[[str, dict[str, str | bytes | None]], str]:
    def _commit(message: str, files: dict[str, str | bytes | None]) -> str:
        return commit_files(law_repo, message, files)

    return _commit
