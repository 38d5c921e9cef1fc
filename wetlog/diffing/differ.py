"""
Line-level diff between two versions of a document.

Lines are compared with all whitespace removed, so re-indented or re-wrapped
whitespace never produces an edit. Two algorithms are available:

- histogram: picks the common region whose lines occur least often, then
  recurses on both sides of it (as `git diff --histogram` does)
- difflib: the opcodes of difflib.SequenceMatcher
"""

from __future__ import annotations

import difflib
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Sequence

from ..models import Edit

# Same heuristic as git: a NUL byte in the first 8000 bytes means binary
BINARY_CHECK_BYTES = 8000
BIG_FILE_THRESHOLD = 50 * 1024 * 1024

# Lines occurring more often than this are not used as histogram anchors
MAX_CHAIN_LENGTH = 64
MAX_RECURSION_DEPTH = 64

DEFAULT_ALGORITHM = "histogram"


class LineDiffUnavailable(Exception):
    """Content cannot be diffed line by line (binary or too large)."""

    def __init__(self, reason: str, size: int = 0):
        super().__init__(f"No line diff possible: {reason}")
        self.reason = reason
        self.size = size


@dataclass(frozen=True)
class RawText:
    """A decoded document split into lines (line endings kept)."""

    lines: tuple[str, ...]

    @classmethod
    def from_string(cls, text: str) -> "RawText":
        return cls(tuple(text.splitlines(keepends=True)))

    def slice(self, begin: int, end: int) -> str:
        return "".join(self.lines[begin:end])

    def __len__(self) -> int:
        return len(self.lines)


def is_binary(data: bytes) -> bool:
    return b"\0" in data[:BINARY_CHECK_BYTES]


def load_text(data: bytes, limit: int | None = BIG_FILE_THRESHOLD) -> RawText:
    """Decode blob bytes into line records.

    Raises:
        LineDiffUnavailable: if the content is binary or larger than `limit`
    """
    if limit is not None and len(data) > limit:
        raise LineDiffUnavailable("too-large", len(data))
    if is_binary(data):
        raise LineDiffUnavailable("binary", len(data))
    return RawText.from_string(data.decode("utf-8", errors="replace"))


def _comparison_key(line: str) -> str:
    """Drop every whitespace character from a line."""
    return "".join(line.split())


def _sequence_matcher_region(
    a: Sequence[str], b: Sequence[str], a0: int, a1: int, b0: int, b1: int, out: list[Edit]
) -> None:
    matcher = difflib.SequenceMatcher(None, a[a0:a1], b[b0:b1], autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag != "equal":
            out.append(Edit(a0 + i1, a0 + i2, b0 + j1, b0 + j2))


def _find_anchor(
    a: Sequence[str], b: Sequence[str], a0: int, a1: int, b0: int, b1: int
) -> tuple[int, int, int, int] | None:
    """Find the common region whose rarest line is least frequent in `a`.

    Ties go to the longer region. Returns (start_a, end_a, start_b, end_b).
    """
    positions: dict[str, list[int]] = defaultdict(list)
    for i in range(a0, a1):
        positions[a[i]].append(i)

    best = None
    best_count = MAX_CHAIN_LENGTH + 1
    best_length = 0

    j = b0
    while j < b1:
        occurrences = positions.get(b[j])
        if not occurrences or len(occurrences) > min(best_count, MAX_CHAIN_LENGTH):
            j += 1
            continue

        next_j = j + 1
        for i in occurrences:
            start_a, start_b, end_a, end_b = i, j, i + 1, j + 1
            lowest = len(occurrences)
            while start_a > a0 and start_b > b0 and a[start_a - 1] == b[start_b - 1]:
                start_a -= 1
                start_b -= 1
                lowest = min(lowest, len(positions[a[start_a]]))
            while end_a < a1 and end_b < b1 and a[end_a] == b[end_b]:
                lowest = min(lowest, len(positions[a[end_a]]))
                end_a += 1
                end_b += 1

            length = end_a - start_a
            if lowest < best_count or (lowest == best_count and length > best_length):
                best = (start_a, end_a, start_b, end_b)
                best_count = lowest
                best_length = length
            next_j = max(next_j, end_b)
        j = next_j

    return best


def _histogram_region(
    a: Sequence[str],
    b: Sequence[str],
    a0: int,
    a1: int,
    b0: int,
    b1: int,
    out: list[Edit],
    depth: int = 0,
) -> None:
    # Trim common prefix and suffix
    while a0 < a1 and b0 < b1 and a[a0] == b[b0]:
        a0 += 1
        b0 += 1
    while a0 < a1 and b0 < b1 and a[a1 - 1] == b[b1 - 1]:
        a1 -= 1
        b1 -= 1

    if a0 == a1 and b0 == b1:
        return
    if a0 == a1 or b0 == b1:
        out.append(Edit(a0, a1, b0, b1))
        return

    if depth >= MAX_RECURSION_DEPTH:
        _sequence_matcher_region(a, b, a0, a1, b0, b1, out)
        return

    anchor = _find_anchor(a, b, a0, a1, b0, b1)
    if anchor is None:
        if set(a[a0:a1]).isdisjoint(b[b0:b1]):
            out.append(Edit(a0, a1, b0, b1))
        else:
            # Every shared line is too common to anchor on
            _sequence_matcher_region(a, b, a0, a1, b0, b1, out)
        return

    start_a, end_a, start_b, end_b = anchor
    _histogram_region(a, b, a0, start_a, b0, start_b, out, depth + 1)
    _histogram_region(a, b, end_a, a1, end_b, b1, out, depth + 1)


def histogram_diff(a: Sequence[str], b: Sequence[str]) -> list[Edit]:
    edits: list[Edit] = []
    _histogram_region(a, b, 0, len(a), 0, len(b), edits)
    return edits


def sequence_matcher_diff(a: Sequence[str], b: Sequence[str]) -> list[Edit]:
    edits: list[Edit] = []
    _sequence_matcher_region(a, b, 0, len(a), 0, len(b), edits)
    return edits


DIFF_ALGORITHMS: dict[str, Callable[[Sequence[str], Sequence[str]], list[Edit]]] = {
    "histogram": histogram_diff,
    "difflib": sequence_matcher_diff,
}


def get_algorithm(name: str) -> Callable[[Sequence[str], Sequence[str]], list[Edit]]:
    try:
        return DIFF_ALGORITHMS[name]
    except KeyError:
        raise ValueError(
            f"Unknown diff algorithm {name!r}; expected one of {', '.join(DIFF_ALGORITHMS)}"
        ) from None


def diff_lines(old: RawText, new: RawText, algorithm: str = DEFAULT_ALGORITHM) -> list[Edit]:
    """Compute the ordered edits turning `old` into `new`, ignoring whitespace."""
    diff = get_algorithm(algorithm)
    a = [_comparison_key(line) for line in old.lines]
    b = [_comparison_key(line) for line in new.lines]
    return diff(a, b)
