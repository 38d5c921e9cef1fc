import pytest

from wetlog.diffing.differ import (
    BINARY_CHECK_BYTES,
    DIFF_ALGORITHMS,
    LineDiffUnavailable,
    RawText,
    diff_lines,
    get_algorithm,
    histogram_diff,
    is_binary,
    load_text,
)
from wetlog.models import Edit


def _text(*lines: str) -> RawText:
    return RawText.from_string("".join(line + "\n" for line in lines))


def _assert_well_formed(edits: list[Edit], old: RawText, new: RawText) -> None:
    prev_a = prev_b = -1
    for edit in edits:
        assert edit.begin_a <= edit.end_a <= len(old)
        assert edit.begin_b <= edit.end_b <= len(new)
        assert edit.begin_a > prev_a and edit.begin_b > prev_b
        assert edit.length_a or edit.length_b
        prev_a, prev_b = edit.end_a, edit.end_b


@pytest.mark.parametrize("algorithm", sorted(DIFF_ALGORITHMS))
def test_identical_texts_have_no_edits(algorithm: str) -> None:
    text = _text("# Title", "", "Body.")
    assert diff_lines(text, text, algorithm) == []


@pytest.mark.parametrize("algorithm", sorted(DIFF_ALGORITHMS))
def test_single_line_replacement(algorithm: str) -> None:
    old = _text("# Title", "", "Body.")
    new = _text("# Title", "", "Body!")
    assert diff_lines(old, new, algorithm) == [Edit(2, 3, 2, 3)]


@pytest.mark.parametrize("algorithm", sorted(DIFF_ALGORITHMS))
def test_whitespace_within_lines_is_ignored(algorithm: str) -> None:
    old = _text("# Title", "", "De minister beslist.")
    new = _text("#  Title", "", "De  minister\tbeslist.   ")
    assert diff_lines(old, new, algorithm) == []


def test_insertions_and_deletions() -> None:
    old = _text("a", "b", "c", "d")
    new = _text("a", "x", "b", "d")
    edits = diff_lines(old, new)
    assert edits == [Edit(1, 1, 1, 2), Edit(2, 3, 3, 3)]
    assert [e.kind for e in edits] == ["insert", "delete"]


def test_empty_sides() -> None:
    empty = RawText.from_string("")
    text = _text("a", "b")
    assert diff_lines(empty, text) == [Edit(0, 0, 0, 2)]
    assert diff_lines(text, empty) == [Edit(0, 2, 0, 0)]


def test_histogram_anchors_on_unique_lines() -> None:
    a = ["}", "uniek", "}", "x", "}"]
    b = ["}", "y", "uniek", "}", "z", "}"]
    edits = histogram_diff(a, b)
    assert edits == [Edit(1, 1, 1, 2), Edit(3, 4, 4, 5)]


def test_histogram_falls_back_for_frequent_lines() -> None:
    a = ["same"] * 100 + ["old"]
    b = ["same"] * 100 + ["new"]
    assert histogram_diff(a, b) == [Edit(100, 101, 100, 101)]

    a = ["x"] * 70 + ["y"] * 70
    b = ["y"] * 70 + ["x"] * 70
    edits = histogram_diff(a, b)
    assert edits
    for edit in edits:
        assert edit.begin_a <= edit.end_a and edit.begin_b <= edit.end_b


@pytest.mark.parametrize("algorithm", sorted(DIFF_ALGORITHMS))
def test_edits_are_ordered_and_cover_all_differences(algorithm: str) -> None:
    old = _text("# Wet", "", "Artikel 1", "tekst een", "", "Artikel 2", "tekst twee", "", "Artikel 3", "tekst drie")
    new = _text("# Wet", "", "Artikel 1", "tekst 1", "", "Artikel 2", "tekst twee", "nieuw lid", "", "Artikel 3")
    edits = diff_lines(old, new, algorithm)
    _assert_well_formed(edits, old, new)

    # Applying the edits to the old lines reproduces the new lines
    rebuilt: list[str] = []
    pos = 0
    for edit in edits:
        rebuilt.extend(old.lines[pos:edit.begin_a])
        rebuilt.extend(new.lines[edit.begin_b:edit.end_b])
        pos = edit.end_a
    rebuilt.extend(old.lines[pos:])
    assert rebuilt == list(new.lines)


def test_unknown_algorithm() -> None:
    with pytest.raises(ValueError, match="Unknown diff algorithm"):
        get_algorithm("myers")


def test_binary_detection() -> None:
    assert is_binary(b"abc\0def")
    assert not is_binary(b"plain text")
    # Only the first block is inspected
    assert not is_binary(b"a" * BINARY_CHECK_BYTES + b"\0")


def test_load_text_rejects_binary() -> None:
    with pytest.raises(LineDiffUnavailable) as excinfo:
        load_text(b"PNG\0\0\0")
    assert excinfo.value.reason == "binary"


def test_load_text_rejects_oversized_content() -> None:
    with pytest.raises(LineDiffUnavailable) as excinfo:
        load_text(b"x" * 11, limit=10)
    assert excinfo.value.reason == "too-large"
    assert excinfo.value.size == 11


def test_load_text_keeps_line_endings() -> None:
    text = load_text("één\r\ntwee\n".encode("utf-8"))
    assert text.lines == ("één\r\n", "twee\n")
    assert text.slice(0, 2) == "één\r\ntwee\n"
