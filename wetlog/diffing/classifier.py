"""Decide whether an edit changes the normative content of a law text."""

from __future__ import annotations

from typing import Callable, Iterable

from ..models import Edit
from .differ import RawText
from .normalizer import MalformedMarkdown, normalize

MalformedHandler = Callable[[Edit, MalformedMarkdown], None]


def edit_fragments(old: RawText, new: RawText, edit: Edit) -> tuple[str, str]:
    """Raw text spanned by the edit on the old and the new side."""
    return old.slice(edit.begin_a, edit.end_a), new.slice(edit.begin_b, edit.end_b)


def is_normative_change(old: RawText, new: RawText, edit: Edit) -> bool:
    """True if the edited text still differs after markdown normalization.

    Raises:
        MalformedMarkdown: if either side cannot be rendered
    """
    before, after = edit_fragments(old, new, edit)
    return normalize(before) != normalize(after)


def first_normative_edit(
    old: RawText,
    new: RawText,
    edits: Iterable[Edit],
    on_malformed: MalformedHandler | None = None,
) -> Edit | None:
    """Return the first normative edit; later edits are not inspected.

    An edit that cannot be rendered is passed to `on_malformed` and skipped.
    Without a handler the MalformedMarkdown propagates.
    """
    for edit in edits:
        try:
            if is_normative_change(old, new, edit):
                return edit
        except MalformedMarkdown as e:
            if on_malformed is None:
                raise
            on_malformed(edit, e)
    return None
