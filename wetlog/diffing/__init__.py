"""Line diffs and normative-change classification for markdown law texts."""

from .classifier import first_normative_edit, is_normative_change
from .differ import DIFF_ALGORITHMS, LineDiffUnavailable, RawText, diff_lines, load_text
from .normalizer import MalformedMarkdown, normalize

__all__ = [
    "DIFF_ALGORITHMS",
    "LineDiffUnavailable",
    "MalformedMarkdown",
    "RawText",
    "diff_lines",
    "first_normative_edit",
    "is_normative_change",
    "load_text",
    "normalize",
]
