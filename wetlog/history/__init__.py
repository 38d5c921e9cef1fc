"""Commit history access: date/path patterns, git collaborator and commit walker."""

from .patterns import date_tag, extract_bwb_id, is_dated_message

__all__ = [
    "date_tag",
    "extract_bwb_id",
    "is_dated_message",
]
