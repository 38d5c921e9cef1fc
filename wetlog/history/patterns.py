"""Pattern matching for dated commit messages and BWB document paths."""

import re

# YYYY-MM-DD, ASCII digits only
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Match (prefix/)*(BWB...)(/suffix), e.g. "laws/BWBR0001840/README.md"
BWB_PATH_PATTERN = re.compile(r"(.*[/\\])*(BWB[^/\\]+)([/\\].*)")


def date_tag(message: str) -> str | None:
    """Return the trimmed commit message if it is exactly a YYYY-MM-DD date."""
    tag = message.strip()
    if DATE_PATTERN.fullmatch(tag):
        return tag
    return None


def is_dated_message(message: str) -> bool:
    return date_tag(message) is not None


def extract_bwb_id(path: str) -> str | None:
    """Extract the BWB identifier from a document path.

    Returns None when the path is not a tracked legal document.
    """
    match = BWB_PATH_PATTERN.search(path)
    return match.group(2) if match else None
