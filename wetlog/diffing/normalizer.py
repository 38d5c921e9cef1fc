"""Normalize markdown fragments so that formatting-only differences compare equal."""

import re

import markdown
from bs4 import BeautifulSoup

# Whitespace and emphasis markers carry no normative content
IGNORED_CHARACTERS = re.compile(r"[\s*]")


class MalformedMarkdown(ValueError):
    """A fragment could not be rendered as markdown."""

    def __init__(self, fragment: str):
        preview = fragment if len(fragment) <= 80 else fragment[:77] + "..."
        super().__init__(f"Cannot render markdown fragment: {preview!r}")
        self.fragment = fragment


def render_markdown(text: str) -> str:
    """Render markdown to HTML."""
    try:
        return markdown.markdown(text)
    except Exception as e:
        raise MalformedMarkdown(text) from e


def extract_plain_text(html: str) -> str:
    """Strip tags from HTML, keeping only the text content."""
    return BeautifulSoup(html, "html.parser").get_text()


def normalize(fragment: str) -> str:
    """Reduce a markdown fragment to its rendered text without whitespace or '*'."""
    if not fragment:
        return ""
    text = extract_plain_text(render_markdown(fragment))
    return IGNORED_CHARACTERS.sub("", text)
