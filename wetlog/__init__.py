"""wetlog - dated log of normative changes in a git corpus of Dutch law texts."""

__version__ = "0.1.0"
