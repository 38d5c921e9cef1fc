"""Settings for a change-log run, optionally read from a TOML file."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from .diffing.differ import BIG_FILE_THRESHOLD, DIFF_ALGORITHMS

CONFIG_FILENAME = "wetlog.toml"


@dataclass(frozen=True)
class AnalyzeConfig:
    repo: Path = Path(".")
    start: str = "HEAD"
    output: Path = Path("result.csv")
    counts_output: Path | None = None
    algorithm: str | None = None  # None: use git's diff.algorithm, else histogram
    big_file_threshold: int = BIG_FILE_THRESHOLD
    capture_text: bool = False

    def with_overrides(self, **overrides: Any) -> "AnalyzeConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_PATH_KEYS = {"repo", "output", "counts_output"}


def _coerce(key: str, value: Any) -> Any:
    if key in _PATH_KEYS:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} must be a non-empty string")
        return Path(value)
    if key == "start":
        if not isinstance(value, str) or not value.strip():
            raise ValueError("start must be a non-empty string")
        return value.strip()
    if key == "algorithm":
        if value not in DIFF_ALGORITHMS:
            raise ValueError(f"algorithm must be one of {', '.join(DIFF_ALGORITHMS)}")
        return value
    if key == "big_file_threshold":
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError("big_file_threshold must be a positive integer")
        return value
    if key == "capture_text":
        if not isinstance(value, bool):
            raise ValueError("capture_text must be true or false")
        return value
    raise ValueError(f"Unknown setting: {key}")


def parse_config(data: dict[str, Any], base_dir: Path | None = None) -> AnalyzeConfig:
    """Build a config from parsed TOML.

    Settings may sit in a [wetlog] table or at the top level. Relative paths
    are resolved against `base_dir` when given.
    """
    table = data.get("wetlog", data)
    if not isinstance(table, dict):
        raise ValueError("[wetlog] must be a table")

    known = {f.name for f in fields(AnalyzeConfig)}
    values = {}
    for key, value in table.items():
        if key not in known:
            raise ValueError(f"Unknown setting: {key}")
        values[key] = _coerce(key, value)

    if base_dir is not None:
        for key in _PATH_KEYS & values.keys():
            if not values[key].is_absolute():
                values[key] = base_dir / values[key]

    return AnalyzeConfig(**values)


def load_config(path: Path | None = None) -> AnalyzeConfig:
    """Load settings from `path`, or from ./wetlog.toml if it exists."""
    import tomllib

    if path is None:
        default = Path.cwd() / CONFIG_FILENAME
        if not default.exists():
            return AnalyzeConfig()
        path = default

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    return parse_config(data, base_dir=path.parent)
