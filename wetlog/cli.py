"""CLI entrypoint for wetlog."""

import logging
import sys
import tomllib
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import AnalyzeConfig, load_config
from .diffing.differ import DIFF_ALGORITHMS


def setup_logging(verbose: bool) -> None:
    """Send diagnostics to stderr through rich."""
    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    root = logging.getLogger("wetlog")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="wetlog")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (defaults to ./wetlog.toml if present)",
)
@click.option("--verbose", "-V", is_flag=True, help="Show debug diagnostics")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """wetlog - dated log of changes to a git corpus of law texts.

    Walks the commits tagged YYYY-MM-DD, classifies every changed law as
    added, deleted or normatively modified, and writes a CSV report.
    Without a subcommand, runs `analyze` with its defaults.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except (OSError, ValueError, tomllib.TOMLDecodeError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    if ctx.invoked_subcommand is None:
        ctx.invoke(analyze)


@cli.command()
@click.option(
    "--repo",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to the law corpus git repository [default: .]",
)
@click.option("--start", type=str, default=None, help="Commit to walk back from [default: HEAD]")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="CSV report path [default: result.csv]",
)
@click.option(
    "--counts",
    "counts_output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write per-date add/modify/delete counts to this CSV",
)
@click.option(
    "--algorithm",
    type=click.Choice(sorted(DIFF_ALGORITHMS)),
    default=None,
    help="Line diff algorithm [default: git diff.algorithm, else histogram]",
)
@click.option(
    "--big-file-threshold",
    type=click.IntRange(min=1),
    default=None,
    help="Blobs larger than this many bytes are not diffed [default: 50 MiB]",
)
@click.option(
    "--capture-text",
    is_flag=True,
    default=False,
    help="Fill Before/After with the text of the first normative edit",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    repo: Path | None,
    start: str | None,
    output: Path | None,
    counts_output: Path | None,
    algorithm: str | None,
    big_file_threshold: int | None,
    capture_text: bool,
) -> None:
    """Write the dated change report for the corpus history.

    Examples:

        wetlog analyze --repo ../laws-markdown

        wetlog analyze --start main --counts counts.csv
    """
    from .commands.analyze import run_analyze

    base: AnalyzeConfig = ctx.obj["config"] if ctx.obj else AnalyzeConfig()
    config = base.with_overrides(
        repo=repo,
        start=start,
        output=output,
        counts_output=counts_output,
        algorithm=algorithm,
        big_file_threshold=big_file_threshold,
        capture_text=capture_text or None,
    )
    sys.exit(run_analyze(config))


if __name__ == "__main__":
    cli()
