"""Command line entry point."""

from __future__ import annotations

import asyncio
import logging

import click

from . import __version__
from .config import DEFAULT_OUTPUT, OUTPUT_FORMATS, Config
from .exceptions import LocStatsError
from .log import setup_logging
from .orchestrator import run
from .tools import missing_tools

logger = logging.getLogger(__name__)


def _split_file_types(value: str | None) -> tuple[str, ...] | None:
    if not value:
        return None
    types = tuple(t.strip() for t in value.split(",") if t.strip())
    return types or None


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--token", envvar="GITHUB_TOKEN", default=None,
    help="GitHub personal access token (or GITHUB_TOKEN).",
)
@click.option(
    "--username", envvar="GITHUB_USERNAME", default=None,
    help="Account to analyze (or GITHUB_USERNAME). Defaults to the token's user.",
)
@click.option("--output", "-o", "output", default=DEFAULT_OUTPUT, show_default=True, help="Report file path.")
@click.option(
    "--file-types", default=None,
    help="Comma-separated languages/extensions to count, e.g. js,ts,python.",
)
@click.option("--exclude-private", is_flag=True, help="Exclude private repositories.")
@click.option("--include-forks", is_flag=True, help="Include forked repositories.")
@click.option("--include-archived", is_flag=True, help="Include archived repositories.")
@click.option(
    "--format", "output_format", type=click.Choice(OUTPUT_FORMATS),
    default="markdown", show_default=True, help="Report format.",
)
@click.option(
    "--scratch-dir", type=click.Path(file_okay=False), default=None,
    help="Directory for temporary clones (default: a fresh temp dir).",
)
@click.option(
    "--timeout", "http_timeout", type=float, default=30.0, show_default=True,
    help="GitHub API request timeout in seconds.",
)
@click.option(
    "--clone-timeout", type=float, default=600.0, show_default=True,
    help="git clone timeout in seconds.",
)
@click.option(
    "--count-timeout", type=float, default=600.0, show_default=True,
    help="cloc timeout in seconds.",
)
@click.option(
    "--retries", type=click.IntRange(min=0), default=0, show_default=True,
    help="Retries for failed listing pages and clones.",
)
@click.option(
    "--retry-backoff", type=click.FloatRange(min=0), default=1.0, show_default=True,
    help="Initial wait in seconds between retries; doubles on each attempt.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="loc-stats")
def main(
    token: str | None,
    username: str | None,
    output: str,
    file_types: str | None,
    exclude_private: bool,
    include_forks: bool,
    include_archived: bool,
    output_format: str,
    scratch_dir: str | None,
    http_timeout: float,
    clone_timeout: float,
    count_timeout: float,
    retries: int,
    retry_backoff: float,
    verbose: bool,
) -> None:
    """Count lines of code across all repositories of a GitHub account."""
    setup_logging(verbose)

    config = Config(
        token=token or "",
        username=username or None,
        include_private=not exclude_private,
        include_forks=include_forks,
        include_archived=include_archived,
        output_path=output,
        file_types=_split_file_types(file_types),
        output_format=output_format,
        scratch_dir=scratch_dir,
        http_timeout=http_timeout,
        clone_timeout=clone_timeout,
        count_timeout=count_timeout,
        retries=retries,
        retry_backoff=retry_backoff,
    )
    try:
        config.validate()
    except LocStatsError as exc:
        raise click.ClickException(str(exc)) from exc

    missing = missing_tools()
    if missing:
        raise click.ClickException(
            f"Missing required dependencies: {', '.join(missing)}. "
            "Please install them and try again."
        )

    try:
        asyncio.run(run(config))
    except LocStatsError as exc:
        raise click.ClickException(str(exc)) from exc
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
