"""Pipeline orchestration: discover, analyze, aggregate, render."""

from __future__ import annotations

import contextlib
import logging
import tempfile
from datetime import datetime
from pathlib import Path

from rich.console import Console

from .aggregator import accumulate
from .analyzer import RepositoryAnalyzer
from .config import Config
from .discovery import RepositorySource
from .github.client import GitHubClient, RepositoryListingClient
from .models import AggregateState
from .renderer import render, render_summary, write_report
from .tools import ClocCounter, GitClient, LineCounter, SourceControlClient

logger = logging.getLogger(__name__)


async def analyze_account(
    config: Config,
    listing: RepositoryListingClient,
    scm: SourceControlClient,
    counter: LineCounter,
    scratch_root: Path,
) -> tuple[AggregateState, str | None]:
    """Discover repositories and analyze them one at a time.

    Returns the aggregate state and the account login the run used.
    """
    source = RepositorySource(listing, config)
    repos = await source.discover()
    state = AggregateState(
        discovery_truncated=source.truncated,
        discovery_error=source.error,
    )
    if not repos:
        logger.warning("No repositories found to analyze")

    analyzer = RepositoryAnalyzer(scm, counter, config)
    for i, repo in enumerate(repos, 1):
        logger.debug("[%d/%d] %s", i, len(repos), repo.name)
        result = await analyzer.analyze(repo, scratch_root)
        accumulate(state, result)
    return state, source.login


async def run(
    config: Config,
    *,
    scm: SourceControlClient | None = None,
    counter: LineCounter | None = None,
    generated_at: datetime | None = None,
    console: Console | None = None,
) -> AggregateState:
    """Run the whole analysis for ``config`` and write the report file."""
    config.validate()
    scm = scm or GitClient(timeout=config.clone_timeout)
    counter = counter or ClocCounter(timeout=config.count_timeout)
    console = console or Console()

    logger.info("Starting LOC analysis...")
    with contextlib.ExitStack() as stack:
        if config.scratch_dir:
            scratch_root = Path(config.scratch_dir)
            scratch_root.mkdir(parents=True, exist_ok=True)
        else:
            scratch_root = Path(stack.enter_context(
                tempfile.TemporaryDirectory(prefix="loc-stats-", ignore_cleanup_errors=True)
            ))

        async with GitHubClient(
            config.token, base_url=config.api_url, timeout=config.http_timeout
        ) as client:
            state, login = await analyze_account(config, client, scm, counter, scratch_root)

    content = render(config, state, generated_at=generated_at, username=login)
    write_report(content, config.output_path, console=console)
    render_summary(state, username=login, console=console)

    logger.info("Analysis complete! Report saved to: %s", config.output_path)
    logger.info("Total repositories analyzed: %d", len(state.processed))
    logger.info("Total repositories skipped: %d", len(state.skipped))
    return state
