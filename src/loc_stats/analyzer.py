"""Per-repository acquisition and measurement."""

from __future__ import annotations

import contextlib
import logging
import shutil
from pathlib import Path
from typing import Any, Iterable, Iterator

from .config import Config
from .exceptions import CloneError, CountError
from .models import AnalysisResult, AnalysisStatus, LanguageStats, RepositoryDescriptor
from .retry import retry_async
from .tools import LineCounter, SourceControlClient, extensions_for

logger = logging.getLogger(__name__)

# Non-language keys in cloc's JSON output.
PSEUDO_KEYS = frozenset({"header", "SUM"})


def parse_cloc_output(data: dict[str, Any]) -> dict[str, LanguageStats]:
    """Convert cloc JSON into ``{language: LanguageStats}``.

    Header/sum rows and languages without code lines are dropped.
    """
    languages: dict[str, LanguageStats] = {}
    for lang, stats in data.items():
        if lang in PSEUDO_KEYS or not isinstance(stats, dict):
            continue
        entry = LanguageStats(
            files=int(stats.get("nFiles") or 0),
            blank=int(stats.get("blank") or 0),
            comment=int(stats.get("comment") or 0),
            code=int(stats.get("code") or 0),
        )
        if entry.code > 0:
            languages[lang] = entry
    return languages


def sum_stats(stats: Iterable[LanguageStats]) -> LanguageStats:
    total = LanguageStats()
    for entry in stats:
        total = total + entry
    return total


@contextlib.contextmanager
def scratch_directory(root: Path, name: str) -> Iterator[Path]:
    """Yield ``root/name`` and remove it on exit; removal errors are only logged."""
    path = root / name
    if path.exists():
        logger.debug("Removing stale scratch directory %s", path)
        shutil.rmtree(path, ignore_errors=True)
    try:
        yield path
    finally:
        if path.exists():
            try:
                shutil.rmtree(path)
            except OSError as exc:
                logger.warning("Failed to remove scratch directory %s: %s", path, exc)


def _failed(repo: RepositoryDescriptor, status: AnalysisStatus, exc: Exception) -> AnalysisResult:
    return AnalysisResult(name=repo.name, private=repo.private, status=status, error=str(exc) or repr(exc))


class RepositoryAnalyzer:
    def __init__(self, scm: SourceControlClient, counter: LineCounter, config: Config):
        self.scm = scm
        self.counter = counter
        self.config = config
        self.include_ext = extensions_for(config.file_types)

    async def analyze(self, repo: RepositoryDescriptor, scratch_root: Path) -> AnalysisResult:
        """Clone ``repo`` into a scratch directory, count its lines and clean up."""
        logger.info("Analyzing: %s (%s)", repo.name, repo.visibility.lower())
        with scratch_directory(scratch_root, repo.name) as path:

            async def clone() -> None:
                # a failed attempt may leave a partial checkout behind
                if path.exists():
                    shutil.rmtree(path)
                await self.scm.shallow_clone(repo.clone_url, repo.default_branch, path)

            try:
                await retry_async(
                    clone,
                    retries=self.config.retries,
                    backoff=self.config.retry_backoff,
                    retry_on=CloneError,
                    what=f"Cloning {repo.name}",
                )
            except CloneError as exc:
                logger.warning("Failed to clone %s: %s", repo.name, exc)
                return _failed(repo, AnalysisStatus.CLONE_FAILED, exc)
            except Exception as exc:
                logger.exception("Unexpected error cloning %s", repo.name)
                return _failed(repo, AnalysisStatus.CLONE_FAILED, exc)

            try:
                data = await self.counter.count(path, self.include_ext)
                languages = parse_cloc_output(data)
            except (CountError, TypeError, ValueError) as exc:
                logger.warning("CLOC failed for %s: %s", repo.name, exc)
                return _failed(repo, AnalysisStatus.COUNT_FAILED, exc)
            except Exception as exc:
                logger.exception("Unexpected error counting lines of %s", repo.name)
                return _failed(repo, AnalysisStatus.COUNT_FAILED, exc)

        totals = sum_stats(languages.values())
        logger.debug("%s: %d languages, %d code lines", repo.name, len(languages), totals.code)
        return AnalysisResult(
            name=repo.name,
            private=repo.private,
            status=AnalysisStatus.SUCCESS,
            languages=languages,
            totals=totals,
        )
