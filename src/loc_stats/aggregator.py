"""Fold per-repository results into per-language and grand totals."""

from __future__ import annotations

from typing import Iterable

from .models import (
    AggregateState,
    AnalysisResult,
    LanguageStats,
    RepositoryBreakdown,
    SkippedRepository,
)


def accumulate(state: AggregateState, result: AnalysisResult) -> AggregateState:
    """Add one result to ``state`` and return it.

    Failed results are recorded as skipped. Totals only ever grow by
    element-wise addition, so they do not depend on the order of results.
    """
    if not result.ok:
        state.skipped.append(SkippedRepository(result.name, result.status, result.error))
        return state

    state.processed.append(
        RepositoryBreakdown(name=result.name, private=result.private, languages=dict(result.languages))
    )
    for lang, stats in result.languages.items():
        state.languages[lang] = state.languages.get(lang, LanguageStats()) + stats
    if result.totals is not None:
        state.totals = state.totals + result.totals
    return state


def aggregate(
    results: Iterable[AnalysisResult], state: AggregateState | None = None
) -> AggregateState:
    state = state if state is not None else AggregateState()
    for result in results:
        accumulate(state, result)
    return state


def rank_languages(languages: dict[str, LanguageStats]) -> list[tuple[str, LanguageStats]]:
    """Languages by descending code lines, ties broken by name."""
    return sorted(languages.items(), key=lambda item: (-item[1].code, item[0]))
