"""Data models for loc-stats."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class RepositoryDescriptor:
    name: str
    owner: str
    default_branch: str | None
    clone_url: str
    private: bool = False
    fork: bool = False
    archived: bool = False

    @property
    def visibility(self) -> str:
        return "Private" if self.private else "Public"

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RepositoryDescriptor:
        """Build a descriptor from a ``/user/repos`` entry."""
        owner = payload.get("owner") or {}
        return cls(
            name=payload["name"],
            owner=owner.get("login", ""),
            default_branch=payload.get("default_branch"),
            clone_url=payload.get("clone_url", ""),
            private=bool(payload.get("private", False)),
            fork=bool(payload.get("fork", False)),
            archived=bool(payload.get("archived", False)),
        )


@dataclass(frozen=True)
class LanguageStats:
    files: int = 0
    blank: int = 0
    comment: int = 0
    code: int = 0

    def __add__(self, other: LanguageStats) -> LanguageStats:
        if not isinstance(other, LanguageStats):
            return NotImplemented
        return LanguageStats(
            files=self.files + other.files,
            blank=self.blank + other.blank,
            comment=self.comment + other.comment,
            code=self.code + other.code,
        )


class AnalysisStatus(str, Enum):
    SUCCESS = "success"
    CLONE_FAILED = "clone_failed"
    COUNT_FAILED = "count_failed"


@dataclass
class AnalysisResult:
    name: str
    private: bool
    status: AnalysisStatus
    languages: dict[str, LanguageStats] = field(default_factory=dict)
    totals: LanguageStats | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is AnalysisStatus.SUCCESS


@dataclass
class RepositoryBreakdown:
    """Per-language detail of one successfully analysed repository."""

    name: str
    private: bool
    languages: dict[str, LanguageStats] = field(default_factory=dict)

    @property
    def visibility(self) -> str:
        return "Private" if self.private else "Public"


@dataclass
class SkippedRepository:
    name: str
    status: AnalysisStatus
    error: str | None = None


@dataclass
class AggregateState:
    languages: dict[str, LanguageStats] = field(default_factory=dict)
    totals: LanguageStats = field(default_factory=LanguageStats)
    processed: list[RepositoryBreakdown] = field(default_factory=list)
    skipped: list[SkippedRepository] = field(default_factory=list)
    discovery_truncated: bool = False
    discovery_error: str | None = None

    @property
    def processed_names(self) -> list[str]:
        return [repo.name for repo in self.processed]
