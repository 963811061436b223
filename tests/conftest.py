"""Shared fakes for the listing, clone and line-counting collaborators."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from loc_stats.config import Config
from loc_stats.exceptions import CloneError, CountError


def make_repo(name: str, owner: str = "alice", **kwargs: Any) -> dict[str, Any]:
    payload = {
        "name": name,
        "owner": {"login": owner},
        "fork": False,
        "archived": False,
        "private": False,
        "default_branch": "main",
        "clone_url": f"https://github.com/{owner}/{name}.git",
    }
    payload.update(kwargs)
    return payload


class FakeListingClient:
    """Serves pre-built pages; an Exception in ``pages`` is raised for that page."""

    def __init__(self, pages: list[Any], login: str = "alice"):
        self.pages = pages
        self.login = login
        self.calls: list[dict[str, Any]] = []

    async def list_user_repos(self, *, page, per_page, type_filter, sort="updated"):
        self.calls.append({"page": page, "per_page": per_page, "type": type_filter, "sort": sort})
        item = self.pages[page - 1] if page <= len(self.pages) else []
        if isinstance(item, Exception):
            raise item
        return item

    async def get_authenticated_login(self) -> str:
        return self.login


class FakeSourceControl:
    """Creates a placeholder checkout; names in ``failing`` raise CloneError."""

    def __init__(self, failing: set[str] | None = None):
        self.failing = failing or set()
        self.cloned: list[tuple[str, str, Path]] = []

    async def shallow_clone(self, clone_url: str, branch: str, dest: Path) -> None:
        self.cloned.append((clone_url, branch, dest))
        if dest.name in self.failing:
            raise CloneError(f"fatal: repository '{clone_url}' not found")
        dest.mkdir(parents=True)
        (dest / "README.md").write_text("hello\n", encoding="utf-8")


class FakeCounter:
    """Returns canned cloc JSON per repository directory name."""

    def __init__(self, outputs: dict[str, Any] | None = None):
        self.outputs = outputs or {}
        self.calls: list[tuple[Path, str | None]] = []

    async def count(self, path: Path, include_ext: str | None = None) -> dict[str, Any]:
        self.calls.append((path, include_ext))
        output = self.outputs.get(path.name, {"header": {"cloc_version": "1.98"}})
        if isinstance(output, Exception):
            raise output
        return output


def cloc_json(**languages: int) -> dict[str, Any]:
    """cloc-style output with one file and ``code`` lines per language."""
    data: dict[str, Any] = {"header": {"cloc_version": "1.98", "n_files": len(languages)}}
    for lang, code in languages.items():
        data[lang] = {"nFiles": 1, "blank": 2, "comment": 3, "code": code}
    data["SUM"] = {"nFiles": len(languages), "blank": 0, "comment": 0, "code": sum(languages.values())}
    return data


@pytest.fixture
def config() -> Config:
    return Config(token="fake-token", username="alice")


@pytest.fixture
def count_error() -> CountError:
    return CountError("cloc exited with status 2")
