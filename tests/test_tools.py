"""Tests for the git and cloc wrappers."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from loc_stats.exceptions import CloneError, CountError
from loc_stats.tools import ClocCounter, GitClient, extensions_for, missing_tools, run_command


def test_extensions_for_maps_known_languages():
    assert extensions_for(["JavaScript", "python", "cpp", "html"]) == "js,py,cpp,cc,cxx,html,htm"


def test_extensions_for_passes_unknown_through():
    assert extensions_for(["kt", "swift"]) == "kt,swift"


def test_extensions_for_empty():
    assert extensions_for(None) is None
    assert extensions_for([]) is None


def test_missing_tools():
    with patch("loc_stats.tools.shutil.which", side_effect=lambda t: None if t == "cloc" else "/usr/bin/git"):
        assert missing_tools() == ["cloc"]


@pytest.mark.asyncio
async def test_run_command_captures_output():
    code, out, err = await run_command([sys.executable, "-c", "print('hi')"])
    assert code == 0
    assert out.strip() == "hi"


@pytest.mark.asyncio
async def test_run_command_timeout_kills_process():
    with pytest.raises(asyncio.TimeoutError):
        await run_command([sys.executable, "-c", "import time; time.sleep(10)"], timeout=0.2)


@pytest.mark.asyncio
async def test_git_shallow_clone_arguments():
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock, return_value=(0, "", "")) as run:
        await GitClient(timeout=5).shallow_clone("https://x/r.git", "main", Path("/tmp/r"))
    run.assert_awaited_once_with(
        ["git", "clone", "--quiet", "--depth", "1", "--branch", "main", "https://x/r.git", "/tmp/r"],
        timeout=5,
    )


@pytest.mark.asyncio
async def test_git_clone_failure():
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock,
               return_value=(128, "", "fatal: Remote branch main not found\n")):
        with pytest.raises(CloneError, match="Remote branch main not found"):
            await GitClient().shallow_clone("https://x/r.git", "main", Path("/tmp/r"))


@pytest.mark.asyncio
async def test_git_clone_timeout():
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock, side_effect=asyncio.TimeoutError):
        with pytest.raises(CloneError, match="timed out"):
            await GitClient(timeout=1).shallow_clone("https://x/r.git", "main", Path("/tmp/r"))


@pytest.mark.asyncio
async def test_cloc_count_parses_json(tmp_path):
    payload = {"header": {}, "Python": {"nFiles": 1, "blank": 0, "comment": 0, "code": 3}}
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock,
               return_value=(0, json.dumps(payload), "")) as run:
        data = await ClocCounter().count(tmp_path, "py")
    assert data == payload
    run.assert_awaited_once_with(["cloc", ".", "--json", "--include-ext=py"], cwd=tmp_path, timeout=None)


@pytest.mark.asyncio
async def test_cloc_empty_output(tmp_path):
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock, return_value=(0, "\n", "")):
        assert await ClocCounter().count(tmp_path) == {}


@pytest.mark.asyncio
async def test_cloc_invalid_json(tmp_path):
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock, return_value=(0, "not json", "")):
        with pytest.raises(CountError, match="invalid JSON"):
            await ClocCounter().count(tmp_path)


@pytest.mark.asyncio
async def test_cloc_nonzero_exit(tmp_path):
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock, return_value=(2, "", "")):
        with pytest.raises(CountError, match="status 2"):
            await ClocCounter().count(tmp_path)


@pytest.mark.asyncio
async def test_cloc_not_installed(tmp_path):
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock, side_effect=FileNotFoundError("cloc")):
        with pytest.raises(CountError, match="could not run cloc"):
            await ClocCounter().count(tmp_path)


@pytest.mark.asyncio
async def test_git_clone_without_branch_uses_remote_head():
    with patch("loc_stats.tools.run_command", new_callable=AsyncMock, return_value=(0, "", "")) as run:
        await GitClient().shallow_clone("https://x/r.git", None, Path("/tmp/r"))
    assert run.call_args.args[0] == ["git", "clone", "--quiet", "--depth", "1", "https://x/r.git", "/tmp/r"]
