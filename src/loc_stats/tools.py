"""External tools: shallow cloning with git and line counting with cloc."""

from __future__ import annotations

import asyncio
import json
import logging
import shutil
from pathlib import Path
from typing import Any, Iterable, Protocol

from .exceptions import CloneError, CountError

logger = logging.getLogger(__name__)

REQUIRED_TOOLS = ("git", "cloc")

# Language names accepted by --file-types, mapped to cloc --include-ext values.
EXTENSION_MAP = {
    "js": "js",
    "javascript": "js",
    "ts": "ts",
    "typescript": "ts",
    "py": "py",
    "python": "py",
    "java": "java",
    "cpp": "cpp,cc,cxx",
    "c": "c",
    "go": "go",
    "rust": "rs",
    "php": "php",
    "rb": "rb",
    "ruby": "rb",
    "cs": "cs",
    "html": "html,htm",
    "css": "css",
    "scss": "scss",
    "sass": "sass",
    "vue": "vue",
    "jsx": "jsx",
    "tsx": "tsx",
}


def extensions_for(file_types: Iterable[str] | None) -> str | None:
    """Translate language names into a cloc ``--include-ext`` list.

    Unknown names are passed through as extensions.
    """
    if not file_types:
        return None
    exts = [EXTENSION_MAP.get(t.lower(), t) for t in file_types if t]
    return ",".join(exts) or None


def missing_tools(tools: Iterable[str] = REQUIRED_TOOLS) -> list[str]:
    return [tool for tool in tools if shutil.which(tool) is None]


class SourceControlClient(Protocol):
    async def shallow_clone(self, clone_url: str, branch: str | None, dest: Path) -> None: ...


class LineCounter(Protocol):
    async def count(self, path: Path, include_ext: str | None = None) -> dict[str, Any]: ...


async def run_command(
    args: list[str], *, cwd: Path | None = None, timeout: float | None = None
) -> tuple[int, str, str]:
    """Run a command, returning ``(returncode, stdout, stderr)``.

    The process is killed and TimeoutError raised when ``timeout`` expires.
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        out, err = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise
    return (
        proc.returncode,
        out.decode("utf-8", errors="replace"),
        err.decode("utf-8", errors="replace"),
    )


class GitClient:
    """Shallow clones via the ``git`` executable."""

    def __init__(self, executable: str = "git", timeout: float | None = None):
        self.executable = executable
        self.timeout = timeout

    async def shallow_clone(self, clone_url: str, branch: str | None, dest: Path) -> None:
        args = [self.executable, "clone", "--quiet", "--depth", "1"]
        if branch:
            args += ["--branch", branch]
        args += [clone_url, str(dest)]
        try:
            code, _, err = await run_command(args, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise CloneError(f"git clone timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise CloneError(f"could not run git: {exc}") from exc
        if code != 0:
            raise CloneError(err.strip() or f"git clone exited with status {code}")


class ClocCounter:
    """Line counting via ``cloc --json``."""

    def __init__(self, executable: str = "cloc", timeout: float | None = None):
        self.executable = executable
        self.timeout = timeout

    async def count(self, path: Path, include_ext: str | None = None) -> dict[str, Any]:
        args = [self.executable, ".", "--json"]
        if include_ext:
            args.append(f"--include-ext={include_ext}")
        try:
            code, out, err = await run_command(args, cwd=path, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise CountError(f"cloc timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise CountError(f"could not run cloc: {exc}") from exc
        if code != 0:
            raise CountError(err.strip() or f"cloc exited with status {code}")
        if not out.strip():
            # cloc prints nothing when no files match
            return {}
        try:
            data = json.loads(out)
        except ValueError as exc:
            raise CountError(f"cloc returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise CountError("cloc returned an unexpected JSON document")
        return data
