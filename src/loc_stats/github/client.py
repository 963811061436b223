"""Async GitHub REST client for repository listing."""

from __future__ import annotations

import logging
import time
from email.utils import parsedate_to_datetime
from typing import Any, Protocol

import httpx

from .. import __version__
from ..config import DEFAULT_API_URL
from ..exceptions import DiscoveryError, RateLimitError
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)


def parse_retry_after(value: str | None) -> float | None:
    """Seconds to wait from a ``Retry-After`` header (delta-seconds or HTTP-date)."""
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        return None
    return max(0.0, when.timestamp() - time.time())


class RepositoryListingClient(Protocol):
    async def list_user_repos(
        self, *, page: int, per_page: int, type_filter: str, sort: str = "updated"
    ) -> list[dict[str, Any]]: ...

    async def get_authenticated_login(self) -> str: ...


class GitHubClient:
    """Minimal GitHub API client used by repository discovery.

    Use as an async context manager::

        async with GitHubClient(token) as client:
            repos = await client.list_user_repos(page=1, per_page=100, type_filter="all")
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        rate_limit: RateLimitMonitor | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, connect=10.0),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": f"loc-stats/{__version__}",
            },
            transport=transport,
        )
        self.rate_limit = rate_limit or RateLimitMonitor()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        await self.rate_limit.wait_if_needed()
        try:
            response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise DiscoveryError(f"GET {url} failed: {exc}") from exc
        self.rate_limit.update(response)

        if response.status_code in (403, 429) and self.rate_limit.exhausted:
            raise RateLimitError(
                f"GET {url} rate limited ({response.status_code})",
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        if response.is_error:
            raise DiscoveryError(f"GET {url} returned {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise DiscoveryError(f"GET {url} returned invalid JSON: {exc}") from exc

    async def list_user_repos(
        self, *, page: int, per_page: int, type_filter: str, sort: str = "updated"
    ) -> list[dict[str, Any]]:
        """Return one page of ``GET /user/repos``."""
        data = await self._get_json(
            "/user/repos",
            params={"type": type_filter, "per_page": per_page, "page": page, "sort": sort},
        )
        if not isinstance(data, list):
            raise DiscoveryError(f"Unexpected /user/repos payload on page {page}")
        return data

    async def get_authenticated_login(self) -> str:
        data = await self._get_json("/user")
        if not isinstance(data, dict) or not data.get("login"):
            raise DiscoveryError("Could not determine the authenticated user's login")
        return data["login"]
