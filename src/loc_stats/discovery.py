"""Repository discovery: paginated listing and ownership/fork/archive filtering."""

from __future__ import annotations

import logging
from typing import Any

from .config import Config
from .exceptions import DiscoveryError
from .github.client import RepositoryListingClient
from .models import RepositoryDescriptor
from .retry import retry_async

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


def keep_repository(repo: dict[str, Any], config: Config, login: str) -> bool:
    """Apply the fork, archived and ownership filters to one listing entry."""
    if not config.include_forks and repo.get("fork"):
        return False
    if not config.include_archived and repo.get("archived"):
        return False
    owner = (repo.get("owner") or {}).get("login") or ""
    return owner.casefold() == login.casefold()


class RepositorySource:
    """Discover the repositories owned by the configured account.

    Discovery is fail-open: when a page cannot be fetched, pagination stops
    and the repositories collected so far are returned. ``truncated`` and
    ``error`` record that this happened.
    """

    def __init__(self, client: RepositoryListingClient, config: Config):
        self.client = client
        self.config = config
        self.truncated = False
        self.error: str | None = None
        self.pages_fetched = 0
        self.login: str | None = None

    async def resolve_login(self) -> str:
        if self.config.username:
            return self.config.username
        login = await self.client.get_authenticated_login()
        logger.info("Using authenticated user %s", login)
        return login

    async def _fetch_page(self, page: int) -> list[dict[str, Any]]:
        return await retry_async(
            lambda: self.client.list_user_repos(
                page=page, per_page=PAGE_SIZE, type_filter=self.config.type_filter
            ),
            retries=self.config.retries,
            backoff=self.config.retry_backoff,
            retry_on=DiscoveryError,
            what=f"Fetching repositories page {page}",
        )

    def _stop(self, reason: str) -> None:
        logger.error("Repository discovery stopped early: %s", reason)
        self.truncated = True
        self.error = reason

    async def discover(self, login: str | None = None) -> list[RepositoryDescriptor]:
        if login is None:
            try:
                login = await self.resolve_login()
            except DiscoveryError as exc:
                self._stop(f"could not resolve account login: {exc}")
                return []
        self.login = login
        logger.info("Fetching repositories for user: %s", login)
        logger.info("Include private: %s", self.config.include_private)
        logger.info("Include forks: %s", self.config.include_forks)
        logger.info("Include archived: %s", self.config.include_archived)

        repos: list[RepositoryDescriptor] = []
        page = 1
        while True:
            try:
                entries = await self._fetch_page(page)
                kept = [
                    RepositoryDescriptor.from_api(entry)
                    for entry in entries
                    if keep_repository(entry, self.config, login)
                ]
            except DiscoveryError as exc:
                self._stop(f"error fetching repositories page {page}: {exc}")
                break
            except (AttributeError, KeyError, TypeError) as exc:
                self._stop(f"unparsable repositories page {page}: {exc!r}")
                break
            self.pages_fetched += 1
            if not entries:
                break

            repos.extend(kept)

            if len(entries) < PAGE_SIZE:
                break
            page += 1

        logger.info("Found %d repositories to analyze", len(repos))
        return repos
