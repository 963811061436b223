"""GitHub API access."""

from .client import GitHubClient, RepositoryListingClient
from .rate_limit import RateLimitMonitor

__all__ = ["GitHubClient", "RateLimitMonitor", "RepositoryListingClient"]
