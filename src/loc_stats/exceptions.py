"""Exception hierarchy for the analysis pipeline."""

from __future__ import annotations


class LocStatsError(Exception):
    """Base exception for loc-stats failures."""


class ConfigurationError(LocStatsError):
    """Raised when required configuration is missing or invalid."""


class DiscoveryError(LocStatsError):
    """Raised when a repository listing page cannot be fetched or parsed."""


class RateLimitError(DiscoveryError):
    """Raised when the listing API rejects a request because of rate limiting."""

    def __init__(self, message: str, retry_after: int | float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class CloneError(LocStatsError):
    """Raised when a repository cannot be cloned."""


class CountError(LocStatsError):
    """Raised when the line counter fails or returns unusable output."""
