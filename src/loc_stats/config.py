"""Immutable run configuration."""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ConfigurationError

OUTPUT_FORMATS = ("markdown", "json", "csv")

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_OUTPUT = "LOC_REPORT.md"


@dataclass(frozen=True)
class Config:
    token: str
    username: str | None = None
    include_private: bool = True
    include_forks: bool = False
    include_archived: bool = False
    output_path: str = DEFAULT_OUTPUT
    file_types: tuple[str, ...] | None = None
    output_format: str = "markdown"
    scratch_dir: str | None = None
    http_timeout: float = 30.0
    clone_timeout: float | None = 600.0
    count_timeout: float | None = 600.0
    retries: int = 0
    retry_backoff: float = 1.0
    api_url: str = DEFAULT_API_URL

    def validate(self) -> Config:
        """Check the configuration and return it unchanged.

        Raises ConfigurationError for a missing token, an unknown output
        format, non-positive timeouts or negative retry settings.
        """
        if not self.token or not self.token.strip():
            raise ConfigurationError(
                "GitHub token is required (pass --token or set GITHUB_TOKEN)"
            )
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unknown output format {self.output_format!r}; "
                f"expected one of {', '.join(OUTPUT_FORMATS)}"
            )
        if self.retries < 0:
            raise ConfigurationError("retries must be >= 0")
        if self.http_timeout is None or self.http_timeout <= 0:
            raise ConfigurationError("http_timeout must be > 0")
        for name in ("clone_timeout", "count_timeout"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ConfigurationError(f"{name} must be > 0 (or unset for no timeout)")
        if self.retry_backoff < 0:
            raise ConfigurationError("retry_backoff must be >= 0")
        return self

    @property
    def type_filter(self) -> str:
        """Value of the ``type`` query parameter for the listing API."""
        return "all" if self.include_private else "public"
