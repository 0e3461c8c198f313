"""Pydantic models for configuration and data structures."""

from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, model_validator

from jirascan.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_WORKERS,
    MAX_PAGE_SIZE,
    MAX_REQUEST_TIMEOUT_SECONDS,
    MAX_WORKERS,
    MIN_REQUEST_TIMEOUT_SECONDS,
)


class JiraConfig(BaseModel):
    """Jira REST API connection configuration."""

    base_url: HttpUrl
    username: str | None = ""
    api_token: str | None = ""
    timeout: int = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        ge=MIN_REQUEST_TIMEOUT_SECONDS,
        le=MAX_REQUEST_TIMEOUT_SECONDS,
    )
    verify_ssl: bool = True


class ScanConfig(BaseModel):
    """Configuration for concurrent JQL search runs.

    Examples:
        >>> # Defaults: 8 lanes of 25 issues per page
        >>> config = ScanConfig()

        >>> # Sequential sweep with a hard stop after five minutes
        >>> config = ScanConfig(workers=1, deadline=300)
    """

    workers: int = Field(
        default=DEFAULT_WORKERS,
        ge=1,
        le=MAX_WORKERS,
        description="Number of concurrent worker lanes",
    )

    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Issues requested per page (maxResults)",
    )

    fetch_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds (defaults to the connection timeout)",
    )

    deadline: float | None = Field(
        default=None,
        gt=0,
        description="Cancel the run after this many seconds",
    )

    @model_validator(mode="after")
    def validate_deadline(self) -> "ScanConfig":
        """Ensure a single fetch can complete before the run deadline.

        Raises:
            ValueError: If fetch_timeout exceeds deadline
        """
        if self.deadline is not None and self.fetch_timeout is not None:
            if self.fetch_timeout > self.deadline:
                raise ValueError(
                    f"fetch_timeout ({self.fetch_timeout}) cannot exceed deadline ({self.deadline})"
                )
        return self

    def __str__(self) -> str:
        """Return human-readable configuration summary."""
        return f"ScanConfig(workers={self.workers}, page_size={self.page_size})"


class OutputConfig(BaseModel):
    """Output formatting preferences for CLI commands."""

    default_format: Literal["table", "json"] = "table"


class Configuration(BaseModel):
    """Complete jirascan configuration."""

    config_version: str = "1.0"
    jira: JiraConfig
    scan: ScanConfig = ScanConfig()
    output: OutputConfig = OutputConfig()


class ConnectionStatus(BaseModel):
    """Current state of connectivity to a Jira instance."""

    connected: bool
    authenticated: bool
    instance_url: str | None = None
    jira_version: str | None = None
    deployment_type: str | None = None
    user: str | None = None
    error_message: str | None = None
