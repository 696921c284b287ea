"""
Configuration management for the GitHub issue notifier.

This module handles environment variables, settings validation, and configuration
management using Pydantic Settings for type safety and validation.
"""

import re
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

MIN_POLL_INTERVAL_SECONDS = 60.0
DEFAULT_POLL_INTERVAL_SECONDS = 300.0

_GITHUB_HOSTS = {"github.com", "www.github.com"}
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_github_url(url: str) -> tuple[str, str]:
    """
    Split a repository reference into its owner and name.

    Accepts ``owner/repo`` as well as ``https://github.com/owner/repo``,
    tolerating a trailing slash and a trailing ``/issues`` segment.

    Args:
        url: Repository reference

    Returns:
        Tuple of (owner, repo)

    Raises:
        ValueError: If the reference cannot be parsed
    """
    value = url.strip().rstrip("/")
    if value.endswith("/issues"):
        value = value[: -len("/issues")]

    match = re.match(r"^https?://([^/]+)/(.*)$", value)
    if match:
        host, value = match.groups()
        if host.lower() not in _GITHUB_HOSTS:
            raise ValueError(
                f"Invalid GitHub URL host: {host}. "
                "Expected 'owner/repo' or 'https://github.com/owner/repo'"
            )

    parts = value.split("/")
    if len(parts) != 2:
        raise ValueError(
            "Invalid GitHub URL format. "
            "Expected 'owner/repo' or 'https://github.com/owner/repo'"
        )

    owner, repo = parts
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not owner or not repo:
        raise ValueError("Owner and repo cannot be empty")

    return owner, repo


def parse_duration(value: Any) -> float:
    """
    Parse a poll interval into seconds.

    Plain numbers are taken as seconds; strings may also use duration
    notation such as ``90s``, ``5m``, ``1h30m`` or ``500ms``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int | float):
        return float(value)
    if not isinstance(value, str):
        raise ValueError(f"Invalid duration type: {type(value)}")

    text = value.strip().lower()
    try:
        return float(text)
    except ValueError:
        pass

    parts = _DURATION_PART.findall(text)
    if not parts or "".join(n + u for n, u in parts) != text:
        raise ValueError(f"Invalid duration: {value!r}")
    return sum(float(number) * _DURATION_UNITS[unit] for number, unit in parts)


class PollingConfig(BaseModel):
    """Polling, fetch and dispatch tuning values."""

    poll_interval_seconds: float = Field(
        default=DEFAULT_POLL_INTERVAL_SECONDS, description="Poll interval in seconds"
    )
    http_timeout_seconds: float = Field(default=10.0, description="HTTP timeout")
    max_retries: int = Field(default=3, description="Retries after the first attempt")
    retry_delay_seconds: float = Field(
        default=5.0, description="Fixed delay between fetch attempts"
    )
    rate_limit_capacity: int = Field(default=30, description="Token bucket capacity")
    rate_limit_window_seconds: float = Field(
        default=60.0, description="Time to refill a full bucket"
    )
    notify_delay_seconds: float = Field(
        default=0.5, description="Minimum delay between notifications"
    )
    max_notification_length: int = Field(
        default=100, description="Maximum notification message length"
    )
    notification_title: str = Field(
        default="New GitHub Issue", description="Notification title"
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # GitHub configuration
    github_repo_url: str = Field(..., description="Repository to monitor")
    github_token: str = Field(default="", description="Optional GitHub token")
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub API URL"
    )

    # Polling configuration
    poll_interval_seconds: float = Field(
        default=DEFAULT_POLL_INTERVAL_SECONDS,
        validation_alias=AliasChoices("poll_interval", "poll_interval_seconds"),
        description="Poll interval (seconds or duration such as '5m')",
    )
    http_timeout_seconds: float = Field(default=10.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    retry_delay_seconds: float = Field(default=5.0, ge=0)
    rate_limit_capacity: int = Field(default=30, gt=0)
    rate_limit_window_seconds: float = Field(default=60.0, gt=0)

    # Notification configuration
    notify_delay_seconds: float = Field(default=0.5, ge=0)
    max_notification_length: int = Field(default=100, ge=4)
    notification_title: str = Field(default="New GitHub Issue")
    notifier_backend: str = Field(
        default="auto",
        description="Notifier backend: auto, macos, linux, windows, log",
    )

    # Logging configuration
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="Log format")

    @field_validator("github_repo_url")
    @classmethod
    def validate_github_repo_url(cls, v: str) -> str:
        """Validate that the repository reference can be parsed."""
        parse_github_url(v)
        return v.strip()

    @field_validator("poll_interval_seconds", mode="before")
    @classmethod
    def parse_poll_interval(cls, v: Any) -> float:
        """Parse the poll interval and enforce the minimum floor."""
        seconds = parse_duration(v)
        return max(seconds, MIN_POLL_INTERVAL_SECONDS)

    @field_validator("notifier_backend")
    @classmethod
    def validate_notifier_backend(cls, v: str) -> str:
        """Validate notifier backend."""
        allowed_backends = {"auto", "macos", "linux", "windows", "log"}
        if v.lower() not in allowed_backends:
            raise ValueError(f"Invalid notifier backend: {v}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        if v.lower() not in {"json", "console"}:
            raise ValueError(f"Invalid log format: {v}")
        return v.lower()

    @property
    def repository(self) -> tuple[str, str]:
        """Get the (owner, repo) pair being monitored."""
        return parse_github_url(self.github_repo_url)

    @property
    def repository_full_name(self) -> str:
        """Get the repository as 'owner/repo'."""
        owner, repo = self.repository
        return f"{owner}/{repo}"

    @property
    def credential(self) -> str | None:
        """Get the API credential, or None for unauthenticated access."""
        return self.github_token or None

    @property
    def polling_config(self) -> PollingConfig:
        """Get polling configuration."""
        return PollingConfig(
            poll_interval_seconds=self.poll_interval_seconds,
            http_timeout_seconds=self.http_timeout_seconds,
            max_retries=self.max_retries,
            retry_delay_seconds=self.retry_delay_seconds,
            rate_limit_capacity=self.rate_limit_capacity,
            rate_limit_window_seconds=self.rate_limit_window_seconds,
            notify_delay_seconds=self.notify_delay_seconds,
            max_notification_length=self.max_notification_length,
            notification_title=self.notification_title,
        )


# Global settings instance - initialized lazily to avoid import-time errors
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings_instance
    if _settings_instance is None:
        try:
            _settings_instance = Settings()  # type: ignore[call-arg]
        except ValidationError as e:
            missing = any(
                error["type"] == "missing" and "github_repo_url" in error["loc"]
                for error in e.errors()
            )
            if missing:
                raise ConfigurationError(
                    "GITHUB_REPO_URL environment variable is not set. "
                    "Please set it to the repository to monitor."
                ) from e
            raise ConfigurationError(
                f"Invalid configuration: {e}", context={"errors": e.error_count()}
            ) from e
    return _settings_instance
