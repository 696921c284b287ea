"""
Custom exceptions for the GitHub issue notifier.

This module defines the error taxonomy shared by the fetch, dispatch and
scheduling components. Every error carries a stable ``code`` and an optional
``context`` mapping for structured logging.
"""

from typing import Any


class IssueNotifierError(Exception):
    """Base exception for GitHub issue notifier errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code or "ISSUE_NOTIFIER_ERROR"
        self.context = context or {}


class ConfigurationError(IssueNotifierError):
    """Exception for configuration related errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "CONFIGURATION_ERROR", context)


class AuthenticationError(IssueNotifierError):
    """Raised when the upstream API rejects the configured credential."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "AUTHENTICATION_ERROR", context)


class TransientFetchError(IssueNotifierError):
    """Retryable fetch failure: no response, or a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "TRANSIENT_FETCH_ERROR", context)
        self.status_code = status_code


class FetchExhaustedError(IssueNotifierError):
    """Raised when every attempt allowed by the retry policy has failed."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_error: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "FETCH_EXHAUSTED", context)
        self.attempts = attempts
        self.last_error = last_error


class DecodeError(IssueNotifierError):
    """Raised when a response body does not match the expected schema."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "DECODE_ERROR", context)


class SinkError(IssueNotifierError):
    """Exception for notification display failures."""

    def __init__(
        self,
        message: str,
        notifier: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, "SINK_ERROR", context)
        self.notifier = notifier


class RateLimitCancelled(IssueNotifierError):
    """Raised when a rate limit wait is abandoned because shutdown began."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message, "RATE_LIMIT_CANCELLED", context)
