"""
Pytest configuration and fixtures for GitHub issue notifier tests.
"""

import time
from collections.abc import Callable
from typing import Any

import pytest

from issue_notifier.config import Settings
from issue_notifier.exceptions import SinkError
from issue_notifier.models import Issue
from issue_notifier.notifications.base import Notifier


class RecordingNotifier(Notifier):
    """Notifier that records calls instead of displaying anything."""

    name = "recording"

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict[str, Any]] = []
        self.failing_numbers: set[int] = set()

    async def notify(self, title: str, message: str, url: str) -> None:
        self.calls.append(
            {
                "title": title,
                "message": message,
                "url": url,
                "time": time.monotonic(),
            }
        )
        for number in self.failing_numbers:
            if message.startswith(f"#{number}:"):
                raise SinkError("Display failed", notifier=self.name)

    @property
    def messages(self) -> list[str]:
        return [call["message"] for call in self.calls]


@pytest.fixture
def mock_settings() -> Settings:
    """Settings for testing, isolated from any local .env file."""
    return Settings(
        github_repo_url="https://github.com/octo/widgets",
        github_token="test-token",
        notifier_backend="log",
        log_level="DEBUG",
        _env_file=None,
    )


@pytest.fixture
def recording_notifier() -> RecordingNotifier:
    """Notifier that records every notification."""
    return RecordingNotifier()


@pytest.fixture
def make_issue_payload() -> Callable[..., dict[str, Any]]:
    """Factory for issue objects as returned by the GitHub API."""

    def _make(
        issue_id: int,
        number: int | None = None,
        title: str | None = None,
        pull_request: bool = False,
    ) -> dict[str, Any]:
        number = number if number is not None else issue_id
        payload: dict[str, Any] = {
            "id": issue_id,
            "number": number,
            "title": title if title is not None else f"Issue {number}",
            "created_at": "2024-01-15T10:00:00Z",
            "html_url": f"https://github.com/octo/widgets/issues/{number}",
            "state": "open",
            "user": {"login": "octocat"},
            "labels": [],
        }
        if pull_request:
            payload["pull_request"] = {
                "url": f"https://api.github.com/repos/octo/widgets/pulls/{number}"
            }
        return payload

    return _make


@pytest.fixture
def make_issue(
    make_issue_payload: Callable[..., dict[str, Any]],
) -> Callable[..., Issue]:
    """Factory for decoded issues."""

    def _make(issue_id: int, number: int | None = None, title: str | None = None) -> Issue:
        return Issue.model_validate(make_issue_payload(issue_id, number, title))

    return _make
