"""
Data model for the GitHub issue notifier.

Issues are decoded from the upstream API with Pydantic; polling state and
notification payloads are plain dataclasses.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# The upstream assigns positive identifiers, so every real issue is above this.
INITIAL_LAST_SEEN_ID = 0


class Issue(BaseModel):
    """An issue as returned by the GitHub issues endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(..., description="Globally unique issue identifier")
    number: int = Field(..., description="Repository-local issue number")
    title: str = Field(..., description="Issue title")
    created_at: datetime = Field(..., description="Creation timestamp")
    html_url: str = Field(..., description="Canonical issue URL")
    state: str = Field(..., description="Issue state (open/closed)")
    pull_request: dict[str, Any] | None = Field(
        default=None, description="Present when the entry is a pull request"
    )

    @property
    def is_pull_request(self) -> bool:
        """Check if this entry is actually a pull request."""
        return self.pull_request is not None


ISSUE_LIST_ADAPTER = TypeAdapter(list[Issue])


@dataclass
class PollState:
    """Mutable polling state owned by the scheduler for the process lifetime."""

    last_seen_id: int = INITIAL_LAST_SEEN_ID
    last_notify_time: float | None = None


@dataclass(frozen=True)
class NotificationPayload:
    """A formatted notification ready to hand to a notifier."""

    title: str
    message: str
    url: str
