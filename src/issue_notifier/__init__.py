"""
GitHub Issue Notifier

Polls a GitHub repository for newly opened issues and shows a desktop
notification for each of them.
"""

__version__ = "0.1.0"

from .config import Settings
from .exceptions import IssueNotifierError
from .github_client import IssueSource
from .models import Issue, NotificationPayload, PollState
from .notifications import NotificationDispatcher, Notifier, NotifierFactory
from .polling import DedupTracker, PollScheduler, RateLimiter, RetryPolicy

__all__ = [
    "DedupTracker",
    "Issue",
    "IssueNotifierError",
    "IssueSource",
    "NotificationDispatcher",
    "NotificationPayload",
    "Notifier",
    "NotifierFactory",
    "PollScheduler",
    "PollState",
    "RateLimiter",
    "RetryPolicy",
    "Settings",
]
