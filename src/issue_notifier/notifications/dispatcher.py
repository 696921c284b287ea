"""
Notification dispatcher for the GitHub issue notifier.

This module formats notifications for new issues and hands them to the
configured notifier, keeping a minimum delay between consecutive
notifications to avoid flooding the desktop.
"""

import asyncio
import time

import structlog

from ..exceptions import SinkError
from ..models import Issue, NotificationPayload, PollState
from .base import Notifier

logger = structlog.get_logger(__name__)

ELLIPSIS = "..."


class NotificationDispatcher:
    """
    Formats and sends one notification per issue.

    Dispatch is expected to be serialized by the caller: the flood
    prevention wait blocks the dispatching task rather than queueing.
    """

    def __init__(
        self,
        notifier: Notifier,
        notify_delay: float = 0.5,
        max_notification_length: int = 100,
        title: str = "New GitHub Issue",
    ):
        """
        Initialize the dispatcher.

        Args:
            notifier: Sink that displays notifications
            notify_delay: Minimum seconds between notifications
            max_notification_length: Maximum message length in characters
            title: Title used for every notification
        """
        if max_notification_length <= len(ELLIPSIS):
            raise ValueError(
                "max_notification_length must be greater than "
                f"{len(ELLIPSIS)}, got {max_notification_length}"
            )
        if notify_delay < 0:
            raise ValueError(f"notify_delay must not be negative, got {notify_delay}")

        self.notifier = notifier
        self.notify_delay = notify_delay
        self.max_notification_length = max_notification_length
        self.title = title

    def build_payload(self, issue: Issue) -> NotificationPayload:
        """Build the notification payload for an issue."""
        message = f"#{issue.number}: {issue.title}"
        if len(message) > self.max_notification_length:
            message = message[: self.max_notification_length - len(ELLIPSIS)] + ELLIPSIS
        return NotificationPayload(title=self.title, message=message, url=issue.html_url)

    async def _wait_for_slot(self, state: PollState) -> None:
        if state.last_notify_time is None:
            return

        while True:
            elapsed = time.monotonic() - state.last_notify_time
            remaining = self.notify_delay - elapsed
            if remaining <= 0:
                return
            logger.debug("Throttling notification", wait_seconds=round(remaining, 3))
            await asyncio.sleep(remaining)

    async def dispatch(self, issue: Issue, state: PollState) -> NotificationPayload:
        """
        Send a notification for an issue.

        Args:
            issue: Issue to notify about
            state: Polling state holding the last notification time

        Returns:
            The payload that was handed to the notifier

        Raises:
            SinkError: If the notifier failed to display the notification
        """
        payload = self.build_payload(issue)

        await self._wait_for_slot(state)

        try:
            await self.notifier.notify(payload.title, payload.message, payload.url)
        except SinkError:
            raise
        except Exception as e:
            raise SinkError(
                f"Notifier failed: {e}",
                notifier=self.notifier.name,
                context={"issue_number": issue.number},
            ) from e
        finally:
            state.last_notify_time = time.monotonic()

        logger.info(
            "Sent notification for new issue",
            issue_number=issue.number,
            issue_id=issue.id,
            title=issue.title,
        )

        return payload
