"""
Linux notifier.

Uses notify-send from libnotify. The link is appended to the message body
since notify-send cannot open URLs on click. When notify-send is missing or
fails, the notification is written to the log instead.
"""

import structlog

from ..exceptions import SinkError
from .base import Notifier
from .log import LogNotifier

logger = structlog.get_logger(__name__)


class LinuxNotifier(Notifier):
    """Desktop notifications for Linux via notify-send, falling back to the log."""

    name = "linux"

    def __init__(self, timeout: float = 10.0):
        super().__init__(timeout)
        self.fallback = LogNotifier(timeout)

    async def notify(self, title: str, message: str, url: str) -> None:
        try:
            await self.run_command(["notify-send", title, f"{message}\n{url}"])
        except SinkError as e:
            logger.warning(
                "notify-send failed, falling back to log output", error=str(e)
            )
            await self.fallback.notify(title, message, url)
