"""
macOS notifier.

Uses terminal-notifier, which supports opening a URL when the notification
is clicked.
"""

from ..exceptions import SinkError
from .base import Notifier


class MacOSNotifier(Notifier):
    """Desktop notifications for macOS via terminal-notifier."""

    name = "macos"

    async def notify(self, title: str, message: str, url: str) -> None:
        cmd = [
            "terminal-notifier",
            "-title",
            title,
            "-message",
            message,
            "-open",
            url,
            "-sound",
            "default",
        ]
        try:
            await self.run_command(cmd)
        except SinkError as e:
            if e.context.get("missing"):
                raise SinkError(
                    "terminal-notifier not installed. "
                    "Please install with: brew install terminal-notifier",
                    notifier=self.name,
                ) from e
            raise
