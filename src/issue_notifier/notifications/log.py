"""
Log notifier.

Writes notifications to the structured log instead of the desktop, for
headless machines and platforms without a supported notifier.
"""

import structlog

from .base import Notifier

logger = structlog.get_logger(__name__)


class LogNotifier(Notifier):
    """Notifier that only logs."""

    name = "log"

    async def notify(self, title: str, message: str, url: str) -> None:
        logger.info(title, message=message, url=url)
