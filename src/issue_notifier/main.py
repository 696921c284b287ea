"""
Application entry point for the GitHub issue notifier.

This module configures logging, wires the polling components together and
runs the scheduler until the process receives SIGINT or SIGTERM.
"""

import asyncio
import logging
import signal
import sys

import structlog

from .config import Settings, get_settings
from .exceptions import ConfigurationError
from .github_client import IssueSource
from .notifications.base import Notifier
from .notifications.dispatcher import NotificationDispatcher
from .notifications.factory import NotifierFactory
from .polling.orchestrator import PollScheduler
from .polling.rate_limiter import RateLimiter
from .polling.retry import RetryPolicy
from .polling.state_tracker import DedupTracker

logger = structlog.get_logger(__name__)


def setup_logging(settings: Settings) -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level), format="%(message)s"
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.log_format == "json"
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class IssueNotifierApp:
    """Main application class."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the application."""
        self.settings = settings
        self.notifier: Notifier | None = None
        self.issue_source: IssueSource | None = None
        self.scheduler: PollScheduler | None = None
        self._stop_task: asyncio.Task[None] | None = None

    async def initialize(self) -> None:
        """Initialize all application components."""
        if self.settings is None:
            self.settings = get_settings()

        owner, repo = self.settings.repository
        config = self.settings.polling_config

        if self.settings.credential is None:
            logger.warning(
                "GITHUB_TOKEN not set, using unauthenticated requests "
                "with a lower upstream rate limit",
                repository=self.settings.repository_full_name,
            )

        self.notifier = NotifierFactory.create_notifier(self.settings.notifier_backend)

        self.issue_source = IssueSource(
            rate_limiter=RateLimiter(
                capacity=config.rate_limit_capacity,
                window_seconds=config.rate_limit_window_seconds,
            ),
            retry_policy=RetryPolicy(
                max_retries=config.max_retries,
                retry_delay=config.retry_delay_seconds,
            ),
            api_url=self.settings.github_api_url,
            timeout=config.http_timeout_seconds,
        )

        dispatcher = NotificationDispatcher(
            notifier=self.notifier,
            notify_delay=config.notify_delay_seconds,
            max_notification_length=config.max_notification_length,
            title=config.notification_title,
        )

        self.scheduler = PollScheduler(
            source=self.issue_source,
            tracker=DedupTracker(),
            dispatcher=dispatcher,
            owner=owner,
            repo=repo,
            poll_interval=config.poll_interval_seconds,
            credential=self.settings.credential,
        )

        logger.info(
            "GitHub issue notifier initialized",
            repository=self.settings.repository_full_name,
            notifier=self.notifier.name,
            poll_interval_seconds=config.poll_interval_seconds,
        )

    async def start(self) -> None:
        """Run the scheduler until it is stopped."""
        if not self.scheduler:
            raise RuntimeError("Application not initialized")

        await self.scheduler.start_polling()

    async def stop(self) -> None:
        """Request the scheduler to stop."""
        if self.scheduler:
            await self.scheduler.stop_polling()

    async def close(self) -> None:
        """Release the HTTP client."""
        if self.issue_source:
            await self.issue_source.aclose()
            self.issue_source = None

    def _handle_signal(self, signum: int) -> None:
        logger.info(
            "Received signal, initiating shutdown", signal=signal.Signals(signum).name
        )
        self._stop_task = asyncio.create_task(self.stop())

    def setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, self._handle_signal, signum)
            except NotImplementedError:
                # Windows event loops; Ctrl+C arrives as KeyboardInterrupt.
                logger.debug("Signal handlers not supported on this platform")
                return


async def main() -> None:
    """
    Main entry point.

    Settings are loaded before logging is configured, so a configuration
    error is reported with structlog's default console output rather than
    the configured LOG_FORMAT.
    """
    app = IssueNotifierApp()

    try:
        settings = get_settings()
        setup_logging(settings)
        app.settings = settings

        await app.initialize()
        app.setup_signal_handlers()
        await app.start()
    except ConfigurationError as e:
        logger.error("Error initializing service", error=str(e), **e.context)
        sys.exit(1)
    finally:
        await app.close()
        logger.info("Application shutdown complete")


def run() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


if __name__ == "__main__":
    run()
