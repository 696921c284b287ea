"""
Polling scheduler for the GitHub issue notifier.

This module drives the fetch, filter and dispatch cycle: once immediately
at startup and then on a fixed-rate timer, until a stop is requested or the
polling task is cancelled.
"""

import asyncio
from enum import Enum
from typing import TYPE_CHECKING, Any

import structlog

from ..exceptions import IssueNotifierError, RateLimitCancelled, SinkError
from ..models import PollState
from ..notifications.dispatcher import NotificationDispatcher
from .metrics import MetricsCollector, PollingCycleMetrics
from .state_tracker import DedupTracker

if TYPE_CHECKING:
    from ..github_client import IssueSource

logger = structlog.get_logger(__name__)


class SchedulerState(str, Enum):
    """Lifecycle states of the polling scheduler."""

    IDLE = "idle"
    FETCHING = "fetching"
    FILTERING = "filtering"
    DISPATCHING = "dispatching"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class PollScheduler:
    """
    Polls one repository for new issues and notifies about each of them.

    All mutation of :class:`PollState` happens on the single polling task,
    and cycles never overlap, so the state needs no lock.
    """

    def __init__(
        self,
        source: "IssueSource",
        tracker: DedupTracker,
        dispatcher: NotificationDispatcher,
        owner: str,
        repo: str,
        poll_interval: float,
        credential: str | None = None,
        state: PollState | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the polling scheduler.

        Args:
            source: Issue source used to fetch issues
            tracker: Dedup tracker deciding which issues are new
            dispatcher: Notification dispatcher
            owner: Repository owner
            repo: Repository name
            poll_interval: Seconds between polling cycles
            credential: Optional API token
            state: Initial polling state
            metrics: Metrics collector
        """
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")

        self.source = source
        self.tracker = tracker
        self.dispatcher = dispatcher
        self.owner = owner
        self.repo = repo
        self.poll_interval = poll_interval
        self.credential = credential
        self.state = state or PollState()
        self.metrics = metrics or MetricsCollector()

        self.scheduler_state = SchedulerState.IDLE
        self.is_running_flag = False
        self._stop_event = asyncio.Event()
        self._cycle_count = 0

    @property
    def repository(self) -> str:
        """Get the monitored repository as 'owner/repo'."""
        return f"{self.owner}/{self.repo}"

    def is_running(self) -> bool:
        """Check if polling is currently active."""
        return self.is_running_flag

    def _set_state(self, new_state: SchedulerState) -> None:
        if new_state != self.scheduler_state:
            logger.debug(
                "Scheduler state changed",
                previous=self.scheduler_state.value,
                current=new_state.value,
            )
            self.scheduler_state = new_state

    async def start_polling(self) -> None:
        """
        Run the polling loop until stopped.

        The first cycle runs immediately; later cycles follow the timer.
        """
        if self.is_running_flag:
            logger.warning("Polling already running")
            return
        if self.scheduler_state == SchedulerState.TERMINATED:
            logger.warning("Polling scheduler already terminated")
            return

        self.is_running_flag = True
        logger.info(
            "Starting GitHub issues notification service",
            repository=self.repository,
            poll_interval_seconds=self.poll_interval,
            authenticated=self.credential is not None,
        )

        try:
            await self._polling_loop()
        except asyncio.CancelledError:
            self._set_state(SchedulerState.SHUTTING_DOWN)
            logger.info("Polling cancelled")
        finally:
            self.is_running_flag = False
            self._set_state(SchedulerState.TERMINATED)
            logger.info(
                "Polling scheduler stopped",
                repository=self.repository,
                last_seen_id=self.state.last_seen_id,
                **self.metrics.get_global_summary(),
            )

    async def stop_polling(self) -> None:
        """Request the polling loop to stop at its next wait point."""
        if self._stop_event.is_set():
            return

        logger.info("Shutdown requested, stopping polling scheduler")
        self._stop_event.set()

    async def _polling_loop(self) -> None:
        """Main polling loop."""
        loop = asyncio.get_running_loop()

        if self._stop_event.is_set():
            self._set_state(SchedulerState.SHUTTING_DOWN)
            return

        next_tick = loop.time() + self.poll_interval
        await self._run_cycle_safely()

        while True:
            self._set_state(SchedulerState.IDLE)

            delay = next_tick - loop.time()
            if await self._wait_for_stop(delay):
                self._set_state(SchedulerState.SHUTTING_DOWN)
                return

            next_tick = self._next_tick_after(next_tick, loop.time())
            await self._run_cycle_safely()

    async def _wait_for_stop(self, delay: float) -> bool:
        """
        Wait for the next tick or a stop request, whichever comes first.

        Returns:
            True if a stop was requested
        """
        if self._stop_event.is_set():
            return True
        if delay <= 0:
            return False

        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return False
        return True

    def _next_tick_after(self, tick: float, now: float) -> float:
        """Advance a tick deadline past now, dropping ticks missed by a slow cycle."""
        tick += self.poll_interval
        dropped = 0
        while tick <= now:
            tick += self.poll_interval
            dropped += 1
        if dropped:
            logger.debug("Dropped missed polling ticks", dropped=dropped)
        return tick

    async def _run_cycle_safely(self) -> None:
        try:
            await self.run_cycle()
        except Exception as e:
            logger.error(
                "Unexpected error in polling cycle",
                repository=self.repository,
                error=str(e),
                exc_info=True,
            )

    async def run_cycle(self) -> PollingCycleMetrics:
        """
        Run a single fetch, filter and dispatch cycle.

        Fetch failures abort the cycle; a failed notification only skips
        that issue.

        Returns:
            Metrics for the cycle
        """
        self._cycle_count += 1
        cycle = self.metrics.start_cycle(f"cycle-{self._cycle_count}")

        logger.debug(
            "Polling cycle started",
            cycle_id=cycle.cycle_id,
            repository=self.repository,
        )

        try:
            self._set_state(SchedulerState.FETCHING)
            try:
                issues = await self.source.fetch(
                    self.owner,
                    self.repo,
                    self.credential,
                    cancel_event=self._stop_event,
                )
            except RateLimitCancelled as e:
                logger.info("Polling cycle aborted by shutdown", cycle_id=cycle.cycle_id)
                cycle.errors.append(f"{e.code}: {e}")
                return cycle
            except IssueNotifierError as e:
                logger.error(
                    "Error checking for new issues",
                    repository=self.repository,
                    error=str(e),
                    error_code=e.code,
                )
                cycle.errors.append(f"{e.code}: {e}")
                return cycle

            cycle.issues_fetched = len(issues)

            self._set_state(SchedulerState.FILTERING)
            candidates = self.tracker.filter_new(issues, self.state)

            self._set_state(SchedulerState.DISPATCHING)
            for issue in candidates:
                # Fetch order is by creation time, not id; an earlier issue in
                # this batch may already have moved the watermark past this one.
                if not self.tracker.is_new(issue, self.state):
                    logger.debug(
                        "Skipping issue behind watermark",
                        issue_id=issue.id,
                        last_seen_id=self.state.last_seen_id,
                    )
                    continue

                cycle.issues_new += 1
                try:
                    await self.dispatcher.dispatch(issue, self.state)
                except SinkError as e:
                    logger.error(
                        "Error sending notification for issue",
                        issue_number=issue.number,
                        issue_id=issue.id,
                        error=str(e),
                    )
                    cycle.notifications_failed += 1
                    continue

                self.tracker.advance(issue, self.state)
                cycle.notifications_sent += 1

            return cycle

        finally:
            self._set_state(SchedulerState.IDLE)
            self.metrics.end_cycle()
            logger.info(
                "Polling cycle completed",
                repository=self.repository,
                last_seen_id=self.state.last_seen_id,
                **cycle.to_dict(),
            )

    def get_status(self) -> dict[str, Any]:
        """Get scheduler status for monitoring."""
        return {
            "repository": self.repository,
            "state": self.scheduler_state.value,
            "running": self.is_running_flag,
            "last_seen_id": self.state.last_seen_id,
            "poll_interval_seconds": self.poll_interval,
            "metrics": self.metrics.get_global_summary(),
        }
