"""
Metrics collection for the polling system.

This module tracks per-cycle counts and process-lifetime totals for
polling operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class PollingCycleMetrics:
    """Metrics for a single polling cycle."""

    cycle_id: str
    start_time: datetime
    end_time: datetime | None = None
    issues_fetched: int = 0
    issues_new: int = 0
    notifications_sent: int = 0
    notifications_failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Get cycle duration in seconds."""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    @property
    def succeeded(self) -> bool:
        """Check if the cycle completed without errors."""
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "cycle_id": self.cycle_id,
            "start_time": self.start_time.isoformat(),
            "duration_seconds": self.duration_seconds,
            "issues_fetched": self.issues_fetched,
            "issues_new": self.issues_new,
            "notifications_sent": self.notifications_sent,
            "notifications_failed": self.notifications_failed,
            "errors": len(self.errors),
        }


class MetricsCollector:
    """
    Metrics collector for the polling system.

    Keeps running totals and the most recent cycles.
    """

    def __init__(self, max_history: int = 50) -> None:
        self.start_time = datetime.now()
        self.max_history = max_history
        self.cycle_history: list[PollingCycleMetrics] = []
        self.current_cycle: PollingCycleMetrics | None = None

        # Global counters
        self.total_cycles = 0
        self.failed_cycles = 0
        self.total_issues_fetched = 0
        self.total_notifications_sent = 0
        self.total_notifications_failed = 0

    def start_cycle(self, cycle_id: str) -> PollingCycleMetrics:
        """Start a new polling cycle."""
        if self.current_cycle and not self.current_cycle.end_time:
            # End previous cycle if it wasn't properly closed
            self.end_cycle()

        self.current_cycle = PollingCycleMetrics(
            cycle_id=cycle_id, start_time=datetime.now()
        )
        return self.current_cycle

    def end_cycle(self) -> PollingCycleMetrics | None:
        """End the current polling cycle."""
        if not self.current_cycle:
            return None

        cycle = self.current_cycle
        cycle.end_time = datetime.now()

        self.total_cycles += 1
        if cycle.errors:
            self.failed_cycles += 1
        self.total_issues_fetched += cycle.issues_fetched
        self.total_notifications_sent += cycle.notifications_sent
        self.total_notifications_failed += cycle.notifications_failed

        self.cycle_history.append(cycle)
        if len(self.cycle_history) > self.max_history:
            self.cycle_history.pop(0)

        self.current_cycle = None

        logger.debug(
            "Completed metrics collection for cycle",
            cycle_id=cycle.cycle_id,
            duration=cycle.duration_seconds,
            notifications_sent=cycle.notifications_sent,
        )

        return cycle

    def get_global_summary(self) -> dict[str, Any]:
        """Get global polling metrics summary."""
        uptime_seconds = (datetime.now() - self.start_time).total_seconds()
        return {
            "uptime_seconds": uptime_seconds,
            "total_cycles": self.total_cycles,
            "failed_cycles": self.failed_cycles,
            "total_issues_fetched": self.total_issues_fetched,
            "total_notifications_sent": self.total_notifications_sent,
            "total_notifications_failed": self.total_notifications_failed,
            "last_cycle_time": (
                self.cycle_history[-1].end_time.isoformat()
                if self.cycle_history and self.cycle_history[-1].end_time
                else None
            ),
        }
