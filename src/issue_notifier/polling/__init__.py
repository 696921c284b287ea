"""
Polling system for the GitHub issue notifier.

This package contains the scheduler loop and the components it drives:
rate limiting, retries, deduplication and cycle metrics.
"""

from .metrics import MetricsCollector, PollingCycleMetrics
from .orchestrator import PollScheduler, SchedulerState
from .rate_limiter import RateLimiter
from .retry import RetryPolicy
from .state_tracker import DedupTracker

__all__ = [
    "DedupTracker",
    "MetricsCollector",
    "PollScheduler",
    "PollingCycleMetrics",
    "RateLimiter",
    "RetryPolicy",
    "SchedulerState",
]
