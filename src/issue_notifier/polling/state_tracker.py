"""
Polling state tracker for the GitHub issue notifier.

This module decides which fetched issues are new and advances the
"last seen" watermark once an issue has been notified.
"""

import structlog

from ..models import Issue, PollState

logger = structlog.get_logger(__name__)


class DedupTracker:
    """
    Tracks the highest issue identifier already notified.

    The issues endpoint orders results by creation time, which does not
    strictly follow identifier order, so the watermark only ever moves to
    ``max(last_seen_id, issue.id)``.
    """

    def is_new(self, issue: Issue, state: PollState) -> bool:
        """Check if an issue has not been notified yet."""
        return issue.id > state.last_seen_id

    def filter_new(self, issues: list[Issue], state: PollState) -> list[Issue]:
        """
        Select the candidate issues of a batch against the current watermark.

        The watermark moves while a batch is dispatched, so :meth:`is_new`
        must still be checked right before each issue is dispatched.

        Args:
            issues: Issues in fetch order
            state: Current polling state

        Returns:
            New issues, in fetch order
        """
        new_issues = [issue for issue in issues if self.is_new(issue, state)]
        logger.debug(
            "Filtered issues",
            total=len(issues),
            new=len(new_issues),
            last_seen_id=state.last_seen_id,
        )
        return new_issues

    def advance(self, issue: Issue, state: PollState) -> None:
        """Move the watermark past a notified issue without ever regressing."""
        if issue.id > state.last_seen_id:
            state.last_seen_id = issue.id
