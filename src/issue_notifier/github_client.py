"""
GitHub API client for the GitHub issue notifier.

This module fetches the newest open issues of a repository through the
GitHub REST API, with rate limiting, bounded retries and response
validation.
"""

import asyncio
from types import TracebackType
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from .exceptions import AuthenticationError, DecodeError, TransientFetchError
from .models import ISSUE_LIST_ADAPTER, Issue
from .polling.rate_limiter import RateLimiter
from .polling.retry import RetryPolicy

logger = structlog.get_logger(__name__)

USER_AGENT = "GitHub-Issue-Notifier"
ISSUES_PAGE_SIZE = 10


class IssueSource:
    """
    Fetches the latest open issues of a repository.

    Every fetch takes a token from the rate limiter and then issues a single
    GET request under the retry policy. Pull requests, which the issues
    endpoint also returns, are filtered out.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        retry_policy: RetryPolicy,
        api_url: str = "https://api.github.com",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the issue source.

        Args:
            rate_limiter: Token bucket bounding outbound calls
            retry_policy: Retry policy wrapping each request
            api_url: GitHub API base URL
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.rate_limiter = rate_limiter
        self.retry_policy = retry_policy
        self.api_url = api_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "IssueSource":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    @staticmethod
    def _headers(credential: str | None) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if credential:
            headers["Authorization"] = f"Bearer {credential}"
        return headers

    async def fetch(
        self,
        owner: str,
        repo: str,
        credential: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> list[Issue]:
        """
        Fetch the newest open issues of a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            credential: Optional API token
            cancel_event: Event that abandons the rate limit wait when set

        Returns:
            Issues in the order returned by the API (newest first)
        """
        await self.rate_limiter.acquire(cancel_event)

        repository = f"{owner}/{repo}"

        async def attempt() -> list[Issue]:
            return await self._fetch_once(owner, repo, credential)

        issues = await self.retry_policy.run(
            attempt, description=f"fetch issues for {repository}"
        )

        filtered = [issue for issue in issues if not issue.is_pull_request]

        logger.debug(
            "Fetched issues",
            repository=repository,
            total=len(issues),
            pull_requests_skipped=len(issues) - len(filtered),
        )

        return filtered

    async def _fetch_once(
        self, owner: str, repo: str, credential: str | None
    ) -> list[Issue]:
        """Perform a single request and classify its outcome."""
        repository = f"{owner}/{repo}"
        params = {
            "state": "open",
            "sort": "created",
            "direction": "desc",
            "per_page": str(ISSUES_PAGE_SIZE),
        }

        try:
            response = await self._client.get(
                f"/repos/{owner}/{repo}/issues",
                params=params,
                headers=self._headers(credential),
            )
        except httpx.DecodingError as e:
            raise DecodeError(
                f"Error decoding response: {e}", context={"repository": repository}
            ) from e
        except httpx.RequestError as e:
            # Transport failures and redirect loops
            raise TransientFetchError(
                f"Error fetching issues: {e}", context={"repository": repository}
            ) from e

        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise AuthenticationError(
                "GitHub API authentication failed. Please check your token",
                context={"repository": repository},
            )

        if not response.is_success:
            raise TransientFetchError(
                f"GitHub API returned status code: {response.status_code}",
                status_code=response.status_code,
                context={"repository": repository},
            )

        return self._decode(response, repository)

    @staticmethod
    def _decode(response: httpx.Response, repository: str) -> list[Issue]:
        try:
            payload: Any = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Error decoding response: {e}", context={"repository": repository}
            ) from e

        if not isinstance(payload, list):
            raise DecodeError(
                f"Expected a list of issues, got {type(payload).__name__}",
                context={"repository": repository},
            )

        try:
            return ISSUE_LIST_ADAPTER.validate_python(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Error decoding response: {e}",
                context={"repository": repository, "errors": e.error_count()},
            ) from e
