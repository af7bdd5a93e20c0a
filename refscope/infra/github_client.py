"""
GitHub API client infrastructure for refscope.

Provides a clean abstraction over the GitHub REST API for listing refs:
- Token from argument or REFSCOPE_GITHUB_TOKEN / GITHUB_TOKEN
- Follows Link pagination for branch and tag lists
- Handles rate limiting with exponential backoff
- Raises GitHubAPIError for anything but a successful listing
"""

import os
import time
import logging
from dataclasses import dataclass
from typing import Optional, List, Dict, Any
from datetime import datetime

import requests

from ..exit_codes import GitHubAPIError, GitHubResponseError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def reset_datetime(self) -> datetime:
        """Get reset time as datetime."""
        return datetime.fromtimestamp(self.reset_time)

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 100 remaining)."""
        return self.remaining < 100


class GitHubClient:
    """
    GitHub API client with rate limiting.

    Example:
        client = GitHubClient()
        for branch in client.list_branches("conwnet", "github1s"):
            print(branch["name"])
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        max_pages: int = 10,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token (defaults to REFSCOPE_GITHUB_TOKEN or GITHUB_TOKEN env var)
            api_url: Base URL of the REST API
            max_retries: Maximum retry attempts for rate-limited or failed requests
            base_delay: Base delay for exponential backoff
            max_delay: Maximum delay between retries
            max_pages: Maximum pages followed for a single listing
            timeout: Per-request timeout in seconds
            session: requests session to reuse (one is created if omitted)
        """
        self.token = token or os.environ.get('REFSCOPE_GITHUB_TOKEN') or os.environ.get('GITHUB_TOKEN')
        self.api_url = api_url.rstrip('/')
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.max_pages = max_pages
        self.timeout = timeout
        self.session = session or requests.Session()
        self._rate_limit_status: Optional[RateLimitStatus] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'GitHubClient':
        """Create a client from the ``github`` section of a loaded config."""
        github = config.get('github', {})
        return cls(
            token=github.get('token') or None,
            api_url=github.get('api_url') or DEFAULT_API_URL,
            max_retries=int(github.get('max_retries', 3)),
            max_delay=float(github.get('max_delay_seconds', 60)),
            max_pages=int(github.get('max_pages', 10)),
            timeout=float(github.get('timeout_seconds', 30)),
        )

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Rate limit status seen on the last API response, if any."""
        return self._rate_limit_status

    def _headers(self) -> Dict[str, str]:
        headers = {
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'refscope'
        }
        if self.token:
            headers['Authorization'] = f'token {self.token}'
        return headers

    def _update_rate_limit_from_headers(self, headers) -> None:
        """Update rate limit status from response headers."""
        try:
            remaining = int(headers.get('X-RateLimit-Remaining', -1))
            limit = int(headers.get('X-RateLimit-Limit', -1))
            reset_time = int(headers.get('X-RateLimit-Reset', 0))
            used = int(headers.get('X-RateLimit-Used', 0))
        except (ValueError, TypeError):
            return

        if remaining >= 0 and limit >= 0:
            self._rate_limit_status = RateLimitStatus(
                remaining=remaining,
                limit=limit,
                reset_time=reset_time,
                used=used
            )

            if self._rate_limit_status.is_low:
                logger.warning(
                    f"GitHub API rate limit low: {remaining}/{limit} remaining, "
                    f"resets in {self._rate_limit_status.minutes_until_reset} minutes"
                )

    def _backoff(self, attempt: int) -> float:
        return min(self.base_delay * (2 ** attempt), self.max_delay)

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """GET a URL, retrying on rate limiting and transport errors."""
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                response = self.session.get(url, headers=self._headers(), params=params, timeout=self.timeout)
            except requests.RequestException as e:
                logger.warning(f"GitHub API request failed: {e}")
                last_error = e
                if attempt < self.max_retries - 1:
                    time.sleep(self._backoff(attempt))
                continue

            self._update_rate_limit_from_headers(response.headers)

            if response.status_code == 200:
                return response

            if response.status_code == 403 and response.headers.get('X-RateLimit-Remaining') == '0':
                if attempt == self.max_retries - 1:
                    break
                reset_time = response.headers.get('X-RateLimit-Reset')
                wait_time = int(reset_time) - int(time.time()) if reset_time else 0
                if 0 < wait_time < self.max_delay:
                    logger.info(f"Rate limited, waiting {wait_time}s")
                    time.sleep(wait_time)
                else:
                    delay = self._backoff(attempt)
                    logger.info(f"Rate limited, waiting {delay}s (attempt {attempt + 1})")
                    time.sleep(delay)
                continue

            if response.status_code == 404:
                raise GitHubAPIError(f"GitHub resource not found: {url}", status_code=404)

            raise GitHubAPIError(
                f"GitHub API error {response.status_code} for {url}",
                status_code=response.status_code,
            )

        if last_error is not None:
            raise GitHubAPIError(f"GitHub API request failed for {url}: {last_error}") from last_error
        raise GitHubAPIError(f"GitHub API rate limit exceeded for {url}", status_code=403)

    def _list(self, endpoint: str) -> List[Dict[str, Any]]:
        """Collect every item of a paginated list endpoint."""
        url: Optional[str] = f"{self.api_url}/{endpoint}"
        params: Optional[Dict[str, Any]] = {'per_page': PER_PAGE}
        items: List[Dict[str, Any]] = []
        pages = 0

        while url and pages < self.max_pages:
            response = self._get(url, params=params)
            try:
                data = response.json()
            except ValueError as e:
                raise GitHubResponseError(f"Malformed GitHub response for {url}: {e}") from e
            if not isinstance(data, list):
                raise GitHubResponseError(f"Expected a list from {url}, got {type(data).__name__}")
            items.extend(data)
            pages += 1
            # The next link already carries the query string
            url = response.links.get('next', {}).get('url')
            params = None

        if url:
            logger.warning(f"Stopped listing {endpoint} after {pages} pages ({len(items)} items)")
        return items

    def list_branches(self, owner: str, name: str) -> List[Dict[str, Any]]:
        """
        List repository branches.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            Raw branch dictionaries as returned by the API
        """
        logger.info(f"Fetching branches for {owner}/{name}")
        return self._list(f"repos/{owner}/{name}/branches")

    def list_tags(self, owner: str, name: str) -> List[Dict[str, Any]]:
        """
        List repository tags.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            Raw tag dictionaries as returned by the API
        """
        logger.info(f"Fetching tags for {owner}/{name}")
        return self._list(f"repos/{owner}/{name}/tags")
