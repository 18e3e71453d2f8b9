"""
GitHub API client infrastructure for multigit.

Provides a clean abstraction over the repository listing endpoints:
- One requests session per invocation, authenticated once when a token exists
- Page-at-a-time listing with the next page taken from the Link header
- Handles rate limiting with exponential backoff
"""

import os
import time
import logging
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from urllib.parse import urlparse, parse_qs

import requests

from ..exit_codes import ProviderError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
TOKEN_ENV_VARS = ('MULTIGIT_GITHUB_TOKEN', 'GITHUB_API_TOKEN', 'GITHUB_TOKEN')


@dataclass
class RateLimitStatus:
    """GitHub API rate limit status."""
    remaining: int
    limit: int
    reset_time: int  # Unix timestamp
    used: int

    @property
    def minutes_until_reset(self) -> int:
        """Minutes until rate limit resets."""
        now = int(time.time())
        return max(0, (self.reset_time - now) // 60)

    @property
    def is_low(self) -> bool:
        """Check if rate limit is getting low (< 100 remaining)."""
        return self.remaining < 100


@dataclass
class RepoPage:
    """One page of a repository listing."""
    names: List[str] = field(default_factory=list)
    next_page: int = 0  # 0 means there are no further pages


def token_from_env() -> Optional[str]:
    """First non-empty token among the supported environment variables."""
    for var in TOKEN_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return value
    return None


def next_page_from_links(links: Dict[str, Dict[str, str]]) -> int:
    """Extract the page number of the rel="next" link, or 0."""
    url = links.get('next', {}).get('url')
    if not url:
        return 0
    values = parse_qs(urlparse(url).query).get('page')
    try:
        return int(values[0]) if values else 0
    except ValueError:
        return 0


class GitHubClient:
    """
    GitHub API client with rate limiting.

    Example:
        client = GitHubClient()
        page = client.list_user_repos("octocat", page=1)
        while True:
            print(page.names)
            if not page.next_page:
                break
            page = client.list_user_repos("octocat", page=page.next_page)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token (defaults to MULTIGIT_GITHUB_TOKEN, GITHUB_API_TOKEN or GITHUB_TOKEN)
            api_url: API root, override for GitHub Enterprise
            max_retries: Maximum attempts for rate-limited or failed requests
            base_delay: Base delay for exponential backoff
            max_delay: Maximum delay between retries
            session: Session to use (a new one is created if None)
        """
        self.token = token or token_from_env()
        self.api_url = api_url.rstrip('/')
        self.max_retries = max(1, max_retries)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._rate_limit_status: Optional[RateLimitStatus] = None

        # Credentials are decided once here, never per request
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'multigit',
        })
        if self.token:
            self.session.headers['Authorization'] = f'token {self.token}'

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

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

    def _is_rate_limited(self, response: requests.Response) -> bool:
        if response.status_code == 429:
            return True
        return response.status_code == 403 and response.headers.get('X-RateLimit-Remaining') == '0'

    def _backoff(self, response: Optional[requests.Response], attempt: int) -> None:
        if response is not None:
            reset_time = response.headers.get('X-RateLimit-Reset')
            if reset_time:
                try:
                    wait_time = int(reset_time) - int(time.time())
                except ValueError:
                    wait_time = 0
                if 0 < wait_time < self.max_delay:
                    logger.info(f"Rate limited, waiting {wait_time}s")
                    time.sleep(wait_time)
                    return

        delay = min(self.base_delay * (2 ** attempt), self.max_delay)
        logger.info(f"Retrying in {delay}s (attempt {attempt + 1})")
        time.sleep(delay)

    def _get(self, endpoint: str, params: Dict[str, Any]) -> requests.Response:
        """
        GET an API endpoint, retrying on rate limits and network errors.

        Raises:
            ProviderError: On any non-200 outcome once retries are exhausted
        """
        url = f"{self.api_url}/{endpoint}"
        last_error = None

        for attempt in range(self.max_retries):
            try:
                response = self.session.get(url, params=params, timeout=30)
            except requests.RequestException as e:
                logger.warning(f"GitHub API request failed: {e}")
                last_error = ProviderError(f"GitHub API request failed: {e}")
                if attempt < self.max_retries - 1:
                    self._backoff(None, attempt)
                continue

            self._update_rate_limit_from_headers(response.headers)

            if response.status_code == 200:
                return response

            if self._is_rate_limited(response):
                last_error = ProviderError(
                    f"GitHub API rate limit exceeded for {endpoint}",
                    status_code=response.status_code,
                )
                if attempt < self.max_retries - 1:
                    self._backoff(response, attempt)
                continue

            raise ProviderError(
                f"GitHub API error {response.status_code} for {endpoint}: {_error_message(response)}",
                status_code=response.status_code,
            )

        raise last_error

    def _list_repos(self, endpoint: str, page: int, per_page: int) -> RepoPage:
        response = self._get(endpoint, {'per_page': per_page, 'page': page})
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from {endpoint}: {e}")
        if not isinstance(data, list):
            raise ProviderError(f"Unexpected response from {endpoint}")

        names = [repo['name'] for repo in data if isinstance(repo, dict) and repo.get('name')]
        return RepoPage(names=names, next_page=next_page_from_links(response.links))

    def list_user_repos(self, account: str, page: int = 1, per_page: int = 100) -> RepoPage:
        """
        List one page of repositories owned by a user.

        Args:
            account: User login
            page: 1-based page number
            per_page: Page size (GitHub caps this at 100)

        Returns:
            RepoPage with names and the next page number
        """
        return self._list_repos(f"users/{account}/repos", page, per_page)

    def list_org_repos(self, account: str, page: int = 1, per_page: int = 100) -> RepoPage:
        """List one page of repositories owned by an organization."""
        return self._list_repos(f"orgs/{account}/repos", page, per_page)


def _error_message(response: requests.Response) -> str:
    try:
        return response.json().get('message', response.reason or '')
    except (ValueError, AttributeError):
        return response.reason or ''
