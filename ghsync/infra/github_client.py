"""
GitHub API client infrastructure for ghsync.

Provides a clean abstraction over the GitHub REST listing endpoints:
- Bearer-token authentication on a shared requests session
- Page-by-page iteration that stops at the first empty page
- Rate limit tracking from response headers (warn only, never retry)
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Generator, List, Optional

import requests

from ..domain.repository import RepositoryDescriptor
from ..exit_codes import RemoteProtocolError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_PER_PAGE = 100


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


class GitHubClient:
    """
    GitHub API client for repository discovery.

    Example:
        client = GitHubClient(token)
        for batch in client.list_org_repos("acme"):
            for repo in batch:
                print(repo.full_name)
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        per_page: int = DEFAULT_PER_PAGE,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize GitHubClient.

        Args:
            token: Opaque bearer credential
            api_url: API root (override for GitHub Enterprise)
            per_page: Fixed page size for listing requests
            timeout: Per-request timeout in seconds
            session: requests session to use (created if None)
        """
        self.token = token
        self.api_url = api_url.rstrip('/')
        self.per_page = per_page
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github+json',
            'User-Agent': 'ghsync',
        })
        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'
        self._rate_limit_status: Optional[RateLimitStatus] = None

    @property
    def rate_limit_status(self) -> Optional[RateLimitStatus]:
        """Status from the last API response, if it carried rate limit headers."""
        return self._rate_limit_status

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

    def _url(self, endpoint: str) -> str:
        return f"{self.api_url}/{endpoint.lstrip('/')}"

    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None,
             page: Optional[int] = None) -> Any:
        """
        GET an endpoint and return the decoded JSON body.

        Raises:
            RemoteProtocolError: On transport failure, non-200 status or non-JSON body
        """
        url = self._url(endpoint)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteProtocolError(f"Request to {url} failed: {e}", url=url, page=page)

        self._update_rate_limit_from_headers(response.headers)

        if response.status_code != 200:
            raise RemoteProtocolError(
                f"GitHub API error {response.status_code} for {url}: {_error_message(response)}",
                url=url,
                page=page,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError:
            raise RemoteProtocolError(
                f"GitHub returned non-JSON response for {url}",
                url=url,
                page=page,
                status_code=response.status_code,
            )

    def iter_pages(self, endpoint: str) -> Generator[List[Any], None, None]:
        """
        Yield successive pages of a listing endpoint until an empty page.

        Each call starts again from page 1. A page that is not a JSON array
        raises RemoteProtocolError, which ends the sequence; pages already
        yielded are not retracted.

        Args:
            endpoint: API path, e.g. "orgs/acme/repos"

        Yields:
            Non-empty lists of decoded JSON elements
        """
        page = 1
        while True:
            logger.debug(f"Fetching page {page} -> {self._url(endpoint)}?page={page}&per_page={self.per_page}")
            body = self._get(endpoint, params={'page': page, 'per_page': self.per_page}, page=page)

            if not isinstance(body, list):
                raise RemoteProtocolError(
                    f"Expected a JSON array from {self._url(endpoint)} (page {page}), "
                    f"got {type(body).__name__}",
                    url=self._url(endpoint),
                    page=page,
                )

            if len(body) == 0:
                return

            yield body
            page += 1

    def list_repositories(self, endpoint: str) -> Generator[List[RepositoryDescriptor], None, None]:
        """
        Yield batches of repository descriptors from a listing endpoint.

        Raises:
            RemoteProtocolError: If a page or one of its elements is malformed
        """
        for page_number, items in enumerate(self.iter_pages(endpoint), 1):
            try:
                batch = [RepositoryDescriptor.from_api_response(item) for item in items]
            except ValueError as e:
                raise RemoteProtocolError(
                    f"Malformed repository in {self._url(endpoint)} (page {page_number}): {e}",
                    url=self._url(endpoint),
                    page=page_number,
                )
            yield batch

    def list_org_repos(self, org: str) -> Generator[List[RepositoryDescriptor], None, None]:
        """Repositories owned by an organization."""
        return self.list_repositories(f"orgs/{org}/repos")

    def list_user_repos(self, login: str) -> Generator[List[RepositoryDescriptor], None, None]:
        """Repositories owned by a user account."""
        return self.list_repositories(f"users/{login}/repos")

    def get_authenticated_login(self) -> str:
        """
        Login of the token's owner.

        Raises:
            RemoteProtocolError: If /user fails or has no login
        """
        data = self._get("user")
        login = data.get('login') if isinstance(data, dict) else None
        if not login:
            raise RemoteProtocolError("GitHub /user response has no login", url=self._url("user"))
        return login

    def iter_authenticated_orgs(self) -> Generator[List[str], None, None]:
        """
        Yield the token owner's organization logins one page at a time.

        Raises:
            RemoteProtocolError: If a page fails; logins already yielded stand
        """
        for page in self.iter_pages("user/orgs"):
            yield [org['login'] for org in page if isinstance(org, dict) and org.get('login')]

    def list_authenticated_orgs(self) -> List[str]:
        """Logins of the organizations the token's owner belongs to."""
        return [login for batch in self.iter_authenticated_orgs() for login in batch]


def _error_message(response) -> str:
    """Extract a short human-readable message from an error response."""
    try:
        body = response.json()
    except ValueError:
        return (response.text or "")[:300]
    if isinstance(body, dict):
        return str(body.get('message') or body.get('error') or body)[:300]
    return str(body)[:300]
