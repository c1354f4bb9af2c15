"""
Infrastructure layer for ghsync.

Contains abstractions for external systems:
- GitClient: Git clone/pull/fetch execution
- GitHubClient: GitHub listing API access

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient
from .github_client import GitHubClient, RateLimitStatus, DEFAULT_API_URL

__all__ = [
    'GitClient',
    'GitHubClient',
    'RateLimitStatus',
    'DEFAULT_API_URL',
]
