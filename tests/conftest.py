"""
Shared fixtures for ghsync tests.
"""

import io

import pytest

from ghsync.config import reset_logging
from ghsync.domain.repository import RepositoryDescriptor, Visibility
from ghsync.progress import ProgressReporter


def _make_repo(owner="acme", name="widgets", private=False, archived=False, fork=False):
    return RepositoryDescriptor(
        owner=owner,
        name=name,
        clone_url=f"https://github.com/{owner}/{name}.git",
        visibility=Visibility.PRIVATE if private else Visibility.PUBLIC,
        archived=archived,
        is_fork=fork,
    )


def _api_repo(owner="acme", name="widgets", private=False, archived=False, fork=False):
    return {
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner},
        "clone_url": f"https://github.com/{owner}/{name}.git",
        "private": private,
        "archived": archived,
        "fork": fork,
    }


def _listing(*batches, error=None):
    def gen():
        for batch in batches:
            yield batch
        if error is not None:
            raise error
    return gen()


@pytest.fixture
def make_repo():
    """Factory for descriptors built without going through the API mapping."""
    return _make_repo


@pytest.fixture
def api_repo():
    """Factory for repository objects as returned by the GitHub listing endpoints."""
    return _api_repo


@pytest.fixture
def listing():
    """Factory for paged listings that optionally fail after their batches."""
    return _listing


@pytest.fixture
def quiet_progress():
    """Progress reporter writing to an in-memory stream."""
    return ProgressReporter(enabled=False, use_unicode=False, use_colors=False,
                            stream=io.StringIO())


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()
