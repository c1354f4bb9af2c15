"""
Domain layer for ghsync.

Contains pure domain objects with no I/O or side effects:
- RepositoryDescriptor: One remote repository
- RepoOutcome: What happened to one repository in a run
- RunStats: Run-level counters

These objects are immutable where possible and provide
serialization methods for the structured summary.
"""

from .repository import RepositoryDescriptor, Visibility
from .operation import RepoAction, RepoOutcome, RunStats

__all__ = [
    'RepositoryDescriptor',
    'Visibility',
    'RepoAction',
    'RepoOutcome',
    'RunStats',
]
