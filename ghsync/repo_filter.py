"""
Repository filtering for ghsync.

Decides whether a discovered repository takes part in a sync run by:
- Visibility (private / public)
- Archived flag
- Fork flag
- Name pattern (regular expression)
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Pattern

from .domain.repository import RepositoryDescriptor
from .exit_codes import FatalConfigError


@dataclass(frozen=True)
class FilterConfig:
    """Inclusion/exclusion settings applied to every descriptor."""
    include_private: bool = True
    include_public: bool = True
    exclude_archived: bool = True
    exclude_forks: bool = True
    name_pattern: Optional[str] = None
    _compiled: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.name_pattern:
            try:
                compiled = re.compile(self.name_pattern)
            except re.error as e:
                raise FatalConfigError(f"Invalid --filter pattern {self.name_pattern!r}: {e}")
            object.__setattr__(self, '_compiled', compiled)

    @property
    def pattern(self) -> Optional[Pattern[str]]:
        return self._compiled


def passes(repo: RepositoryDescriptor, config: FilterConfig) -> bool:
    """
    Check whether a repository passes every enabled filter.

    Checks short-circuit in order: visibility, archived, fork, name.

    Args:
        repo: Repository descriptor
        config: Filter configuration

    Returns:
        True if the repository should be synced
    """
    if repo.is_private and not config.include_private:
        return False
    if not repo.is_private and not config.include_public:
        return False

    if repo.archived and config.exclude_archived:
        return False

    if repo.is_fork and config.exclude_forks:
        return False

    if config.pattern is not None and not config.pattern.search(repo.name):
        return False

    return True
