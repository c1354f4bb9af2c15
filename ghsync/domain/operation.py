"""
Outcome domain objects for ghsync.

Provides the per-repository outcome recorded at the end of processing
and the run-level counters accumulated by the aggregator.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class RepoAction(Enum):
    """Terminal action classification for one repository."""
    CLONED = "cloned"
    UPDATED = "updated"
    FETCHED = "fetched"
    SKIPPED = "skipped"
    CLONE_FAILED = "clone_failed"
    UPDATE_FAILED = "update_failed"
    FETCH_FAILED = "fetch_failed"
    # Dry-run intents
    CLONE = "clone"
    UPDATE = "update"
    FETCH = "fetch"

    @property
    def is_failure(self) -> bool:
        return self in _FAILURES

    @property
    def is_dry_run(self) -> bool:
        return self in _INTENTS


_FAILURES = frozenset({RepoAction.CLONE_FAILED, RepoAction.UPDATE_FAILED, RepoAction.FETCH_FAILED})
_INTENTS = frozenset({RepoAction.CLONE, RepoAction.UPDATE, RepoAction.FETCH})


@dataclass(frozen=True)
class RepoOutcome:
    """
    What happened to one repository during a run.

    ``existed`` is True when a working copy was already present at the
    destination; it feeds the "already present" count.
    """
    owner: str
    name: str
    action: RepoAction
    destination: str = ""
    existed: bool = False
    error: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.owner, self.name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the structured summary entry."""
        return {
            'org': self.owner,
            'name': self.name,
            'action': self.action.value,
        }


@dataclass
class RunStats:
    """
    Counters for one sync run.

    Only the OutcomeAggregator mutates these.
    """
    cloned: int = 0
    updated: int = 0
    fetched: int = 0
    skipped: int = 0
    failed: int = 0
    planned: int = 0
    total_discovered: int = 0
    passed: int = 0
    processed: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def duration_seconds(self) -> int:
        end = self.end_time if self.end_time is not None else time.time()
        return int(end - self.start_time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the structured summary ``stats`` block."""
        return {
            'cloned': self.cloned,
            'updated': self.updated,
            'fetched': self.fetched,
            'skipped': self.skipped,
            'failed': self.failed,
            'duration_seconds': self.duration_seconds,
        }
