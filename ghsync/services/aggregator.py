"""
Outcome aggregation for sync runs.

Worker threads hand finished outcomes to one OutcomeAggregator, which is
the only writer of the run counters and the per-repository ledger. Every
mutation happens under a single lock, so concurrent completions never
lose or double-count an update.
"""

import copy
import threading
import time
from typing import Any, Dict, Tuple

from ..domain.operation import RepoAction, RepoOutcome, RunStats

LedgerKey = Tuple[str, str]


class OutcomeAggregator:
    """
    Accumulates per-repository outcomes and run counters.

    Example:
        aggregator = OutcomeAggregator()
        aggregator.start(total_discovered=3)
        aggregator.record(RepoOutcome("acme", "widgets", RepoAction.CLONED))
        aggregator.finish()
        print(aggregator.summary())
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._stats = RunStats()
        self._ledger: Dict[LedgerKey, RepoOutcome] = {}

    def start(self, total_discovered: int) -> None:
        """Reset counters for a new run."""
        with self._lock:
            self._stats = RunStats(total_discovered=total_discovered, start_time=time.time())
            self._ledger = {}

    def mark_processed(self) -> int:
        """Count one examined descriptor; returns the processed count."""
        with self._lock:
            self._stats.processed += 1
            return self._stats.processed

    def mark_passed(self) -> None:
        """Count one descriptor that passed the filters."""
        with self._lock:
            self._stats.passed += 1

    def record(self, outcome: RepoOutcome) -> None:
        """
        Record the terminal outcome of one repository.

        The "already present" check counts toward ``skipped`` whether or
        not an update or fetch followed it.
        """
        with self._lock:
            stats = self._stats
            if outcome.existed or outcome.action is RepoAction.SKIPPED:
                stats.skipped += 1

            if outcome.action is RepoAction.CLONED:
                stats.cloned += 1
            elif outcome.action is RepoAction.UPDATED:
                stats.updated += 1
            elif outcome.action is RepoAction.FETCHED:
                stats.fetched += 1
            elif outcome.action.is_failure:
                stats.failed += 1
            elif outcome.action.is_dry_run:
                stats.planned += 1

            self._ledger[outcome.key] = outcome

    def finish(self) -> None:
        """Stamp the end time once every task has completed."""
        with self._lock:
            self._stats.end_time = time.time()

    @property
    def stats(self) -> RunStats:
        """Snapshot of the counters."""
        with self._lock:
            return copy.copy(self._stats)

    @property
    def outcomes(self) -> Dict[LedgerKey, RepoOutcome]:
        """Snapshot of the ledger keyed by (owner, name)."""
        with self._lock:
            return dict(self._ledger)

    def summary(self) -> Dict[str, Any]:
        """Structured summary: stats block plus per-repository actions."""
        with self._lock:
            repositories = [self._ledger[key].to_dict() for key in sorted(self._ledger)]
            return {
                'stats': self._stats.to_dict(),
                'repositories': repositories,
            }
