"""
Sync scheduling for ghsync.

Walks the discovered repositories once, in discovery order, and hands
each one that passes the filters to the ActionExecutor on a fixed-size
worker pool. A bounded semaphore caps the number of outstanding
executions: when every slot is busy, dispatch blocks until one frees.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from ..config import SyncConfig
from ..domain.operation import RepoAction, RepoOutcome, RunStats
from ..domain.repository import RepositoryDescriptor
from ..infra.git_client import GitClient
from ..layout import destination_path
from ..progress import ProgressReporter, get_progress
from ..repo_filter import passes
from .action_executor import ActionExecutor
from .aggregator import LedgerKey, OutcomeAggregator

logger = logging.getLogger(__name__)


class SyncService:
    """
    Bounded-concurrency driver for one sync run.

    Example:
        service = SyncService(config)
        stats, outcomes = service.run(descriptors)
        print(f"Cloned {stats.cloned} repos")
    """

    def __init__(
        self,
        config: SyncConfig,
        git_client: Optional[GitClient] = None,
        progress: Optional[ProgressReporter] = None,
        executor: Optional[ActionExecutor] = None
    ):
        """
        Initialize SyncService.

        Args:
            config: Run configuration
            git_client: GitClient instance (creates new if None)
            progress: Progress reporter for status lines and the bar
            executor: ActionExecutor (built from config if None)
        """
        self.config = config
        self.progress = progress or get_progress()
        self.executor = executor or ActionExecutor.from_config(
            config, git_client=git_client, progress=self.progress
        )
        self.aggregator = OutcomeAggregator()

    def run(
        self,
        descriptors: List[RepositoryDescriptor]
    ) -> Tuple[RunStats, Dict[LedgerKey, RepoOutcome]]:
        """
        Process every discovered repository.

        Filtered-out repositories get no outcome. Returns once every
        dispatched action has finished.

        Args:
            descriptors: Discovered repositories in discovery order

        Returns:
            (final counters, ledger keyed by (owner, name))
        """
        config = self.config
        aggregator = self.aggregator
        aggregator.start(total_discovered=len(descriptors))

        root = Path(config.root_dir)
        slots = threading.BoundedSemaphore(config.concurrency)
        dispatched: Set[Path] = set()
        futures: List[Future] = []
        bar = self.progress.progress_bar(len(descriptors), "Syncing")

        with ThreadPoolExecutor(max_workers=config.concurrency,
                                thread_name_prefix="ghsync-worker") as pool:
            for repo in descriptors:
                processed = aggregator.mark_processed()

                if not passes(repo, config.filters):
                    logger.debug(f"Filtered out {repo.full_name}")
                    bar.set(processed, repo.full_name)
                    continue
                aggregator.mark_passed()

                destination = root / destination_path(repo.owner, repo.name, config.layout)
                if destination in dispatched:
                    logger.warning(
                        f"{repo.full_name} maps to {destination}, already used in this run; skipping"
                    )
                    aggregator.record(RepoOutcome(
                        owner=repo.owner,
                        name=repo.name,
                        action=RepoAction.SKIPPED,
                        destination=str(destination),
                    ))
                    bar.set(processed, repo.full_name)
                    continue
                dispatched.add(destination)

                # Blocks while every worker slot is taken
                slots.acquire()
                try:
                    future = pool.submit(self._execute, repo, destination)
                except BaseException:
                    slots.release()
                    raise
                future.add_done_callback(lambda _f: slots.release())
                futures.append(future)

                bar.set(processed, repo.full_name)

        bar.close()
        aggregator.finish()

        for future in futures:
            # Surface unexpected worker errors; expected failures are outcomes
            future.result()

        return aggregator.stats, aggregator.outcomes

    def summary(self) -> dict:
        """Structured summary of the last run."""
        return self.aggregator.summary()

    def _execute(self, repo: RepositoryDescriptor, destination: Path) -> RepoOutcome:
        outcome = self.executor.execute(repo, destination)
        self.aggregator.record(outcome)
        return outcome
