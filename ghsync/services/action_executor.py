"""
Per-repository action execution.

Decides between clone, update, fetch and skip for one repository and
performs it through the GitClient. Failures become ``*_failed`` outcomes
plus an error-log entry; they never abort the run.
"""

import logging
from pathlib import Path
from typing import Optional

from ..config import ERROR_LOGGER_NAME, SyncConfig
from ..domain.operation import RepoAction, RepoOutcome
from ..domain.repository import RepositoryDescriptor
from ..exit_codes import RepoActionError
from ..infra.git_client import GitClient
from ..progress import LogLevel, ProgressReporter, get_progress

logger = logging.getLogger(__name__)
error_log = logging.getLogger(ERROR_LOGGER_NAME)


class ActionExecutor:
    """
    Performs the sync action for one repository.

    Example:
        executor = ActionExecutor(GitClient(), update=True)
        outcome = executor.execute(repo, Path("acme/widgets"))
        print(outcome.action.value)  # "updated"
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        dry_run: bool = False,
        update: bool = False,
        fetch: bool = False,
        resume: bool = False,
        progress: Optional[ProgressReporter] = None
    ):
        """
        Initialize ActionExecutor.

        Args:
            git_client: GitClient instance (creates new if None)
            dry_run: Record intended actions without running git
            update: Fast-forward existing working copies
            fetch: Fetch/prune existing working copies (ignored when update is set)
            resume: Skip existing working copies (the default when no mode is set)
            progress: Reporter for per-repository status lines
        """
        self.git = git_client or GitClient()
        self.dry_run = dry_run
        self.update = update
        self.fetch = fetch
        self.resume = resume
        self.progress = progress or get_progress()

    @classmethod
    def from_config(cls, config: SyncConfig, git_client: Optional[GitClient] = None,
                    progress: Optional[ProgressReporter] = None) -> 'ActionExecutor':
        return cls(
            git_client=git_client,
            dry_run=config.dry_run,
            update=config.update,
            fetch=config.fetch,
            resume=config.resume,
            progress=progress,
        )

    def execute(self, repo: RepositoryDescriptor, destination: Path) -> RepoOutcome:
        """
        Clone, update, fetch or skip one repository.

        Args:
            repo: Repository descriptor
            destination: Local path of the working copy

        Returns:
            RepoOutcome for the repository
        """
        try:
            existing = self.git.is_git_repo(destination)
        except OSError as e:
            return self._failed(repo, destination, RepoAction.CLONE_FAILED, "clone", str(e))

        if existing:
            if self.update:
                return self._update(repo, destination)
            if self.fetch:
                return self._fetch(repo, destination)
            reason = "resume" if self.resume else "no --update/--fetch"
            logger.debug(f"{repo.full_name} already present at {destination}, skipping ({reason})")
            return self._outcome(repo, destination, RepoAction.SKIPPED, existed=True)

        return self._clone(repo, destination)

    def _clone(self, repo: RepositoryDescriptor, destination: Path) -> RepoOutcome:
        logger.debug(f"Cloning {repo.full_name} from {repo.clone_url} -> {destination}")

        if self.dry_run:
            self.progress(f"[DRY-RUN] Would clone: {repo.full_name} -> {destination}", color='green')
            return self._outcome(repo, destination, RepoAction.CLONE)

        try:
            Path(destination).parent.mkdir(parents=True, exist_ok=True)
            success, output = self.git.clone(repo.clone_url, destination)
        except OSError as e:
            success, output = False, str(e)
        if not success:
            return self._failed(repo, destination, RepoAction.CLONE_FAILED, "clone", output)

        self.progress(f"Cloned {repo.full_name}", level=LogLevel.SUCCESS)
        return self._outcome(repo, destination, RepoAction.CLONED)

    def _update(self, repo: RepositoryDescriptor, destination: Path) -> RepoOutcome:
        logger.debug(f"Updating {repo.full_name} at {destination}")

        if self.dry_run:
            self.progress(f"[DRY-RUN] Would pull: {repo.full_name}", color='yellow')
            return self._outcome(repo, destination, RepoAction.UPDATE, existed=True)

        success, output = self.git.pull(destination)
        if not success:
            return self._failed(repo, destination, RepoAction.UPDATE_FAILED, "update", output, existed=True)

        self.progress(f"Updated {repo.full_name}", level=LogLevel.SUCCESS, color='yellow')
        return self._outcome(repo, destination, RepoAction.UPDATED, existed=True)

    def _fetch(self, repo: RepositoryDescriptor, destination: Path) -> RepoOutcome:
        logger.debug(f"Fetching {repo.full_name} at {destination}")

        if self.dry_run:
            self.progress(f"[DRY-RUN] Would fetch: {repo.full_name}", color='blue')
            return self._outcome(repo, destination, RepoAction.FETCH, existed=True)

        success, output = self.git.fetch(destination)
        if not success:
            return self._failed(repo, destination, RepoAction.FETCH_FAILED, "fetch", output, existed=True)

        self.progress(f"Fetched {repo.full_name}", level=LogLevel.SUCCESS, color='blue')
        return self._outcome(repo, destination, RepoAction.FETCHED, existed=True)

    def _failed(self, repo: RepositoryDescriptor, destination: Path, action: RepoAction,
                operation: str, output: Optional[str], existed: bool = False) -> RepoOutcome:
        error = RepoActionError(repo.owner, repo.name, operation, (output or "").strip())
        error_log.error(f"{error} (url={repo.clone_url}, dest={destination})")
        self.progress.failure(f"{operation.capitalize()} failed for {repo.full_name}")
        return self._outcome(repo, destination, action, existed=existed, error=str(error))

    @staticmethod
    def _outcome(repo: RepositoryDescriptor, destination: Path, action: RepoAction,
                 existed: bool = False, error: Optional[str] = None) -> RepoOutcome:
        return RepoOutcome(
            owner=repo.owner,
            name=repo.name,
            action=action,
            destination=str(destination),
            existed=existed,
            error=error,
        )
