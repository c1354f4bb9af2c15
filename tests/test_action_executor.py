"""
Tests for per-repository action decisions.
"""

import logging
from unittest.mock import MagicMock

import pytest

from ghsync.config import ERROR_LOGGER_NAME, SyncConfig
from ghsync.domain.operation import RepoAction
from ghsync.infra.git_client import GitClient
from ghsync.services.action_executor import ActionExecutor


@pytest.fixture
def git():
    client = MagicMock(spec=GitClient)
    client.is_git_repo.return_value = False
    client.clone.return_value = (True, None)
    client.pull.return_value = (True, None)
    client.fetch.return_value = (True, None)
    return client


@pytest.fixture
def repo(make_repo):
    return make_repo("acme", "widgets")


class TestClone:

    def test_clones_missing_repo(self, git, repo, tmp_path, quiet_progress):
        dest = tmp_path / "acme" / "widgets"

        outcome = ActionExecutor(git, progress=quiet_progress).execute(repo, dest)

        assert outcome.action == RepoAction.CLONED
        assert not outcome.existed
        assert outcome.destination == str(dest)
        git.clone.assert_called_once_with(repo.clone_url, dest)
        assert (tmp_path / "acme").is_dir()

    def test_clone_failure(self, git, repo, tmp_path, quiet_progress, caplog):
        git.clone.return_value = (False, "fatal: could not read Username")

        with caplog.at_level(logging.ERROR, logger=ERROR_LOGGER_NAME):
            outcome = ActionExecutor(git, progress=quiet_progress).execute(repo, tmp_path / "w")

        assert outcome.action == RepoAction.CLONE_FAILED
        assert "could not read Username" in outcome.error
        records = [r for r in caplog.records if r.name == ERROR_LOGGER_NAME]
        assert len(records) == 1
        assert "clone failed for acme/widgets" in records[0].getMessage()
        assert "could not read Username" in records[0].getMessage()

    def test_parent_directory_cannot_be_created(self, git, repo, tmp_path, quiet_progress, caplog):
        (tmp_path / "acme").write_text("not a directory")

        with caplog.at_level(logging.ERROR, logger=ERROR_LOGGER_NAME):
            outcome = ActionExecutor(git, progress=quiet_progress).execute(repo, tmp_path / "acme" / "widgets")

        assert outcome.action == RepoAction.CLONE_FAILED
        assert not outcome.existed
        git.clone.assert_not_called()
        assert "clone failed for acme/widgets" in caplog.text

    def test_unreadable_destination(self, git, repo, tmp_path, quiet_progress):
        git.is_git_repo.side_effect = PermissionError("Permission denied")

        outcome = ActionExecutor(git, progress=quiet_progress).execute(repo, tmp_path / "w")

        assert outcome.action == RepoAction.CLONE_FAILED
        assert "Permission denied" in outcome.error
        git.clone.assert_not_called()


class TestExistingWorkingCopy:

    def test_default_skips(self, git, repo, tmp_path, quiet_progress):
        git.is_git_repo.return_value = True

        outcome = ActionExecutor(git, progress=quiet_progress).execute(repo, tmp_path)

        assert outcome.action == RepoAction.SKIPPED
        assert outcome.existed
        git.pull.assert_not_called()
        git.fetch.assert_not_called()
        git.clone.assert_not_called()

    def test_resume_skips(self, git, repo, tmp_path, quiet_progress):
        git.is_git_repo.return_value = True

        outcome = ActionExecutor(git, resume=True, progress=quiet_progress).execute(repo, tmp_path)

        assert outcome.action == RepoAction.SKIPPED

    def test_update(self, git, repo, tmp_path, quiet_progress):
        git.is_git_repo.return_value = True

        outcome = ActionExecutor(git, update=True, progress=quiet_progress).execute(repo, tmp_path)

        assert outcome.action == RepoAction.UPDATED
        assert outcome.existed
        git.pull.assert_called_once_with(tmp_path)

    def test_update_wins_over_fetch(self, git, repo, tmp_path, quiet_progress):
        git.is_git_repo.return_value = True

        outcome = ActionExecutor(git, update=True, fetch=True,
                                 progress=quiet_progress).execute(repo, tmp_path)

        assert outcome.action == RepoAction.UPDATED
        git.fetch.assert_not_called()

    def test_fetch(self, git, repo, tmp_path, quiet_progress):
        git.is_git_repo.return_value = True

        outcome = ActionExecutor(git, fetch=True, progress=quiet_progress).execute(repo, tmp_path)

        assert outcome.action == RepoAction.FETCHED
        git.fetch.assert_called_once_with(tmp_path)

    def test_update_failure(self, git, repo, tmp_path, quiet_progress, caplog):
        git.is_git_repo.return_value = True
        git.pull.return_value = (False, "fatal: Not possible to fast-forward, aborting.")

        with caplog.at_level(logging.ERROR, logger=ERROR_LOGGER_NAME):
            outcome = ActionExecutor(git, update=True, progress=quiet_progress).execute(repo, tmp_path)

        assert outcome.action == RepoAction.UPDATE_FAILED
        assert outcome.existed
        assert "update failed for acme/widgets" in caplog.text

    def test_fetch_failure(self, git, repo, tmp_path, quiet_progress):
        git.is_git_repo.return_value = True
        git.fetch.return_value = (False, "fatal: unable to access")

        outcome = ActionExecutor(git, fetch=True, progress=quiet_progress).execute(repo, tmp_path)

        assert outcome.action == RepoAction.FETCH_FAILED


class TestDryRun:

    def test_clone_intent(self, git, repo, tmp_path, quiet_progress):
        dest = tmp_path / "acme" / "widgets"

        outcome = ActionExecutor(git, dry_run=True, progress=quiet_progress).execute(repo, dest)

        assert outcome.action == RepoAction.CLONE
        git.clone.assert_not_called()
        assert not (tmp_path / "acme").exists()

    @pytest.mark.parametrize("update, fetch, expected", [
        (True, False, RepoAction.UPDATE),
        (False, True, RepoAction.FETCH),
        (True, True, RepoAction.UPDATE),
        (False, False, RepoAction.SKIPPED),
    ])
    def test_existing_intents(self, git, repo, tmp_path, quiet_progress, update, fetch, expected):
        git.is_git_repo.return_value = True

        outcome = ActionExecutor(git, dry_run=True, update=update, fetch=fetch,
                                 progress=quiet_progress).execute(repo, tmp_path)

        assert outcome.action == expected
        assert outcome.existed
        git.pull.assert_not_called()
        git.fetch.assert_not_called()

    def test_dry_run_announces(self, git, repo, tmp_path):
        progress = MagicMock()

        ActionExecutor(git, dry_run=True, progress=progress).execute(repo, tmp_path / "w")

        message = progress.call_args[0][0]
        assert message.startswith("[DRY-RUN] Would clone: acme/widgets")


class TestFromConfig:

    def test_modes_copied(self, git, quiet_progress):
        config = SyncConfig(token="t", dry_run=True, update=True, fetch=True, resume=True)

        executor = ActionExecutor.from_config(config, git_client=git, progress=quiet_progress)

        assert executor.dry_run and executor.update and executor.fetch and executor.resume
        assert executor.git is git
