"""
Git client infrastructure for ghsync.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GitClient:
    """
    Abstraction over git commands.

    Each operation returns ``(success, output)``; on failure ``output``
    carries git's stderr for diagnostics.

    Example:
        client = GitClient()
        ok, output = client.clone("https://github.com/acme/widgets.git", "acme/widgets")
        if not ok:
            print(output)
    """

    def __init__(self, timeout: Optional[int] = None, git: str = "git"):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (None waits for completion)
            git: git executable
        """
        self.timeout = timeout
        self.git = git

    def _run(self, args: List[str], cwd: Optional[PathLike] = None) -> Tuple[Optional[str], int]:
        """
        Run a git command.

        Args:
            args: Arguments after the git executable
            cwd: Working directory

        Returns:
            Tuple of (output, returncode); output is stderr when the command fails
        """
        cmd = [self.git, *args]
        env = dict(os.environ, GIT_TERMINAL_PROMPT="0")
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return f"timed out after {self.timeout}s", -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return str(e), -1

        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
        else:
            output = (result.stdout or "").strip()
        return output or None, result.returncode

    def is_git_repo(self, path: PathLike) -> bool:
        """Check if path holds a git working copy."""
        return (Path(path) / ".git").is_dir()

    def clone(self, url: str, dest: PathLike) -> Tuple[bool, Optional[str]]:
        """
        Clone a repository into ``dest``.

        Returns:
            (success, output)
        """
        output, code = self._run(["clone", url, str(dest)])
        return code == 0, output

    def pull(self, path: PathLike) -> Tuple[bool, Optional[str]]:
        """
        Fast-forward the working copy from its upstream.

        Fails rather than creating a merge commit.

        Returns:
            (success, output)
        """
        output, code = self._run(["-C", str(path), "pull", "--ff-only"])
        return code == 0, output

    def fetch(self, path: PathLike) -> Tuple[bool, Optional[str]]:
        """
        Fetch all remotes and prune deleted refs.

        Returns:
            (success, output)
        """
        output, code = self._run(["-C", str(path), "fetch", "--all", "--prune"])
        return code == 0, output
