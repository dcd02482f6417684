"""Git worktree creation for ``linear issue worktree``.

Each issue gets a sibling directory of the repository named after its
identifier, e.g. ``~/src/eng-123/app`` for a checkout at ``~/src/app``.
"""

import shutil
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from linear_cli.exceptions import GitError

log = structlog.get_logger(__name__)

CommandRunner = Callable[..., "subprocess.CompletedProcess[str]"]

DEFAULT_REMOTE = "origin"
DEFAULT_BASE_BRANCH = "main"


class GitWorktreeCreator:
    """Run the git commands needed to set up an issue worktree.

    Attributes:
        cwd: Directory git runs in (None for the process's working directory)
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        which: Callable[[str], str | None] | None = None,
        cwd: Path | None = None,
    ) -> None:
        """Initialize creator.

        Args:
            runner: Callable with the signature of ``subprocess.run``
            which: Executable lookup (defaults to ``shutil.which``)
            cwd: Directory git runs in
        """
        self._runner = runner or subprocess.run
        self._which = which or shutil.which
        self.cwd = cwd

    def _git(self, args: Sequence[str], cwd: Path | None = None) -> "subprocess.CompletedProcess[str]":
        try:
            return self._runner(  # nosec B603 B607 # fixed git arguments
                ["git", *args],
                cwd=cwd or self.cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise GitError(f"running git: {e}") from e

    def repo_root_dir(self) -> Path:
        result = self._git(["rev-parse", "--show-toplevel"])
        if result.returncode != 0:
            raise GitError(f"getting repo root: {result.stderr.strip() or 'not a git repository'}")
        return Path(result.stdout.strip())

    def branch_exists(self, branch: str) -> bool:
        result = self._git(["rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"])
        return result.returncode == 0

    def fetch_branch(self, remote: str, branch: str) -> None:
        result = self._git(["fetch", remote, branch])
        if result.returncode != 0:
            raise GitError(f"fetching {remote}/{branch}: {result.stderr.strip()}")

    def create_worktree(self, path: Path, branch: str, start_point: str | None = None) -> None:
        """Add a worktree at ``path``.

        Without ``start_point`` the existing ``branch`` is checked out;
        otherwise ``branch`` is created from ``start_point``.
        """
        if start_point is None:
            args = ["worktree", "add", str(path), branch]
        else:
            args = ["worktree", "add", "-b", branch, str(path), start_point]
        result = self._git(args)
        if result.returncode != 0:
            raise GitError(f"creating worktree: {result.stderr.strip()}")

    def post_create(self, directory: Path) -> None:
        """Trust the new checkout's mise config when mise is installed."""
        if self._which("mise") is None:
            return
        try:
            result = self._runner(  # nosec B603 B607
                ["mise", "trust"], cwd=directory, capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise GitError(f"running mise trust: {e}") from e
        if result.returncode != 0:
            raise GitError(f"running mise trust: {result.stderr.strip()}")


def worktree_path(repo_root: Path, identifier: str) -> Path:
    """``<parent>/<identifier lowercased>/<repo name>`` next to the repository."""
    return repo_root.parent / identifier.lower() / repo_root.name


def create_issue_worktree(git: GitWorktreeCreator, identifier: str, branch_name: str) -> tuple[Path, bool]:
    """Create the worktree for an issue branch.

    An existing local branch is checked out as is; a new one starts from a
    freshly fetched ``origin/main``.

    Returns:
        The worktree path and whether the branch already existed

    Raises:
        GitError: If any git step fails
    """
    path = worktree_path(git.repo_root_dir(), identifier)

    reused = git.branch_exists(branch_name)
    if reused:
        git.create_worktree(path, branch_name)
    else:
        git.fetch_branch(DEFAULT_REMOTE, DEFAULT_BASE_BRANCH)
        git.create_worktree(path, branch_name, f"{DEFAULT_REMOTE}/{DEFAULT_BASE_BRANCH}")

    git.post_create(path)
    log.info("worktree_created", identifier=identifier, branch=branch_name, path=str(path), reused=reused)
    return path, reused
