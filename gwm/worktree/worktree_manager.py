"""Worktree lifecycle for bare-clone repositories.

This module manages the bare repository and git worktrees of a single
repository.

Directory Structure
-------------------
<base_dir>/
└── repo/                  # Repository directory, named after the clone URL
    ├── .bare/             # Bare repository (cloned once, never checked out)
    ├── .worktree.json     # Default branch and origin URL
    ├── main/              # Worktree for the default branch
    └── feature-x/         # One directory per branch, named verbatim

Branch names are used as directory names unchanged, so a branch such as
``feature/login`` ends up in the nested directory ``feature/login/``.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from .branch_manager import BranchManager
from .config import DEFAULT_BRANCH
from .errors import (
    GitCommandError,
    GitOperationError,
    InvalidRepositoryUrlError,
    RemoteBranchNotFoundError,
    RepositoryNotFoundError,
    WorkspaceAlreadyExistsError,
    WorktreeAlreadyExistsError,
    WorktreeDirtyError,
)
from .models import RepositoryConfig, WorktreeEntry
from .runner import ProcessRunner, SubprocessRunner, run_git
from .storage import RepositoryConfigStore

logger = logging.getLogger(__name__)

BARE_DIRNAME = ".bare"
DETACHED = "detached"

REPO_URL_PATTERN = re.compile(r"/([^/]+?)(\.git)?$")


def parse_repo_name(url: str) -> str:
    """Derive the repository name from the last path segment of a URL."""
    match = REPO_URL_PATTERN.search(url)
    if not match:
        raise InvalidRepositoryUrlError(url)
    return match.group(1)


def parse_worktree_list(output: str) -> List[WorktreeEntry]:
    """Parse ``git worktree list --porcelain`` output.

    Each record starts with a ``worktree <path>`` line; the branch line is
    expected two lines below it (after ``HEAD <sha>``). Records without one
    are labelled as detached.
    """
    lines = output.split("\n")
    entries = []

    for i, line in enumerate(lines):
        if not line.startswith("worktree "):
            continue
        path = line[len("worktree "):]
        branch_line = lines[i + 2] if i + 2 < len(lines) else ""
        if branch_line.startswith("branch "):
            branch = branch_line[len("branch "):].replace("refs/heads/", "", 1)
        else:
            branch = DETACHED
        entries.append(WorktreeEntry(path=path, branch=branch))

    return entries


def is_dirty_worktree_error(stderr: str) -> bool:
    """Check whether git refused a removal because of local changes."""
    return "contains modified or untracked files" in stderr


def is_branch_exists_error(stderr: str) -> bool:
    """Check whether git refused to create a branch that already exists."""
    return "already exists" in stderr


def list_repositories(base_dir: Path) -> List[str]:
    """List repository directories under ``base_dir``."""
    if not base_dir.exists():
        return []
    return sorted(p.name for p in base_dir.iterdir() if p.is_dir())


class WorktreeManager:
    """Manages the bare repository and worktrees of one repository.

    All state lives on disk under ``base_dir/repository_name``; nothing is
    cached between calls.
    """

    def __init__(
        self,
        base_dir: Union[Path, str],
        repository_name: str,
        default_branch: str = DEFAULT_BRANCH,
        runner: Optional[ProcessRunner] = None,
        remote: str = "origin",
    ):
        """Initialize worktree manager."""
        self.base_dir = Path(base_dir).absolute()
        self.repository_name = repository_name
        self.repository_path = self.base_dir / repository_name
        self.bare_path = self.repository_path / BARE_DIRNAME
        self.default_branch = default_branch
        self.remote = remote
        self.runner = runner or SubprocessRunner()
        self.branch_manager = BranchManager(self.runner, remote)
        self.config_store = RepositoryConfigStore(self.repository_path)

    def get_worktree_path(self, branch: str) -> Path:
        """Get local path for a worktree."""
        return self.repository_path / branch

    def repo_exists(self) -> bool:
        """Check if the bare repository has been cloned."""
        return self.bare_path.exists()

    def _ensure_repo(self) -> None:
        if not self.repo_exists():
            raise RepositoryNotFoundError(self.repository_name)

    def _git(self, *args: str) -> str:
        return run_git(self.runner, list(args), cwd=self.bare_path).stdout

    def clone(self, repository_url: str) -> Path:
        """Clone a repository as bare and check out its default branch.

        Returns the path of the default branch worktree. A failed clone is
        not rolled back; the repository directory must be removed by hand
        before retrying.
        """
        self.base_dir.mkdir(parents=True, exist_ok=True)

        if self.repository_path.exists():
            raise WorkspaceAlreadyExistsError(self.repository_path)

        try:
            self.repository_path.mkdir(parents=True)

            logger.info(f"Cloning repository to {self.bare_path}...")
            run_git(self.runner, ["clone", "--bare", repository_url, str(self.bare_path)])
            self.branch_manager.configure_tracking(self.bare_path)

            default_branch = self.branch_manager.detect_default_branch(
                self.bare_path, self.default_branch
            )
            self.default_branch = default_branch

            self.config_store.save(
                RepositoryConfig(default_branch=default_branch, repository_url=repository_url)
            )

            worktree_path = self.get_worktree_path(default_branch)
            logger.info(f"Creating worktree for default branch {default_branch}...")
            self._git("worktree", "add", str(worktree_path), default_branch)
        except (GitCommandError, OSError) as e:
            logger.error(f"Failed to clone repository: {e}")
            raise GitOperationError("clone repository", str(e)) from e

        logger.info("Repository cloned successfully!")
        logger.info(f"Bare repository: {self.bare_path}")
        logger.info(f"Default branch worktree: {worktree_path}")
        return worktree_path

    def resolve_base_branch(self, base_branch: Optional[str] = None) -> str:
        """Pick the branch new branches start from.

        An explicit base wins, then the default stored at clone time, then
        the manager's configured default.
        """
        return base_branch or self.config_store.get_default_branch() or self.default_branch

    def create_branch(
        self,
        branch_name: str,
        base_branch: Optional[str] = None,
        pull_latest: bool = False,
    ) -> Path:
        """Create a new branch from the remote base branch in its own worktree."""
        self._ensure_repo()

        worktree_path = self.get_worktree_path(branch_name)
        if worktree_path.exists():
            raise WorktreeAlreadyExistsError(branch_name, worktree_path)

        base = self.resolve_base_branch(base_branch)

        if pull_latest:
            logger.info("Fetching latest changes...")
            try:
                self.branch_manager.fetch(self.bare_path)
                logger.info("Latest changes fetched")
            except GitCommandError as e:
                logger.warning(f"Could not fetch latest changes: {e}")

        logger.info(f"Creating new branch {branch_name} from {self.remote}/{base}...")

        try:
            # Start from the freshly fetched remote ref, not a stale local branch
            self.branch_manager.fetch_branch(self.bare_path, base)
            self._git(
                "worktree", "add", "-b", branch_name, str(worktree_path), f"{self.remote}/{base}"
            )
        except GitCommandError as e:
            logger.error(f"Failed to create branch: {e}")
            raise GitOperationError("create branch", str(e)) from e

        logger.info(f"Branch {branch_name} created successfully at {worktree_path}")
        return worktree_path

    def get_worktrees(self) -> List[WorktreeEntry]:
        """Get all worktrees known to git, in git's order."""
        self._ensure_repo()

        try:
            output = self._git("worktree", "list", "--porcelain")
        except GitCommandError as e:
            raise GitOperationError("list worktrees", str(e)) from e

        return parse_worktree_list(output)

    def list_worktrees(self) -> List[str]:
        """List worktrees as ``"<path> (<branch>)"`` strings."""
        return [entry.label for entry in self.get_worktrees()]

    def remove_worktree(self, branch_name: str, force: bool = False) -> None:
        """Remove a git worktree.

        Without ``force`` a worktree holding local changes is left alone and
        WorktreeDirtyError is raised; callers retry with ``force=True``.
        """
        self._ensure_repo()

        worktree_path = self.get_worktree_path(branch_name)
        logger.info(f"Removing worktree for {branch_name}...")

        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(str(worktree_path))

        try:
            self._git(*args)
        except GitCommandError as e:
            if not force and is_dirty_worktree_error(e.stderr):
                raise WorktreeDirtyError(self.repository_name, branch_name) from e
            logger.error(f"Failed to remove worktree: {e}")
            raise GitOperationError("remove worktree", str(e)) from e

        logger.info(f"Worktree {branch_name} removed successfully")

    def list_remote_branches(self) -> List[str]:
        """List branches on the remote, sorted and without duplicates."""
        self._ensure_repo()

        logger.info("Fetching latest changes...")
        try:
            self.branch_manager.fetch_all(self.bare_path, prune=True)
            # Ask the remote directly; local tracking refs may be stale
            return self.branch_manager.get_remote_branches(self.bare_path)
        except GitCommandError as e:
            raise GitOperationError("list remote branches", str(e)) from e

    def open_remote_branch(self, branch_name: str) -> Path:
        """Check out an existing remote branch in its own worktree.

        Does nothing if the worktree directory already exists. If a local
        branch of the same name exists, the worktree reuses it as is.
        """
        self._ensure_repo()

        worktree_path = self.get_worktree_path(branch_name)
        if worktree_path.exists():
            logger.info(f"Worktree for branch {branch_name} already exists at {worktree_path}")
            return worktree_path

        try:
            self.branch_manager.fetch_all(self.bare_path)
        except GitCommandError as e:
            raise GitOperationError("open remote branch", str(e)) from e

        remote_branches = self.list_remote_branches()
        if branch_name not in remote_branches:
            logger.info("Available remote branches:")
            for branch in remote_branches:
                logger.info(f"  - {branch}")
            raise RemoteBranchNotFoundError(branch_name, remote_branches)

        logger.info(f"Creating worktree for remote branch {branch_name}...")
        try:
            try:
                self._git(
                    "worktree", "add", str(worktree_path),
                    "-b", branch_name, f"{self.remote}/{branch_name}",
                )
            except GitCommandError as e:
                if not is_branch_exists_error(e.stderr):
                    raise
                logger.info(f"Local branch {branch_name} already exists, creating worktree...")
                self._git("worktree", "add", str(worktree_path), branch_name)
        except GitCommandError as e:
            logger.error(f"Failed to open remote branch: {e}")
            raise GitOperationError("open remote branch", str(e)) from e

        logger.info(f"Remote branch {branch_name} opened successfully at {worktree_path}")
        return worktree_path
