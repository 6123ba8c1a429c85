"""Branch management for worktree backend."""

import logging
import re
from pathlib import Path
from typing import List, Optional

from .errors import GitCommandError
from .runner import ProcessRunner, SubprocessRunner, run_git

logger = logging.getLogger(__name__)

HEAD_REF_PATTERN = re.compile(r"refs/heads/(.+)$")
SYMREF_PATTERN = re.compile(r"^ref:\s*refs/heads/(\S+)\s+HEAD$")


class BranchManager:
    """Manages remote branch queries against a bare repository."""

    def __init__(self, runner: Optional[ProcessRunner] = None, remote: str = "origin"):
        """Initialize branch manager."""
        self.runner = runner or SubprocessRunner()
        self.remote = remote

    @property
    def tracking_refspec(self) -> str:
        return f"+refs/heads/*:refs/remotes/{self.remote}/*"

    def configure_tracking(self, repo_path: Path) -> None:
        """Make plain fetches populate refs/remotes/<remote>/*.

        A bare clone has no fetch refspec, so without this a fetch only
        updates FETCH_HEAD.
        """
        run_git(
            self.runner,
            ["config", f"remote.{self.remote}.fetch", self.tracking_refspec],
            cwd=repo_path,
        )

    def fetch(self, repo_path: Path, refspec: Optional[str] = None, prune: bool = False) -> None:
        """Fetch from the remote, optionally with an explicit refspec."""
        args = ["fetch"]
        if prune:
            args.append("--prune")
        args.append(self.remote)
        if refspec:
            args.append(refspec)
        result = run_git(self.runner, args, cwd=repo_path)
        logger.debug(f"Fetch output: {result.stderr.strip()}")

    def fetch_all(self, repo_path: Path, prune: bool = False) -> None:
        """Fetch every remote branch into its remote-tracking ref."""
        self.fetch(repo_path, self.tracking_refspec, prune=prune)

    def fetch_branch(self, repo_path: Path, branch: str) -> None:
        """Fetch one branch into refs/remotes/<remote>/<branch>."""
        self.fetch(repo_path, f"{branch}:refs/remotes/{self.remote}/{branch}")

    def get_remote_branches(self, repo_path: Path) -> List[str]:
        """Get sorted, de-duplicated branch names straight from the remote."""
        result = run_git(self.runner, ["ls-remote", "--heads", self.remote], cwd=repo_path)

        branches = set()
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            # Format: <hash>\trefs/heads/<branch>
            match = HEAD_REF_PATTERN.search(line.strip())
            if match:
                branches.add(match.group(1))

        return sorted(branches)

    def get_remote_head(self, repo_path: Path) -> str:
        """Ask the remote which branch its HEAD points to."""
        result = run_git(
            self.runner, ["ls-remote", "--symref", self.remote, "HEAD"], cwd=repo_path
        )
        for line in result.stdout.splitlines():
            match = SYMREF_PATTERN.match(line.strip())
            if match:
                return match.group(1)
        raise GitCommandError(
            ["ls-remote", "--symref", self.remote, "HEAD"],
            0,
            f"{self.remote} did not report a symbolic HEAD",
        )

    def detect_default_branch(self, repo_path: Path, fallback: str) -> str:
        """Get the default branch of the remote.

        Tries the remote's symbolic HEAD first, then looks for main or
        master among the remote branches, and finally returns ``fallback``.
        """
        try:
            branch = self.get_remote_head(repo_path)
            logger.debug(f"Remote HEAD points to {branch}")
            return branch
        except GitCommandError as e:
            logger.debug(f"Could not read remote HEAD: {e}")

        try:
            branches = self.get_remote_branches(repo_path)
            if "main" in branches:
                return "main"
            if "master" in branches:
                return "master"
        except GitCommandError as e:
            logger.debug(f"Could not list remote branches: {e}")

        logger.info(f"Falling back to default branch {fallback}")
        return fallback
