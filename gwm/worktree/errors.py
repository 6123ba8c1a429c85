"""Exceptions raised by the worktree backend."""

from typing import List, Optional, Sequence


class WorktreeError(RuntimeError):
    """Base exception for all worktree manager errors."""


class WorkspaceAlreadyExistsError(WorktreeError):
    """Raised when cloning into a repository directory that already exists."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Repository directory already exists: {path}")


class RepositoryNotFoundError(WorktreeError):
    """Raised when the bare repository has not been cloned yet."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Repository {name} not found. Please clone first.")


class WorktreeAlreadyExistsError(WorktreeError):
    """Raised when the worktree directory for a branch is already present."""

    def __init__(self, branch: str, path=None):
        self.branch = branch
        self.path = path
        super().__init__(f"Worktree for branch {branch} already exists")


class WorktreeDirtyError(WorktreeError):
    """Raised when a worktree cannot be removed without --force."""

    def __init__(self, repository: str, branch: str):
        self.repository = repository
        self.branch = branch
        super().__init__(
            f"Worktree {branch} contains modified or untracked files. "
            f"Use 'gwm remove-force {repository} {branch}' to force removal."
        )


class InvalidRepositoryUrlError(WorktreeError, ValueError):
    """Raised when a repository name cannot be derived from a URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid repository URL: {url}")


class RemoteBranchNotFoundError(WorktreeError):
    """Raised when a branch is missing on the remote."""

    def __init__(self, branch: str, available: Optional[List[str]] = None):
        self.branch = branch
        self.available = available or []
        super().__init__(f"Remote branch '{branch}' not found. Please check the branch name.")


class GitCommandError(WorktreeError):
    """A git invocation exited with a non-zero status."""

    def __init__(self, args: Sequence[str], exit_code: int, stderr: str):
        self.args_list = list(args)
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"git {' '.join(self.args_list)} failed with exit code {exit_code}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)


class GitOperationError(WorktreeError):
    """A lifecycle operation failed; the underlying error is chained."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"Failed to {operation.replace('_', ' ')}"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ConfigUnreadableError(WorktreeError):
    """The repository config file exists but cannot be parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error reading repository config {path}: {reason}")


class ConfigFileError(WorktreeError):
    """The user config file exists but is not valid TOML."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error reading config file {path}: {reason}")
