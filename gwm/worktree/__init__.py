"""Worktree backend for gwm."""

from .branch_manager import BranchManager
from .config import GwmConfig, get_gwm_config
from .errors import (
    ConfigFileError,
    ConfigUnreadableError,
    GitCommandError,
    GitOperationError,
    InvalidRepositoryUrlError,
    RemoteBranchNotFoundError,
    RepositoryNotFoundError,
    WorkspaceAlreadyExistsError,
    WorktreeAlreadyExistsError,
    WorktreeDirtyError,
    WorktreeError,
)
from .models import RepositoryConfig, WorktreeEntry
from .runner import ProcessResult, ProcessRunner, SubprocessRunner
from .storage import RepositoryConfigStore
from .worktree_manager import WorktreeManager, list_repositories, parse_repo_name

__all__ = [
    "BranchManager",
    "GwmConfig",
    "get_gwm_config",
    "ConfigFileError",
    "ConfigUnreadableError",
    "GitCommandError",
    "GitOperationError",
    "InvalidRepositoryUrlError",
    "RemoteBranchNotFoundError",
    "RepositoryNotFoundError",
    "WorkspaceAlreadyExistsError",
    "WorktreeAlreadyExistsError",
    "WorktreeDirtyError",
    "WorktreeError",
    "RepositoryConfig",
    "WorktreeEntry",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "RepositoryConfigStore",
    "WorktreeManager",
    "list_repositories",
    "parse_repo_name",
]
