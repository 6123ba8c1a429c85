"""Data models for worktree backend."""

from dataclasses import dataclass
from typing import Dict


@dataclass
class RepositoryConfig:
    """Per-repository settings recorded at clone time."""

    default_branch: str
    repository_url: str

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "defaultBranch": self.default_branch,
            "repositoryUrl": self.repository_url,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "RepositoryConfig":
        """Create from dictionary."""
        return cls(
            default_branch=data["defaultBranch"],
            repository_url=data["repositoryUrl"],
        )


@dataclass
class WorktreeEntry:
    """One worktree as reported by ``git worktree list --porcelain``."""

    path: str
    branch: str

    @property
    def label(self) -> str:
        return f"{self.path} ({self.branch})"
