"""Storage for per-repository configuration."""

import json
import logging
from pathlib import Path
from typing import Optional

from .errors import ConfigUnreadableError
from .models import RepositoryConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".worktree.json"


class RepositoryConfigStore:
    """Reads and writes the ``.worktree.json`` file of a repository directory."""

    def __init__(self, repository_path: Path):
        """Initialize config store for a repository directory."""
        self.repository_path = Path(repository_path)
        self.config_path = self.repository_path / CONFIG_FILENAME

    def save(self, config: RepositoryConfig) -> None:
        """Save config to disk, overwriting any previous file.

        The repository directory must already exist; no parent directories
        are created.
        """
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
        logger.debug(f"Saved repository config to {self.config_path}")

    def load(self) -> Optional[RepositoryConfig]:
        """Load config from disk.

        Returns None when the file does not exist, or when it exists but
        cannot be parsed (a warning is logged in that case).
        """
        if not self.config_path.exists():
            return None

        try:
            return self._read()
        except ConfigUnreadableError as e:
            logger.warning(str(e))
            return None

    def get_default_branch(self) -> Optional[str]:
        """Get the stored default branch, if any."""
        config = self.load()
        if config and config.default_branch:
            return config.default_branch
        return None

    def _read(self) -> RepositoryConfig:
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigUnreadableError(self.config_path, str(e)) from e

        if not isinstance(data, dict):
            raise ConfigUnreadableError(self.config_path, "expected a JSON object")

        try:
            return RepositoryConfig.from_dict(data)
        except KeyError as e:
            raise ConfigUnreadableError(self.config_path, f"missing field {e}") from e
