"""Configuration management for gwm."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Union

import tomli
import tomli_w

from .errors import ConfigFileError

DEFAULT_BRANCH = "main"
DEFAULT_EDITOR = "code"


def _get_default_base_dir() -> Path:
    """Get the default repositories directory, honoring GWM_BASE_DIR."""
    env_dir = os.environ.get("GWM_BASE_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.cwd() / "repositories"


@dataclass
class GwmConfig:
    """User-level configuration for gwm."""

    base_dir: Union[Path, str] = field(default_factory=_get_default_base_dir)
    default_branch: str = DEFAULT_BRANCH
    editor: str = DEFAULT_EDITOR

    def __post_init__(self):
        """Ensure base_dir is an absolute Path with user expanded."""
        if isinstance(self.base_dir, str):
            self.base_dir = Path(self.base_dir).expanduser()
        if not self.base_dir.is_absolute():
            self.base_dir = Path.cwd() / self.base_dir

    def to_dict(self) -> Dict:
        """Convert to dictionary for TOML serialization."""
        return {
            "gwm": {
                "base_dir": str(self.base_dir),
                "default_branch": self.default_branch,
                "editor": self.editor,
            }
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "GwmConfig":
        """Create from dictionary."""
        gwm_data = data.get("gwm", {})

        # GWM_BASE_DIR wins over the file
        if os.environ.get("GWM_BASE_DIR") or "base_dir" not in gwm_data:
            base_dir: Union[Path, str] = _get_default_base_dir()
        else:
            base_dir = gwm_data["base_dir"]

        return cls(
            base_dir=base_dir,
            default_branch=gwm_data.get("default_branch", DEFAULT_BRANCH),
            editor=gwm_data.get("editor", DEFAULT_EDITOR),
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    config_dir = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_dir / "gwm" / "config.toml"


def load_config() -> Dict:
    """Load configuration from file, raising ConfigFileError on invalid TOML."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomli.load(f)
    except (tomli.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigFileError(config_path, str(e)) from e


def save_config(config: Dict) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)


def get_gwm_config() -> GwmConfig:
    """Get gwm configuration, loading from file if exists."""
    config_data = load_config()
    return GwmConfig.from_dict(config_data)
