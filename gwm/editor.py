"""Open worktrees in an external editor.

Opening is best effort: failures are logged and reported through the return
value, never raised.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

from .worktree.config import DEFAULT_EDITOR
from .worktree.runner import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)


def is_wsl() -> bool:
    """Detect if running under WSL."""
    try:
        with open("/proc/version", "r", encoding="utf-8") as f:
            version = f.read().lower()
        if "microsoft" in version or "wsl" in version:
            return True
    except OSError:
        pass
    return "WSL_DISTRO_NAME" in os.environ


def is_editor_available(
    editor: str = DEFAULT_EDITOR, runner: Optional[ProcessRunner] = None
) -> bool:
    """Check whether the editor command can be run."""
    runner = runner or SubprocessRunner()
    return runner.run(editor, ["--version"]).ok


def open_in_editor(
    path: Union[Path, str],
    editor: str = DEFAULT_EDITOR,
    runner: Optional[ProcessRunner] = None,
) -> bool:
    """Open ``path`` in the editor.

    Under WSL the editor is started with a ``wsl+<distro>`` remote so the
    Windows-side editor attaches to the Linux filesystem.

    Returns:
        True if the editor command succeeded.
    """
    runner = runner or SubprocessRunner()

    if is_wsl():
        distro = os.environ.get("WSL_DISTRO_NAME", "Ubuntu")
        logger.info(f"Opening in {editor} with WSL remote...")
        args = ["--remote", f"wsl+{distro}", str(path)]
    elif sys.platform == "darwin" or sys.platform.startswith("linux"):
        logger.info(f"Opening in {editor}...")
        args = [str(path)]
    else:
        logger.info(f"{editor} not available or unsupported platform")
        return False

    result = runner.run(editor, args)
    if not result.ok:
        logger.warning(f"Could not open {editor}: {result.stderr.strip()}")
        return False
    return True


def prompt_to_open(
    path: Union[Path, str],
    editor: str = DEFAULT_EDITOR,
    runner: Optional[ProcessRunner] = None,
) -> bool:
    """Print where the worktree lives and try to open it in the editor."""
    runner = runner or SubprocessRunner()

    if not is_editor_available(editor, runner):
        print(f"{editor} is not available in PATH")
        print(f"You can now work in:\n  cd {path}")
        return False

    print(f"You can now work in:\n  cd {path}")
    print(f"Opening in {editor}...")

    opened = open_in_editor(path, editor, runner)
    if not opened:
        print(f"Failed to open {editor} automatically")
        print(f'You can manually open: {editor} "{path}"')
    return opened
