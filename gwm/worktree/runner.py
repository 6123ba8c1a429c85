"""Process execution for the worktree backend.

Every git interaction goes through a ``ProcessRunner`` so the managers can
be driven by a fake in tests without a real git binary.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .errors import GitCommandError

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Captured outcome of an external command."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner(ABC):
    """Interface for invoking an external program.

    Subclasses implement ``run``; the managers only ever talk to this
    interface.
    """

    @abstractmethod
    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Optional[Union[Path, str]] = None,
    ) -> ProcessResult:
        """Run ``command`` with ``args`` in ``cwd`` and capture its output."""


class SubprocessRunner(ProcessRunner):
    """Runs commands with subprocess, waiting for each to finish."""

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Optional[Union[Path, str]] = None,
    ) -> ProcessResult:
        cmd: List[str] = [command] + list(args)
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            # Binary missing from PATH; report it like a failed command
            return ProcessResult(stdout="", stderr=str(e), exit_code=127)
        if result.stdout:
            logger.debug(f"{command} stdout: {result.stdout.strip()}")
        if result.stderr:
            logger.debug(f"{command} stderr: {result.stderr.strip()}")
        return ProcessResult(
            stdout=result.stdout,
            stderr=result.stderr,
            exit_code=result.returncode,
        )


def run_git(
    runner: ProcessRunner,
    args: Sequence[str],
    cwd: Optional[Union[Path, str]] = None,
) -> ProcessResult:
    """Run a git command, raising GitCommandError on a non-zero exit."""
    result = runner.run("git", args, cwd)
    if not result.ok:
        raise GitCommandError(args, result.exit_code, result.stderr)
    return result
