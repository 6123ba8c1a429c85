"""gwm - Git Worktree Manager CLI.

Usage:
    gwm clone <repository-url>
    gwm branch <repo> <branch> [base] [--pull]
    gwm branch-code <repo> <branch> [base] [--pull]
    gwm open <repo> <branch>
    gwm remote-branches <repo>
    gwm list [repo]
    gwm remove <repo> <branch>
    gwm remove-force <repo> <branch>
    gwm config [init]
"""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Callable, Dict, List

from .editor import prompt_to_open
from .worktree.config import GwmConfig, get_config_path, get_gwm_config, save_config
from .worktree.errors import WorktreeError
from .worktree.worktree_manager import WorktreeManager, list_repositories, parse_repo_name

logger = logging.getLogger(__name__)


def get_version() -> str:
    """Get the installed gwm version."""
    try:
        return version("gwm")
    except PackageNotFoundError:
        return "unknown"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging; progress messages go to stderr."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


def print_help() -> None:
    """Print usage information."""
    print("gwm - Git Worktree Manager")
    print("")
    print("Usage:")
    print("  gwm clone <repository-url>                 Clone a repository")
    print("  gwm branch <repo> <branch> [base]          Create a new branch")
    print("  gwm branch-code <repo> <branch> [base]     Create branch & open in editor")
    print("  gwm open <repo> <branch>                   Check out an existing remote branch")
    print("  gwm remote-branches <repo>                 List branches on the remote")
    print("  gwm list [repo]                            List worktrees (or all repos)")
    print("  gwm remove <repo> <branch>                 Remove a worktree")
    print("  gwm remove-force <repo> <branch>           Force remove (discard changes)")
    print("  gwm config [init]                          Show or write the config file")
    print("")
    print("Options:")
    print("  --pull           Fetch from the remote before creating a branch")
    print("  -v, --verbose    Show git commands and their output")
    print("  -h, --help       Show this help")
    print("  --version        Show version")
    print("")
    print("Examples:")
    print("  gwm clone https://github.com/example/project.git")
    print("  gwm branch project feature1")
    print("  gwm branch project feature2 develop")
    print("  gwm list project")
    print("  gwm remove project feature1")


def usage_error(usage: str) -> int:
    print(f"Usage: gwm {usage}", file=sys.stderr)
    return 1


def get_manager(repository_name: str, config: GwmConfig) -> WorktreeManager:
    """Create a manager for a repository under the configured base dir."""
    return WorktreeManager(
        base_dir=config.base_dir,
        repository_name=repository_name,
        default_branch=config.default_branch,
    )


def cmd_clone(args: List[str], options: Dict, config: GwmConfig) -> int:
    if not args:
        return usage_error("clone <repository-url>")

    url = args[0]
    repository_name = parse_repo_name(url)
    manager = get_manager(repository_name, config)
    manager.clone(url)

    print("\nNext steps:")
    print(f"  gwm branch {repository_name} <branch-name>     # Create new branch")
    print(f"  gwm list {repository_name}                    # List worktrees")
    return 0


def _create_branch(args: List[str], options: Dict, config: GwmConfig, open_editor: bool) -> int:
    command = "branch-code" if open_editor else "branch"
    if len(args) < 2:
        return usage_error(f"{command} <repo> <branch> [base] [--pull]")

    repository_name, branch_name = args[0], args[1]
    base_branch = args[2] if len(args) > 2 else None

    manager = get_manager(repository_name, config)
    worktree_path = manager.create_branch(
        branch_name, base_branch, pull_latest=options.get("pull", False)
    )

    if open_editor:
        prompt_to_open(worktree_path, config.editor)
    else:
        print("\nBranch created! You can now work in:")
        print(f"  cd {worktree_path}")
    return 0


def cmd_branch(args: List[str], options: Dict, config: GwmConfig) -> int:
    return _create_branch(args, options, config, open_editor=False)


def cmd_branch_code(args: List[str], options: Dict, config: GwmConfig) -> int:
    return _create_branch(args, options, config, open_editor=True)


def cmd_open(args: List[str], options: Dict, config: GwmConfig) -> int:
    if len(args) < 2:
        return usage_error("open <repo> <branch>")

    manager = get_manager(args[0], config)
    worktree_path = manager.open_remote_branch(args[1])
    print("\nRemote branch opened! You can now work in:")
    print(f"  cd {worktree_path}")
    return 0


def cmd_remote_branches(args: List[str], options: Dict, config: GwmConfig) -> int:
    if not args:
        return usage_error("remote-branches <repo>")

    manager = get_manager(args[0], config)
    branches = manager.list_remote_branches()
    if not branches:
        print("No remote branches found")
        return 0
    print(f"Remote branches for {args[0]}:")
    for branch in branches:
        print(f"  {branch}")
    return 0


def cmd_list(args: List[str], options: Dict, config: GwmConfig) -> int:
    if not args:
        repos = list_repositories(config.base_dir)
        if not repos:
            print("No repositories found.")
            return 0
        print("Available repositories:")
        for repo in repos:
            print(f"  - {repo}")
        return 0

    manager = get_manager(args[0], config)
    worktrees = manager.list_worktrees()
    print(f"Worktrees for {args[0]}:")
    for worktree in worktrees:
        print(f"  {worktree}")
    return 0


def cmd_remove(args: List[str], options: Dict, config: GwmConfig) -> int:
    if len(args) < 2:
        return usage_error("remove <repo> <branch>")

    manager = get_manager(args[0], config)
    manager.remove_worktree(args[1], force=False)
    return 0


def cmd_remove_force(args: List[str], options: Dict, config: GwmConfig) -> int:
    if len(args) < 2:
        return usage_error("remove-force <repo> <branch>")

    print("Force removing worktree (this will discard any unsaved changes)")
    manager = get_manager(args[0], config)
    manager.remove_worktree(args[1], force=True)
    return 0


def cmd_config(args: List[str], options: Dict, config: GwmConfig) -> int:
    if args and args[0] == "init":
        save_config(config.to_dict())
        print(f"Wrote {get_config_path()}")
        return 0

    print(f"Config file: {get_config_path()}")
    print(f"  base_dir = {config.base_dir}")
    print(f"  default_branch = {config.default_branch}")
    print(f"  editor = {config.editor}")
    return 0


COMMANDS: Dict[str, Callable[[List[str], Dict, GwmConfig], int]] = {
    "clone": cmd_clone,
    "branch": cmd_branch,
    "create": cmd_branch,
    "branch-code": cmd_branch_code,
    "open": cmd_open,
    "remote-branches": cmd_remote_branches,
    "list": cmd_list,
    "remove": cmd_remove,
    "remove-force": cmd_remove_force,
    "config": cmd_config,
}


def main() -> int:
    """Main entry point for gwm CLI."""
    argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help", "help"):
        print_help()
        return 0

    if argv[0] == "--version":
        print(f"gwm {get_version()}")
        return 0

    options = {
        "pull": "--pull" in argv,
        "verbose": "-v" in argv or "--verbose" in argv,
    }
    positional = [a for a in argv if a not in ("--pull", "-v", "--verbose")]
    setup_logging(options["verbose"])

    if not positional:
        print_help()
        return 0

    command, args = positional[0], positional[1:]
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Unknown command: {command}", file=sys.stderr)
        print_help()
        return 1

    try:
        return handler(args, options, get_gwm_config())
    except WorktreeError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
