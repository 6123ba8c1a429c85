"""Test fixtures for gwm tests."""

# Note: Fixtures are imported directly from modules in conftest.py
# This __init__.py enables the fixtures package to be imported

__all__ = [
    "isolated_gwm_env",
    "local_git_repo",
    "local_git_repo_develop_head",
    "cloned_manager",
    "FakeGitRunner",
    "fake_runner",
]
