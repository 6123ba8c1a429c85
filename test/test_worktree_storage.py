"""Tests for repository config storage."""
# pylint: disable=redefined-outer-name

import json
import logging
from pathlib import Path

import pytest

from gwm.worktree.models import RepositoryConfig
from gwm.worktree.storage import CONFIG_FILENAME, RepositoryConfigStore


@pytest.fixture
def repo_dir(tmp_path: Path) -> Path:
    """Create an empty repository directory."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def store(repo_dir: Path) -> RepositoryConfigStore:
    """Create a config store for the repository directory."""
    return RepositoryConfigStore(repo_dir)


class TestRepositoryConfigStore:
    """Tests for RepositoryConfigStore class."""

    def test_config_path(self, store, repo_dir):
        """Test that the config file lives in the repository directory."""
        assert store.config_path == repo_dir / CONFIG_FILENAME
        assert CONFIG_FILENAME == ".worktree.json"

    def test_load_missing_returns_none(self, store):
        """Test that a missing file is reported as no config."""
        assert store.load() is None
        assert store.get_default_branch() is None

    def test_save_and_load(self, store):
        """Test saving and loading a config."""
        config = RepositoryConfig(
            default_branch="develop", repository_url="https://example.com/group/project.git"
        )
        store.save(config)

        assert store.load() == config
        assert store.get_default_branch() == "develop"

    def test_save_writes_camel_case_json(self, store):
        """Test the on-disk format."""
        store.save(RepositoryConfig(default_branch="main", repository_url="git@host:p.git"))

        with open(store.config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        assert data == {"defaultBranch": "main", "repositoryUrl": "git@host:p.git"}

    def test_save_overwrites(self, store):
        """Test that save replaces an existing file."""
        store.save(RepositoryConfig(default_branch="main", repository_url="a"))
        store.save(RepositoryConfig(default_branch="trunk", repository_url="b"))

        assert store.load() == RepositoryConfig(default_branch="trunk", repository_url="b")

    def test_save_without_directory_fails(self, tmp_path):
        """Test that saving into a missing directory raises."""
        store = RepositoryConfigStore(tmp_path / "missing")

        with pytest.raises(FileNotFoundError):
            store.save(RepositoryConfig(default_branch="main", repository_url="a"))

    def test_load_invalid_json_is_absent(self, store, caplog):
        """Test that unparseable files degrade to no config with a warning."""
        store.config_path.write_text("{not json")

        with caplog.at_level(logging.WARNING):
            assert store.load() is None

        assert "Error reading repository config" in caplog.text

    def test_load_non_object_is_absent(self, store):
        """Test that a JSON value that is not an object is rejected."""
        store.config_path.write_text('["main"]')
        assert store.load() is None

    def test_load_missing_field_is_absent(self, store):
        """Test that a record without repositoryUrl is rejected."""
        store.config_path.write_text('{"defaultBranch": "main"}')
        assert store.load() is None
        assert store.get_default_branch() is None

    def test_empty_default_branch(self, store):
        """Test that an empty default branch counts as unset."""
        store.save(RepositoryConfig(default_branch="", repository_url="a"))
        assert store.get_default_branch() is None

    def test_reads_file_written_elsewhere(self, store):
        """Test that the store re-reads the file on each call."""
        assert store.load() is None
        store.config_path.write_text(
            json.dumps({"defaultBranch": "master", "repositoryUrl": "x"})
        )
        assert store.get_default_branch() == "master"

    def test_load_non_utf8_is_absent(self, store, caplog):
        """Test that a file with undecodable bytes degrades to no config."""
        store.config_path.write_bytes(b'{"defaultBranch": "\xff\xfe"}')

        with caplog.at_level(logging.WARNING):
            assert store.load() is None
            assert store.get_default_branch() is None

        assert "Error reading repository config" in caplog.text
