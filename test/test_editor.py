"""Tests for editor launch."""
# pylint: disable=redefined-outer-name

from unittest.mock import mock_open, patch

import pytest

from gwm import editor
from gwm.editor import is_editor_available, is_wsl, open_in_editor, prompt_to_open


@pytest.fixture
def native_linux(monkeypatch):
    """Pretend to run on plain Linux."""
    monkeypatch.setattr(editor, "is_wsl", lambda: False)
    monkeypatch.setattr(editor.sys, "platform", "linux")


class TestIsWsl:
    """Tests for WSL detection."""

    def test_proc_version_mentions_microsoft(self, monkeypatch):
        monkeypatch.delenv("WSL_DISTRO_NAME", raising=False)
        data = "Linux version 5.15.90.1-microsoft-standard-WSL2"
        with patch("builtins.open", mock_open(read_data=data)):
            assert is_wsl() is True

    def test_plain_linux(self, monkeypatch):
        monkeypatch.delenv("WSL_DISTRO_NAME", raising=False)
        with patch("builtins.open", mock_open(read_data="Linux version 6.1.0-generic")):
            assert is_wsl() is False

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("WSL_DISTRO_NAME", "Debian")
        with patch("builtins.open", side_effect=OSError("no /proc")):
            assert is_wsl() is True


class TestOpenInEditor:
    """Tests for launching the editor."""

    def test_available(self, fake_runner):
        assert is_editor_available("code", fake_runner) is True
        assert fake_runner.commands == [["code", "--version"]]

    def test_not_available(self, fake_runner):
        fake_runner.on("--version", exit_code=127)
        assert is_editor_available("code", fake_runner) is False

    def test_native_open(self, fake_runner, native_linux, tmp_path):
        assert open_in_editor(tmp_path, runner=fake_runner) is True
        assert fake_runner.commands == [["code", str(tmp_path)]]

    def test_wsl_open(self, fake_runner, monkeypatch, tmp_path):
        monkeypatch.setattr(editor, "is_wsl", lambda: True)
        monkeypatch.setenv("WSL_DISTRO_NAME", "Debian")

        assert open_in_editor(tmp_path, runner=fake_runner) is True
        assert fake_runner.commands == [["code", "--remote", "wsl+Debian", str(tmp_path)]]

    def test_wsl_default_distro(self, fake_runner, monkeypatch, tmp_path):
        monkeypatch.setattr(editor, "is_wsl", lambda: True)
        monkeypatch.delenv("WSL_DISTRO_NAME", raising=False)

        open_in_editor(tmp_path, runner=fake_runner)
        assert fake_runner.commands[0][2] == "wsl+Ubuntu"

    def test_unsupported_platform(self, fake_runner, monkeypatch, tmp_path):
        monkeypatch.setattr(editor, "is_wsl", lambda: False)
        monkeypatch.setattr(editor.sys, "platform", "win32")

        assert open_in_editor(tmp_path, runner=fake_runner) is False
        assert fake_runner.commands == []

    def test_failure_is_not_raised(self, fake_runner, native_linux, tmp_path):
        fake_runner.on(str(tmp_path), stderr="boom", exit_code=1)
        assert open_in_editor(tmp_path, runner=fake_runner) is False


class TestPromptToOpen:
    """Tests for the printed hints around opening."""

    def test_editor_missing(self, fake_runner, tmp_path, capsys):
        fake_runner.on("--version", exit_code=127)

        assert prompt_to_open(tmp_path, runner=fake_runner) is False

        out = capsys.readouterr().out
        assert "code is not available in PATH" in out
        assert f"cd {tmp_path}" in out

    def test_opens(self, fake_runner, native_linux, tmp_path, capsys):
        assert prompt_to_open(tmp_path, runner=fake_runner) is True
        assert "Opening in code" in capsys.readouterr().out

    def test_open_fails(self, fake_runner, native_linux, tmp_path, capsys):
        fake_runner.on(str(tmp_path), exit_code=1)

        assert prompt_to_open(tmp_path, runner=fake_runner) is False
        assert "You can manually open" in capsys.readouterr().out
