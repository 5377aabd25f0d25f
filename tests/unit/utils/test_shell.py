"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from deploykit.utils.shell import (
    CommandResult,
    command_exists,
    format_command,
    run_command,
)


class TestCommandResult:
    """Tests for CommandResult dataclass."""

    def test_success(self) -> None:
        """Exit code zero is success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success is True
        assert CommandResult(stdout="", stderr="", returncode=1).success is False

    def test_error_message_uses_stderr(self) -> None:
        """Stripped stderr is preferred."""
        result = CommandResult(stdout="", stderr="  bad feed\n", returncode=1)

        assert result.error_message("fallback") == "bad feed"

    def test_error_message_fallback(self) -> None:
        """Empty stderr falls back."""
        result = CommandResult(stdout="", stderr=" \n", returncode=1)

        assert result.error_message("exit code 1") == "exit code 1"


class TestRunCommand:
    """Tests for run_command function."""

    @patch("deploykit.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command wraps the subprocess result."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["nipkg", "info"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=3)

    @patch("deploykit.utils.shell.subprocess.run")
    def test_passes_options(self, mock_run: MagicMock) -> None:
        """Timeout and cwd are forwarded; errors never raise on exit code."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["nipkg", "info"], timeout=5.0, cwd="/tmp")

        kwargs = mock_run.call_args.kwargs
        assert kwargs["timeout"] == 5.0
        assert kwargs["cwd"] == "/tmp"
        assert kwargs["check"] is False
        assert kwargs["capture_output"] is True
        assert kwargs["errors"] == "replace"

    @patch("deploykit.utils.shell.subprocess.run")
    def test_timeout_propagates(self, mock_run: MagicMock) -> None:
        """Timeouts are raised to the caller."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["nipkg"], timeout=1.0)

        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["nipkg"], timeout=1.0)

    def test_raises_file_not_found(self) -> None:
        """run_command raises FileNotFoundError for missing commands."""
        with pytest.raises(FileNotFoundError):
            run_command(["nonexistent_command_xyz_12345"])


class TestCommandExists:
    """Tests for command_exists function."""

    def test_found(self) -> None:
        with patch("deploykit.utils.shell.shutil.which", return_value="/usr/bin/nipkg"):
            assert command_exists("nipkg") is True

    def test_missing(self) -> None:
        with patch("deploykit.utils.shell.shutil.which", return_value=None):
            assert command_exists("nipkg") is False


class TestFormatCommand:
    """Tests for format_command function."""

    def test_quotes_arguments(self) -> None:
        """Arguments with spaces are quoted."""
        assert format_command(["nipkg", "install", "a b"]) == "nipkg install 'a b'"
