"""Tests for the WezTerm focus strategy."""

import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from agent_sessions.backends.base import FocusCriteria
from agent_sessions.backends.wezterm import WezTermStrategy, _run_wezterm

PANES = json.dumps(
    [
        {"pane_id": 1, "title": "bash", "tty_name": "/dev/ttys001", "cwd": "file:///Users/u"},
        {"pane_id": 7, "title": "claude", "tty_name": "/dev/ttys005", "cwd": "file:///Users/u/app"},
    ]
)


@pytest.fixture
def mock_wezterm_available():
    """Mock wezterm as available."""
    with patch("agent_sessions.backends.wezterm.shutil.which") as mock_which:
        mock_which.return_value = "/usr/local/bin/wezterm"
        yield mock_which


@pytest.fixture
def strategy(mock_wezterm_available):  # noqa: ARG001
    """Create a WezTerm strategy with mocked availability."""
    return WezTermStrategy()


class TestWezTermStrategyInit:
    """Tests for availability."""

    def test_backend_name(self, strategy):
        """Backend name is 'wezterm'."""
        assert strategy.backend_name == "wezterm"

    def test_is_available_when_installed(self, strategy):
        """is_available returns True when wezterm is installed."""
        assert strategy.is_available() is True

    def test_is_available_when_not_installed(self):
        """is_available returns False when wezterm is not installed."""
        with patch("agent_sessions.backends.wezterm.shutil.which", return_value=None):
            assert WezTermStrategy().is_available() is False


class TestRunWezterm:
    """Tests for _run_wezterm."""

    @patch("agent_sessions.backends.wezterm.subprocess.run")
    def test_builds_cli_command(self, mock_run):
        """Arguments go after 'wezterm cli'."""
        mock_run.return_value = MagicMock(returncode=0, stdout="[]", stderr="")
        assert _run_wezterm("list", "--format", "json") == (0, "[]", "")
        assert mock_run.call_args[0][0] == ["wezterm", "cli", "list", "--format", "json"]

    @patch("agent_sessions.backends.wezterm.subprocess.run")
    def test_timeout(self, mock_run):
        """Timeouts are failures."""
        mock_run.side_effect = subprocess.TimeoutExpired("wezterm", 5)
        assert _run_wezterm("list") == (1, "", "Command timed out")


class TestFindPane:
    """Tests for find_pane_id."""

    @patch("agent_sessions.backends.wezterm._run_wezterm")
    def test_matches_tty(self, mock_run, strategy):
        """The pane on the TTY is found."""
        mock_run.return_value = (0, PANES, "")
        assert strategy.find_pane_id("ttys005") == "7"

    @patch("agent_sessions.backends.wezterm._run_wezterm")
    def test_no_match(self, mock_run, strategy):
        """Unknown TTYs aren't found."""
        mock_run.return_value = (0, PANES, "")
        assert strategy.find_pane_id("ttys009") is None

    @patch("agent_sessions.backends.wezterm._run_wezterm")
    def test_invalid_json(self, mock_run, strategy):
        """Unparsable output yields None."""
        mock_run.return_value = (0, "not json", "")
        assert strategy.find_pane_id("ttys005") is None

    @patch("agent_sessions.backends.wezterm._run_wezterm")
    def test_cli_failure(self, mock_run, strategy):
        """CLI errors yield None."""
        mock_run.return_value = (1, "", "no running wezterm")
        assert strategy.find_pane_id("ttys005") is None


class TestTryFocus:
    """Tests for try_focus."""

    @patch("agent_sessions.backends.wezterm.run_osascript")
    @patch("agent_sessions.backends.wezterm._run_wezterm")
    def test_activates_pane(self, mock_run, mock_osascript, strategy):
        """The matching pane is activated and the app raised."""
        mock_run.side_effect = [(0, PANES, ""), (0, "", "")]

        assert strategy.try_focus(FocusCriteria(tty="/dev/ttys005")) is True
        assert mock_run.call_args_list[1][0] == ("activate-pane", "--pane-id", "7")
        mock_osascript.assert_called_once()

    @patch("agent_sessions.backends.wezterm._run_wezterm")
    def test_activate_failure(self, mock_run, strategy):
        """A failed activation is failure."""
        mock_run.side_effect = [(0, PANES, ""), (1, "", "error")]
        assert strategy.try_focus(FocusCriteria(tty="ttys005")) is False

    @patch("agent_sessions.backends.wezterm._run_wezterm")
    def test_not_available(self, mock_run):
        """Nothing runs when wezterm isn't installed."""
        with patch("agent_sessions.backends.wezterm.shutil.which", return_value=None):
            assert WezTermStrategy().try_focus(FocusCriteria(tty="ttys005")) is False
        mock_run.assert_not_called()

    @patch("agent_sessions.backends.wezterm._run_wezterm")
    def test_requires_tty(self, mock_run, strategy):
        """Name hints alone aren't supported."""
        assert strategy.try_focus(FocusCriteria(name_hint="app")) is False
        mock_run.assert_not_called()
