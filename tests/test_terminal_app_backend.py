"""Tests for the Terminal.app focus strategy."""

from unittest.mock import patch

import pytest

from agent_sessions.backends.base import FocusCriteria
from agent_sessions.backends.terminal_app import TerminalAppStrategy


@pytest.fixture
def mock_running():
    with patch("agent_sessions.backends.terminal_app.is_app_running") as mock:
        mock.return_value = True
        yield mock


@pytest.fixture
def mock_script():
    with patch("agent_sessions.backends.terminal_app.run_found_script") as mock:
        mock.return_value = True
        yield mock


class TestTerminalAppStrategy:
    """Tests for TerminalAppStrategy."""

    def test_backend_name(self):
        """Backend name is 'terminal_app'."""
        assert TerminalAppStrategy().backend_name == "terminal_app"

    def test_focus_when_running(self, mock_running, mock_script):  # noqa: ARG002
        """Focuses the tab with the matching TTY."""
        assert TerminalAppStrategy().try_focus(FocusCriteria(tty="ttys004")) is True
        script = mock_script.call_args[0][0]
        assert 'tty of t is "/dev/ttys004"' in script

    def test_skipped_when_not_running(self, mock_running, mock_script):
        """Terminal.app isn't launched just to search it."""
        mock_running.return_value = False
        assert TerminalAppStrategy().try_focus(FocusCriteria(tty="ttys004")) is False
        mock_script.assert_not_called()

    def test_not_found(self, mock_running, mock_script):  # noqa: ARG002
        """No matching tab is failure."""
        mock_script.return_value = False
        assert TerminalAppStrategy().try_focus(FocusCriteria(tty="ttys004")) is False

    def test_requires_tty(self, mock_running, mock_script):
        """Name hints alone aren't supported."""
        assert TerminalAppStrategy().try_focus(FocusCriteria(name_hint="app")) is False
        mock_running.assert_not_called()
        mock_script.assert_not_called()

    def test_unsafe_tty(self, mock_running, mock_script):  # noqa: ARG002
        """Unsafe TTY values are rejected."""
        assert TerminalAppStrategy().try_focus(FocusCriteria(tty='tty"s')) is False
        mock_script.assert_not_called()
