"""WezTerm focus strategy.

Implements FocusStrategy using the wezterm CLI.
"""

import json
import logging
import shutil
import subprocess

from agent_sessions.backends.applescript import DEFAULT_TIMEOUT, run_osascript
from agent_sessions.backends.base import FocusCriteria, FocusStrategy, tty_matches

logger = logging.getLogger(__name__)


def _run_wezterm(*args: str, timeout: int = DEFAULT_TIMEOUT) -> tuple[int, str, str]:
    """Run a wezterm CLI command.

    Args:
        *args: Command arguments to pass to wezterm cli.
        timeout: Command timeout in seconds.

    Returns:
        Tuple of (return_code, stdout, stderr).
    """
    cmd = ["wezterm", "cli", *args]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return (result.returncode, result.stdout or "", result.stderr or "")
    except subprocess.TimeoutExpired:
        return (1, "", "Command timed out")
    except FileNotFoundError:
        return (1, "", "wezterm not found")


class WezTermStrategy(FocusStrategy):
    """Focuses WezTerm panes by TTY."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @property
    def backend_name(self) -> str:
        """Return the backend identifier."""
        return "wezterm"

    def is_available(self) -> bool:
        """Check if the wezterm CLI is installed."""
        return shutil.which("wezterm") is not None

    def find_pane_id(self, tty: str) -> str | None:
        """Find the id of the pane running on a TTY.

        Uses 'wezterm cli list --format json'.
        """
        returncode, stdout, _ = _run_wezterm("list", "--format", "json", timeout=self.timeout)
        if returncode != 0:
            return None

        try:
            panes = json.loads(stdout)
        except json.JSONDecodeError:
            return None

        for pane in panes:
            if tty_matches(pane.get("tty_name"), tty):
                return str(pane.get("pane_id", ""))
        return None

    def try_focus(self, criteria: FocusCriteria) -> bool:
        if not criteria.tty or not self.is_available():
            return False

        pane_id = self.find_pane_id(criteria.tty)
        if not pane_id:
            return False

        returncode, _, stderr = _run_wezterm("activate-pane", "--pane-id", pane_id, timeout=self.timeout)
        if returncode != 0:
            logger.debug(f"wezterm activate-pane failed: {stderr.strip()}")
            return False

        # activate-pane doesn't raise the window on macOS
        run_osascript('tell application "WezTerm" to activate', timeout=self.timeout)
        return True
