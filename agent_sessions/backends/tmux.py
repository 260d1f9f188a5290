"""tmux focus strategy.

A process running inside tmux has the pane's TTY, not the emulator's, so
focusing it is two steps: select the pane inside tmux, then focus the
emulator window that hosts the tmux client attached to that session.
"""

import logging
import shutil
import subprocess
from collections.abc import Sequence

from agent_sessions.backends.applescript import DEFAULT_TIMEOUT, run_found_script
from agent_sessions.backends.base import FocusCriteria, FocusStrategy, tty_matches

logger = logging.getLogger(__name__)

PANE_FORMAT = "#{pane_tty}|#{session_name}:#{window_index}.#{pane_index}"

# Used when the client's own terminal can't be focused
_ACTIVATE_ANY_HOST_SCRIPT = """
tell application "System Events"
    if exists process "iTerm2" then
        tell application "iTerm2" to activate
        return "found"
    else if exists process "Terminal" then
        tell application "Terminal" to activate
        return "found"
    end if
end tell
return "not found"
"""


def _run_tmux(*args: str, timeout: int = DEFAULT_TIMEOUT) -> tuple[int, str, str]:
    """Run a tmux command.

    Args:
        *args: Command arguments to pass to tmux.
        timeout: Command timeout in seconds.

    Returns:
        Tuple of (return_code, stdout, stderr).
    """
    cmd = ["tmux", *args]
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
        return (1, "", "tmux not found")


def parse_pane_list(output: str) -> list[tuple[str, str]]:
    """Parse ``list-panes`` output into (pane_tty, target) pairs."""
    panes = []
    for line in output.splitlines():
        if "|" not in line:
            continue
        pane_tty, target = line.split("|", 1)
        if pane_tty and target:
            panes.append((pane_tty.strip(), target.strip()))
    return panes


def session_of_target(target: str) -> str:
    """Get the session name of a "session:window.pane" target."""
    return target.rsplit(":", 1)[0]


class TmuxStrategy(FocusStrategy):
    """Focuses the tmux pane whose TTY matches, then its hosting emulator."""

    def __init__(
        self,
        emulator_strategies: Sequence[FocusStrategy] = (),
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """Initialize the strategy.

        Args:
            emulator_strategies: Strategies used to focus the tmux client's
                own terminal, tried in order.
            timeout: Timeout in seconds for each tmux or osascript call.
        """
        self.emulator_strategies = list(emulator_strategies)
        self.timeout = timeout

    @property
    def backend_name(self) -> str:
        """Return the backend identifier."""
        return "tmux"

    def is_available(self) -> bool:
        """Check if the tmux binary is installed."""
        return shutil.which("tmux") is not None

    def find_pane(self, tty: str) -> str | None:
        """Find the target ("session:window.pane") of the pane on a TTY."""
        returncode, stdout, stderr = _run_tmux("list-panes", "-a", "-F", PANE_FORMAT, timeout=self.timeout)
        if returncode != 0:
            logger.debug(f"tmux not running or no sessions: {stderr.strip()}")
            return None

        for pane_tty, target in parse_pane_list(stdout):
            if tty_matches(pane_tty, tty):
                return target
        return None

    def get_client_tty(self, session_name: str) -> str | None:
        """Get the TTY of the first tmux client attached to a session."""
        returncode, stdout, _ = _run_tmux(
            "list-clients", "-t", session_name, "-F", "#{client_tty}", timeout=self.timeout
        )
        if returncode != 0 or not stdout.strip():
            return None
        return stdout.strip().splitlines()[0]

    def select_pane(self, target: str) -> None:
        """Make a pane the active one in its window and session."""
        _run_tmux("select-window", "-t", target, timeout=self.timeout)
        _run_tmux("select-pane", "-t", target, timeout=self.timeout)

    def focus_client_terminal(self, session_name: str) -> bool:
        """Focus the emulator window hosting the tmux client of a session."""
        client_tty = self.get_client_tty(session_name)
        if client_tty:
            client_criteria = FocusCriteria(tty=client_tty)
            for strategy in self.emulator_strategies:
                if strategy.try_focus(client_criteria):
                    logger.debug(f"Focused tmux client {client_tty} via {strategy.backend_name}")
                    return True
        else:
            logger.debug(f"No tmux client attached to session {session_name}")

        return run_found_script(_ACTIVATE_ANY_HOST_SCRIPT, timeout=self.timeout)

    def try_focus(self, criteria: FocusCriteria) -> bool:
        if not criteria.tty or not self.is_available():
            return False

        target = self.find_pane(criteria.tty)
        if target is None:
            return False

        logger.debug(f"TTY {criteria.tty} is tmux pane {target}")
        self.select_pane(target)
        return self.focus_client_terminal(session_of_target(target))
