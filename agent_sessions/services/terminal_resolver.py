"""Bringing the terminal of a session to the foreground.

The controlling TTY of the session's process is looked up with ``ps`` and
handed to each focus strategy in turn (tmux pane, iTerm2, Terminal.app,
WezTerm). The first strategy that reports a match wins. When the PID route
fails entirely, the last segment of the project path is matched against
iTerm2 session names.
"""

import logging
import subprocess
from collections.abc import Sequence

from agent_sessions.backends.base import FocusCriteria, FocusStrategy
from agent_sessions.backends.iterm import ITermStrategy
from agent_sessions.backends.terminal_app import TerminalAppStrategy
from agent_sessions.backends.tmux import TmuxStrategy
from agent_sessions.backends.wezterm import WezTermStrategy

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5


def get_pid_tty(pid: int, timeout: int = DEFAULT_TIMEOUT) -> str | None:
    """Get the TTY for a given PID.

    Args:
        pid: Process ID to look up.
        timeout: Command timeout in seconds.

    Returns:
        TTY string (e.g., "ttys012") or None if the process has none.
    """
    try:
        result = subprocess.run(
            ["ps", "-p", str(pid), "-o", "tty="],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug(f"Failed to get TTY for PID {pid}: {e}")
        return None

    if result.returncode != 0:
        return None
    tty = result.stdout.strip()
    if not tty or tty == "??":
        return None
    return tty


def default_strategies(timeout: int = DEFAULT_TIMEOUT) -> tuple[list[FocusStrategy], FocusStrategy]:
    """Build the standard strategy chain and the path-hint strategy."""
    iterm = ITermStrategy(timeout=timeout)
    emulators: list[FocusStrategy] = [iterm, TerminalAppStrategy(timeout=timeout), WezTermStrategy(timeout=timeout)]
    tmux = TmuxStrategy(emulator_strategies=emulators, timeout=timeout)
    return [tmux, *emulators], iterm


class TerminalResolver:
    """Focuses the terminal owning a session's process."""

    def __init__(
        self,
        strategies: Sequence[FocusStrategy] | None = None,
        path_hint_strategy: FocusStrategy | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """Initialize the resolver.

        Args:
            strategies: Ordered strategies for TTY-based focus. Defaults to
                tmux, iTerm2, Terminal.app, WezTerm.
            path_hint_strategy: Strategy used for the name-based fallback.
                Defaults to iTerm2.
            timeout: Timeout in seconds for each external call.
        """
        defaults, default_hint = default_strategies(timeout)
        self.strategies = list(strategies) if strategies is not None else defaults
        self.path_hint_strategy = path_hint_strategy if path_hint_strategy is not None else default_hint
        self.timeout = timeout

    def focus_by_pid(self, pid: int) -> bool:
        """Focus the terminal whose TTY is the process's controlling terminal."""
        tty = get_pid_tty(pid, timeout=self.timeout)
        if not tty:
            logger.debug(f"No TTY found for PID: {pid}")
            return False

        criteria = FocusCriteria(tty=tty)
        for strategy in self.strategies:
            try:
                if strategy.try_focus(criteria):
                    logger.info(f"Focused pid={pid} (tty={tty}) via {strategy.backend_name}")
                    return True
            except Exception as e:
                logger.warning(f"{strategy.backend_name} focus failed for pid={pid}: {e}")
            logger.debug(f"{strategy.backend_name} did not match tty={tty}")

        return False

    def focus_by_path_hint(self, project_path: str) -> bool:
        """Focus a terminal session whose name contains the project folder name."""
        segments = [s for s in project_path.split("/") if s]
        if not segments:
            return False
        hint = segments[-1]

        try:
            success = self.path_hint_strategy.try_focus(FocusCriteria(name_hint=hint))
        except Exception as e:
            logger.warning(f"Path hint focus failed for {hint}: {e}")
            return False

        if success:
            logger.info(f"Focused session by name hint {hint!r}")
        return success

    def focus_session(self, pid: int, project_path: str) -> bool:
        """Focus a session's terminal, by PID first and then by path hint.

        Returns:
            True if a terminal was focused, False if every attempt failed.
        """
        if self.focus_by_pid(pid):
            return True
        if self.focus_by_path_hint(project_path):
            return True

        logger.warning(f"Could not focus terminal for pid={pid} ({project_path})")
        return False
