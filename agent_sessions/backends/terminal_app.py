"""Terminal.app focus strategy."""

import logging

from agent_sessions.backends.applescript import (
    DEFAULT_TIMEOUT,
    UnsafeScriptInput,
    is_app_running,
    quote_applescript,
    run_found_script,
)
from agent_sessions.backends.base import FocusCriteria, FocusStrategy, tty_path

logger = logging.getLogger(__name__)

_FOCUS_SCRIPT = """
tell application "Terminal"
    repeat with w in windows
        repeat with t in tabs of w
            try
                if tty of t is {tty} then
                    activate
                    set selected of t to true
                    set index of w to 1
                    return "found"
                end if
            end try
        end repeat
    end repeat
end tell
return "not found"
"""


class TerminalAppStrategy(FocusStrategy):
    """Focuses Terminal.app tabs by TTY.

    Terminal.app is only scripted when it is already running; telling it
    anything would otherwise launch it.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @property
    def backend_name(self) -> str:
        """Return the backend identifier."""
        return "terminal_app"

    def is_available(self) -> bool:
        """Check if Terminal.app is running."""
        return is_app_running("Terminal", timeout=self.timeout)

    def try_focus(self, criteria: FocusCriteria) -> bool:
        if not criteria.tty:
            return False
        try:
            script = _FOCUS_SCRIPT.format(tty=quote_applescript(tty_path(criteria.tty)))
        except UnsafeScriptInput as e:
            logger.warning(str(e))
            return False

        if not self.is_available():
            logger.debug("Terminal.app is not running, skipping")
            return False

        return run_found_script(script, timeout=self.timeout)
