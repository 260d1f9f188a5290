"""iTerm2 focus strategy.

Focuses an iTerm2 session either by its TTY or, as a last resort, by a
fragment of its session name.
"""

import logging

from agent_sessions.backends.applescript import (
    DEFAULT_TIMEOUT,
    UnsafeScriptInput,
    quote_applescript,
    run_found_script,
)
from agent_sessions.backends.base import FocusCriteria, FocusStrategy, tty_path

logger = logging.getLogger(__name__)

_FOCUS_SCRIPT = """
tell application "System Events"
    if not (exists process "iTerm2") then
        return "not found"
    end if
end tell

tell application "iTerm2"
    repeat with w in windows
        repeat with t in tabs of w
            repeat with s in sessions of t
                try
                    if {condition} then
                        activate
                        select s
                        select t
                        set index of w to 1
                        return "found"
                    end if
                end try
            end repeat
        end repeat
    end repeat
end tell
return "not found"
"""


def build_focus_script(criteria: FocusCriteria) -> str | None:
    """Build the AppleScript that focuses a matching iTerm2 session.

    TTY matching takes precedence over the name hint.

    Raises:
        UnsafeScriptInput: If a criteria value can't be embedded safely.
    """
    if criteria.tty:
        condition = f"tty of s is {quote_applescript(tty_path(criteria.tty))}"
    elif criteria.name_hint:
        condition = f"name of s contains {quote_applescript(criteria.name_hint)}"
    else:
        return None
    return _FOCUS_SCRIPT.format(condition=condition)


class ITermStrategy(FocusStrategy):
    """Focuses iTerm2 sessions via AppleScript."""

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @property
    def backend_name(self) -> str:
        """Return the backend identifier."""
        return "iterm"

    def try_focus(self, criteria: FocusCriteria) -> bool:
        """Focus the iTerm2 session matching the TTY or name hint."""
        try:
            script = build_focus_script(criteria)
        except UnsafeScriptInput as e:
            logger.warning(str(e))
            return False
        if script is None:
            return False

        success = run_found_script(script, timeout=self.timeout)
        if not success:
            logger.debug(f"No iTerm2 session matched {criteria}")
        return success
