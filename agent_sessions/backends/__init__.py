"""Terminal focus strategies."""

from agent_sessions.backends.applescript import UnsafeScriptInput, quote_applescript
from agent_sessions.backends.base import FocusCriteria, FocusStrategy, normalize_tty, tty_matches
from agent_sessions.backends.iterm import ITermStrategy
from agent_sessions.backends.terminal_app import TerminalAppStrategy
from agent_sessions.backends.tmux import TmuxStrategy
from agent_sessions.backends.wezterm import WezTermStrategy

__all__ = [
    "FocusCriteria",
    "FocusStrategy",
    "ITermStrategy",
    "TerminalAppStrategy",
    "TmuxStrategy",
    "UnsafeScriptInput",
    "WezTermStrategy",
    "normalize_tty",
    "quote_applescript",
    "tty_matches",
]
