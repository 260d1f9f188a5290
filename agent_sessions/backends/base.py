"""Abstract base class for terminal focus strategies.

Each strategy knows how to bring one kind of terminal (a multiplexer pane or
an emulator window) to the foreground. The resolver walks an ordered list of
strategies and stops at the first one that reports success.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class FocusCriteria:
    """What to look for when focusing a terminal."""

    tty: str | None = None  # Controlling terminal device (e.g., "ttys003" or "/dev/ttys003")
    name_hint: str | None = None  # Text expected in the session/tab name


def normalize_tty(tty: str) -> str:
    """Strip whitespace and the /dev/ prefix (e.g., "/dev/ttys003" -> "ttys003")."""
    tty = tty.strip()
    if tty.startswith("/dev/"):
        return tty[len("/dev/") :]
    return tty


def tty_path(tty: str) -> str:
    """Get the full device path of a TTY (e.g., "ttys003" -> "/dev/ttys003")."""
    return f"/dev/{normalize_tty(tty)}"


def tty_matches(candidate: str | None, tty: str | None) -> bool:
    """Check whether two TTY strings name the same device.

    ``ps`` reports "ttys003" or "pts/1" while terminals report "/dev/ttys003".
    Matching is exact after normalization, or on a "/"-bounded suffix, so
    "pts/1" never matches "pts/10".
    """
    if not candidate or not tty:
        return False
    a = normalize_tty(candidate)
    b = normalize_tty(tty)
    if not a or not b:
        return False
    return a == b or a.endswith(f"/{b}") or b.endswith(f"/{a}")


class FocusStrategy(ABC):
    """Abstract interface for focus strategies."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Return the backend identifier (e.g., 'tmux', 'iterm')."""

    def is_available(self) -> bool:
        """Check if the backend can be used right now.

        Returns:
            True by default; strategies that depend on a running application
            or an installed CLI override this.
        """
        return True

    @abstractmethod
    def try_focus(self, criteria: FocusCriteria) -> bool:
        """Bring the matching terminal to the foreground.

        Args:
            criteria: What to look for.

        Returns:
            True only if a matching terminal was found and focused.
        """
