"""Process model for discovered CLI processes."""

from dataclasses import dataclass


@dataclass
class MonitoredProcess:
    """A running CLI process, as seen by a single scan.

    Only valid for the scan that produced it; the OS may reuse the PID later.
    """

    pid: int
    cwd: str | None  # Working directory, None when unreadable
    cpu_percent: float = 0.0
    memory_bytes: int = 0  # Resident set size
