"""Discovery of running CLI processes.

A process qualifies when its first command-line argument is the CLI's
invocation name ("claude" or ".../claude"). Qualifying processes are dropped
when they are:

- this application itself (process name matches one of its aliases),
- a sub-agent, i.e. their parent is also a qualifying process,
- spawned by an IDE's external agent wrapper (e.g. claude-code-acp).

The scanner keeps its psutil.Process handles between scans because
``cpu_percent()`` measures usage since the previous call on the same handle.
The handle table is refreshed at the start of every scan and guarded by a
lock, so overlapping scans are serialized rather than interleaved.
"""

import logging
import threading
from dataclasses import dataclass

import psutil

from agent_sessions.models.process import MonitoredProcess

logger = logging.getLogger(__name__)

DEFAULT_PROCESS_NAME = "claude"
DEFAULT_OWN_ALIASES = ("claude-sessions", "tauri-temp", "agent-sessions")
DEFAULT_EXTERNAL_AGENT_SIGNATURES = ("claude-code-acp",)


@dataclass
class _ProcessEntry:
    """Minimal per-process facts gathered in the first pass."""

    handle: psutil.Process
    name: str
    cmdline: list[str]
    ppid: int | None


class ProcessScanner:
    """Finds top-level CLI sessions among running processes."""

    def __init__(
        self,
        process_name: str = DEFAULT_PROCESS_NAME,
        own_aliases: tuple[str, ...] | list[str] = DEFAULT_OWN_ALIASES,
        external_agent_signatures: tuple[str, ...] | list[str] = DEFAULT_EXTERNAL_AGENT_SIGNATURES,
    ):
        """Initialize the scanner.

        Args:
            process_name: Invocation name of the monitored CLI.
            own_aliases: Process name fragments identifying this application.
            external_agent_signatures: Parent command-line fragments that mark
                IDE-spawned agents.
        """
        self.process_name = process_name.lower()
        self.own_aliases = tuple(own_aliases)
        self.external_agent_signatures = tuple(external_agent_signatures)

        self._lock = threading.Lock()
        self._handles: dict[int, psutil.Process] | None = None

    def is_target_command(self, cmdline: list[str]) -> bool:
        """Check whether a command line is an invocation of the CLI."""
        if not cmdline:
            return False
        first_arg = cmdline[0].lower()
        return first_arg == self.process_name or first_arg.endswith(f"/{self.process_name}")

    def _is_own_process(self, name: str) -> bool:
        return any(alias in name for alias in self.own_aliases)

    def _refresh_handles(self) -> dict[int, psutil.Process]:
        """Sync the handle table with the OS process table.

        Handles whose process is gone (or whose PID now belongs to a
        different process) are replaced; new PIDs get a fresh handle.
        """
        previous = self._handles or {}
        current: dict[int, psutil.Process] = {}

        for proc in psutil.process_iter():
            cached = previous.get(proc.pid)
            if cached is not None and cached.is_running():
                current[proc.pid] = cached
            else:
                current[proc.pid] = proc

        self._handles = current
        return current

    def _collect_entries(self, handles: dict[int, psutil.Process]) -> dict[int, _ProcessEntry]:
        entries = {}
        for pid, handle in handles.items():
            try:
                with handle.oneshot():
                    entries[pid] = _ProcessEntry(
                        handle=handle,
                        name=handle.name(),
                        cmdline=handle.cmdline(),
                        ppid=handle.ppid(),
                    )
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return entries

    def _skip_reason(
        self,
        entry: _ProcessEntry,
        entries: dict[int, _ProcessEntry],
        claude_pids: set[int],
    ) -> str | None:
        if self._is_own_process(entry.name):
            return "own application"

        if entry.ppid is None:
            return None
        if entry.ppid in claude_pids:
            return f"sub-agent of {entry.ppid}"

        parent = entries.get(entry.ppid)
        if parent is not None:
            parent_cmd = " ".join(parent.cmdline)
            if any(sig in parent_cmd for sig in self.external_agent_signatures):
                return f"external agent spawned by {entry.ppid}"

        return None

    def _snapshot(self, entry: _ProcessEntry) -> MonitoredProcess | None:
        handle = entry.handle
        try:
            with handle.oneshot():
                try:
                    cwd = handle.cwd() or None
                except psutil.AccessDenied:
                    cwd = None
                return MonitoredProcess(
                    pid=handle.pid,
                    cwd=cwd,
                    cpu_percent=handle.cpu_percent(interval=None),
                    memory_bytes=handle.memory_info().rss,
                )
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return None

    def scan(self) -> list[MonitoredProcess]:
        """Find all top-level CLI processes.

        Returns:
            MonitoredProcess for each qualifying process, in PID order.
        """
        with self._lock:
            handles = self._refresh_handles()
            entries = self._collect_entries(handles)

            # First pass: every CLI process, sub-agents included
            claude_pids = {pid for pid, e in entries.items() if self.is_target_command(e.cmdline)}

            # Second pass: drop our own app, sub-agents, and IDE-spawned agents
            processes = []
            for pid in sorted(claude_pids):
                entry = entries[pid]
                reason = self._skip_reason(entry, entries, claude_pids)
                if reason:
                    logger.debug(f"Skipping pid={pid}: {reason}")
                    continue

                process = self._snapshot(entry)
                if process is None:
                    continue

                logger.debug(
                    f"Found CLI process: pid={process.pid}, cwd={process.cwd}, "
                    f"cpu={process.cpu_percent:.1f}%, mem={process.memory_bytes // (1024 * 1024)}MB"
                )
                processes.append(process)

        logger.debug(f"Process discovery complete: {len(processes)} of {len(entries)} processes")
        return processes
