"""SessionAggregator: builds the list of live sessions.

One call to ``get_all_sessions`` performs a full scan:

1. Find running CLI processes and group them by working directory.
2. Walk the log store; decode each project directory name to a path and
   match it against the process groups (falling back to encoding each
   process cwd and comparing names, since decoding is lossy).
3. Pair the i-th process of a directory with its i-th newest session log.
   This is a best-effort heuristic: it assumes one log per running process
   and can mis-pair sessions whose logs are written alternately.
4. Parse the paired log, count its active sub-agents, let recently written
   sibling logs upgrade the status, and treat a busy CPU as processing.
5. Sort by status priority, then most recent activity.

Nothing here raises to the caller; anything that can't be read is skipped.
"""

import logging
import os
import time
from pathlib import Path

from agent_sessions.models.config import ScanConfig
from agent_sessions.models.process import MonitoredProcess
from agent_sessions.models.session import Session, SessionsSnapshot, SessionStatus
from agent_sessions.services.git_remote import RemoteUrlLookup
from agent_sessions.services.log_locator import (
    list_all_logs,
    list_session_logs,
    list_subagent_logs,
    modified_within,
)
from agent_sessions.services.path_codec import dir_name_to_path, path_to_dir_name
from agent_sessions.services.process_scanner import ProcessScanner
from agent_sessions.services.session_parser import (
    ParsedLog,
    build_session,
    parse_log_file,
    read_session_id,
)
from agent_sessions.services.status_classifier import status_sort_priority
from agent_sessions.services.transition_log import TransitionLog

logger = logging.getLogger(__name__)

DEFAULT_PROJECTS_DIR = Path.home() / ".claude" / "projects"


def get_projects_dir() -> Path:
    """Return the log store root. Honors CLAUDE_PROJECTS_DIR."""
    env = os.environ.get("CLAUDE_PROJECTS_DIR")
    if env:
        return Path(env).expanduser()
    return DEFAULT_PROJECTS_DIR


def sort_sessions(sessions: list[Session]) -> list[Session]:
    """Sort by status priority, then by most recent activity."""
    by_activity = sorted(sessions, key=lambda s: s.last_activity_at, reverse=True)
    return sorted(by_activity, key=lambda s: status_sort_priority(s.status))


class SessionAggregator:
    """Correlates CLI processes with their conversation logs."""

    def __init__(
        self,
        scanner: ProcessScanner | None = None,
        projects_dir: Path | str | None = None,
        scan_config: ScanConfig | None = None,
        remote_lookup: RemoteUrlLookup | None = None,
        transition_log: TransitionLog | None = None,
    ):
        """Initialize the aggregator.

        Args:
            scanner: Process scanner. The aggregator owns it for its lifetime
                so CPU measurements span consecutive scans.
            projects_dir: Log store root. Defaults to ~/.claude/projects.
            scan_config: Scan thresholds.
            remote_lookup: Remote URL lookup; None disables remote URLs.
            transition_log: Status transition log; None disables it.
        """
        self.scanner = scanner or ProcessScanner()
        self.projects_dir = Path(projects_dir).expanduser() if projects_dir else get_projects_dir()
        self.scan_config = scan_config or ScanConfig()
        self.remote_lookup = remote_lookup
        self.transition_log = transition_log

    def get_all_sessions(self) -> SessionsSnapshot:
        """Run a full scan.

        Returns:
            SessionsSnapshot; empty when nothing is running or on failure.
        """
        logger.debug("=== Getting all sessions ===")
        try:
            sessions = self._collect_sessions()
        except Exception as e:
            logger.error(f"Session scan failed: {e}")
            sessions = []

        sessions = sort_sessions(sessions)
        snapshot = SessionsSnapshot.from_sessions(sessions)

        if self.transition_log is not None:
            self.transition_log.record(snapshot.sessions)

        logger.info(
            f"Session scan complete: {snapshot.total_count} total, "
            f"{snapshot.waiting_count} waiting"
        )
        return snapshot

    def _collect_sessions(self) -> list[Session]:
        processes = self.scanner.scan()
        by_cwd = self._group_by_cwd(processes)
        if not by_cwd:
            return []

        if not self.projects_dir.is_dir():
            logger.warning(f"Log store does not exist: {self.projects_dir}")
            return []

        now = time.time()
        sessions = []

        for project_dir in sorted(self.projects_dir.iterdir()):
            if not project_dir.is_dir():
                continue

            project_path = self._match_project(project_dir.name, by_cwd)
            if project_path is None:
                continue

            sessions.extend(
                self._sessions_for_project(project_dir, project_path, by_cwd[project_path], now)
            )

        return sessions

    @staticmethod
    def _group_by_cwd(processes: list[MonitoredProcess]) -> dict[str, list[MonitoredProcess]]:
        by_cwd: dict[str, list[MonitoredProcess]] = {}
        for process in processes:
            if not process.cwd:
                logger.debug(f"Process pid={process.pid} has no cwd, skipping")
                continue
            by_cwd.setdefault(process.cwd, []).append(process)
        return by_cwd

    @staticmethod
    def _match_project(dir_name: str, by_cwd: dict[str, list[MonitoredProcess]]) -> str | None:
        """Find the process cwd a log store directory belongs to."""
        candidate = dir_name_to_path(dir_name)
        if candidate in by_cwd:
            return candidate

        # Decoding is ambiguous for names containing dashes; compare encodings
        for cwd in by_cwd:
            if path_to_dir_name(cwd) == dir_name:
                logger.debug(f"Matched {dir_name} to {cwd} by encoded name")
                return cwd

        return None

    def _sessions_for_project(
        self,
        project_dir: Path,
        project_path: str,
        processes: list[MonitoredProcess],
        now: float,
    ) -> list[Session]:
        session_logs = list_session_logs(project_dir)
        logger.debug(
            f"Project {project_path}: {len(processes)} processes, {len(session_logs)} logs"
        )

        remote_url = self.remote_lookup.lookup(project_path) if self.remote_lookup else None

        sessions = []
        for index, process in enumerate(processes):
            if index >= len(session_logs):
                logger.warning(f"No log left for pid={process.pid} in {project_path}")
                break

            session = self._build_session(
                project_dir, session_logs[index], project_path, process, remote_url, now
            )
            if session is None:
                logger.warning(f"Failed to create session for pid={process.pid} in {project_path}")
                continue

            logger.debug(
                f"Session created: id={session.id}, project={session.project_name}, "
                f"status={session.status.value}, pid={session.pid}"
            )
            sessions.append(session)

        return sessions

    def _parse(self, path: Path, now: float) -> ParsedLog | None:
        return parse_log_file(
            path,
            tail_lines=self.scan_config.tail_lines,
            fresh_seconds=self.scan_config.fresh_seconds,
            now=now,
        )

    def _build_session(
        self,
        project_dir: Path,
        primary_log: Path,
        project_path: str,
        process: MonitoredProcess,
        remote_url: str | None,
        now: float,
    ) -> Session | None:
        parsed = self._parse(primary_log, now)
        if parsed is None:
            return None

        status = self._reconcile_status(project_dir, primary_log, parsed.status, now)

        # A "waiting" log is stale if the process is still burning CPU
        if status == SessionStatus.WAITING and process.cpu_percent > self.scan_config.cpu_busy_percent:
            logger.debug(
                f"pid={process.pid} at {process.cpu_percent:.1f}% CPU, overriding waiting -> processing"
            )
            status = SessionStatus.PROCESSING

        return build_session(
            parsed,
            project_path,
            process,
            status=status,
            remote_url=remote_url,
            active_sub_agent_count=self.count_active_subagents(project_dir, parsed.session_id, now),
        )

    def _reconcile_status(
        self,
        project_dir: Path,
        primary_log: Path,
        status: SessionStatus,
        now: float,
    ) -> SessionStatus:
        """Upgrade a status using sibling logs written in the last few seconds.

        When a session delegates to a sub-agent, its own log goes quiet while
        the sub-agent's log keeps growing.
        """
        for path in list_all_logs(project_dir):
            if path == primary_log:
                continue
            # Logs are newest first; everything after this one is older
            if not modified_within(path, self.scan_config.reconcile_seconds, now):
                break

            other = self._parse(path, now)
            if other is None:
                continue
            if status_sort_priority(other.status) < status_sort_priority(status):
                logger.debug(f"More active status in {path.name}: {status.value} -> {other.status.value}")
                status = other.status

        return status

    def count_active_subagents(self, project_dir: Path, session_id: str, now: float | None = None) -> int:
        """Count sub-agent logs of a session written in the last 30 seconds."""
        now = time.time() if now is None else now
        count = 0
        for path in list_subagent_logs(project_dir):
            if not modified_within(path, self.scan_config.subagent_active_seconds, now):
                break
            if read_session_id(path) == session_id:
                count += 1
        return count
