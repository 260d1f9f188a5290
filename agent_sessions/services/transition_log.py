"""Diagnostic log of session status transitions.

Remembers the last status seen for each session id and appends one JSONL
line whenever it changes, so intermittent misdetections can be inspected
after the fact. The file is never read back by the application.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path

from agent_sessions.models.session import Session, SessionStatus

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = Path("data") / "logs" / "state_transitions.jsonl"


class TransitionLog:
    """Records status changes per session id.

    Thread-safe: the Flask server may run scans from several request threads.
    """

    def __init__(self, log_file: Path | str = DEFAULT_LOG_FILE, enabled: bool = True):
        """Initialize the transition log.

        Args:
            log_file: JSONL file receiving transition entries.
            enabled: If False, transitions are tracked but not written.
        """
        self.log_file = Path(log_file)
        self.enabled = enabled
        self._last_status: dict[str, SessionStatus] = {}
        self._lock = threading.Lock()

    def record(self, sessions: list[Session]) -> list[dict]:
        """Record the statuses from one scan.

        Sessions missing from this scan are forgotten, so a session that
        reappears logs a transition from None.

        Args:
            sessions: All sessions of the scan.

        Returns:
            The transition entries produced by this scan.
        """
        now = datetime.now(timezone.utc).isoformat()
        entries = []

        with self._lock:
            seen: dict[str, SessionStatus] = {}
            for session in sessions:
                previous = self._last_status.get(session.id)
                seen[session.id] = session.status
                if previous == session.status:
                    continue
                entries.append(
                    {
                        "timestamp": now,
                        "session_id": session.id,
                        "project": session.project_name,
                        "pid": session.pid,
                        "previous": previous.value if previous else None,
                        "current": session.status.value,
                    }
                )
            self._last_status = seen

            if entries and self.enabled:
                self._write(entries)

        for entry in entries:
            logger.debug(
                f"Session {entry['session_id'][:8]} ({entry['project']}): "
                f"{entry['previous']} -> {entry['current']}"
            )
        return entries

    def last_status(self, session_id: str) -> SessionStatus | None:
        """Get the most recently recorded status of a session."""
        with self._lock:
            return self._last_status.get(session_id)

    def _write(self, entries: list[dict]) -> None:
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as f:
                for entry in entries:
                    f.write(json.dumps(entry) + "\n")
        except OSError as e:
            logger.warning(f"Failed to write transition log: {e}")
