"""Tests for the status transition log."""

import json
from unittest.mock import patch

import pytest

from agent_sessions.models.session import Session, SessionStatus
from agent_sessions.services.transition_log import TransitionLog


def make_session(session_id="s1", status=SessionStatus.THINKING, pid=100):
    return Session(
        id=session_id,
        project_name="app",
        project_path="/p/app",
        status=status,
        pid=pid,
    )


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "logs" / "transitions.jsonl"


def read_entries(path):
    return [json.loads(line) for line in path.read_text().splitlines()]


class TestRecord:
    """Tests for recording transitions."""

    def test_first_sighting(self, log_file):
        """A new session logs a transition from None."""
        log = TransitionLog(log_file=log_file)
        entries = log.record([make_session()])

        assert len(entries) == 1
        assert entries[0]["previous"] is None
        assert entries[0]["current"] == "thinking"
        assert read_entries(log_file) == entries

    def test_entry_fields(self, log_file):
        """Entries carry timestamp, session, project and pid."""
        log = TransitionLog(log_file=log_file)
        entry = log.record([make_session(pid=321)])[0]

        assert set(entry) == {"timestamp", "session_id", "project", "pid", "previous", "current"}
        assert entry["session_id"] == "s1"
        assert entry["project"] == "app"
        assert entry["pid"] == 321

    def test_unchanged_status_not_logged(self, log_file):
        """Repeating a status writes nothing."""
        log = TransitionLog(log_file=log_file)
        log.record([make_session()])
        entries = log.record([make_session()])

        assert entries == []
        assert len(read_entries(log_file)) == 1

    def test_change_logged(self, log_file):
        """A status change is logged with both states."""
        log = TransitionLog(log_file=log_file)
        log.record([make_session()])
        entries = log.record([make_session(status=SessionStatus.WAITING)])

        assert entries[0]["previous"] == "thinking"
        assert entries[0]["current"] == "waiting"
        assert log.last_status("s1") == SessionStatus.WAITING

    def test_missing_sessions_forgotten(self, log_file):
        """A session that disappears and returns starts over."""
        log = TransitionLog(log_file=log_file)
        log.record([make_session()])
        log.record([])
        entries = log.record([make_session()])

        assert log.last_status("s1") == SessionStatus.THINKING
        assert entries[0]["previous"] is None

    def test_disabled_tracks_without_writing(self, log_file):
        """Disabled logs still track but write no file."""
        log = TransitionLog(log_file=log_file, enabled=False)
        entries = log.record([make_session()])

        assert len(entries) == 1
        assert not log_file.exists()

    def test_write_failure_is_ignored(self, log_file):
        """Write errors don't propagate."""
        log = TransitionLog(log_file=log_file)
        with patch("builtins.open", side_effect=OSError("disk full")):
            entries = log.record([make_session()])

        assert len(entries) == 1
        assert log.last_status("s1") == SessionStatus.THINKING
