"""Pytest configuration and shared fixtures for Agent Sessions tests."""

import json
import os
import time
from pathlib import Path

import pytest

from agent_sessions.services.config_service import reset_config_service


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep the developer's real log store and config out of every test."""
    monkeypatch.delenv("CLAUDE_PROJECTS_DIR", raising=False)
    reset_config_service()
    yield
    reset_config_service()


@pytest.fixture
def projects_dir(tmp_path):
    """An empty log store root."""
    path = tmp_path / "projects"
    path.mkdir()
    return path


@pytest.fixture
def write_log():
    """Factory writing a JSONL conversation log.

    Records may be dicts (serialized as JSON) or raw strings (written as-is,
    for malformed lines). ``age`` backdates the modification time in seconds.
    """

    def _write(directory: Path, name: str, records: list, age: float | None = None) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
        path.write_text("\n".join(lines) + "\n")
        if age is not None:
            mtime = time.time() - age
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture
def user_record():
    """Factory for a user record."""

    def _record(content, session_id="sess-1", **extra):
        record = {
            "type": "user",
            "sessionId": session_id,
            "timestamp": "2025-01-01T10:00:00Z",
            "message": {"role": "user", "content": content},
        }
        record.update(extra)
        return record

    return _record


@pytest.fixture
def assistant_record():
    """Factory for an assistant record."""

    def _record(content, session_id="sess-1", **extra):
        record = {
            "type": "assistant",
            "sessionId": session_id,
            "timestamp": "2025-01-01T10:00:05Z",
            "message": {"role": "assistant", "content": content},
        }
        record.update(extra)
        return record

    return _record
