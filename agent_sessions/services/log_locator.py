"""Locating conversation logs inside a project's log directory."""

import logging
import time
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_SUFFIX = ".jsonl"

# Sub-agent conversations are written to sibling files named agent-<id>.jsonl
SUBAGENT_LOG_PREFIX = "agent-"


def is_subagent_log(path: Path) -> bool:
    """Check whether a log file belongs to a sub-agent."""
    return path.name.startswith(SUBAGENT_LOG_PREFIX)


def _logs_by_mtime(project_dir: Path) -> list[tuple[Path, float]]:
    """List JSONL files with their modification times, newest first."""
    try:
        entries = list(project_dir.iterdir())
    except OSError as e:
        logger.debug(f"Cannot list {project_dir}: {e}")
        return []

    logs = []
    for path in entries:
        if path.suffix != LOG_SUFFIX:
            continue
        try:
            stat = path.stat()
        except OSError:
            continue
        if not path.is_file():
            continue
        logs.append((path, stat.st_mtime))

    logs.sort(key=lambda item: item[1], reverse=True)
    return logs


def list_session_logs(project_dir: Path) -> list[Path]:
    """List main conversation logs, newest modification first.

    Sub-agent logs are excluded.
    """
    return [path for path, _ in _logs_by_mtime(project_dir) if not is_subagent_log(path)]


def list_subagent_logs(project_dir: Path) -> list[Path]:
    """List sub-agent logs, newest modification first."""
    return [path for path, _ in _logs_by_mtime(project_dir) if is_subagent_log(path)]


def list_all_logs(project_dir: Path) -> list[Path]:
    """List every conversation log (main and sub-agent), newest first."""
    return [path for path, _ in _logs_by_mtime(project_dir)]


def file_age_seconds(path: Path, now: float | None = None) -> float | None:
    """Seconds since the file was last modified, or None if it can't be read."""
    try:
        mtime = path.stat().st_mtime
    except OSError:
        return None
    return (time.time() if now is None else now) - mtime


def modified_within(path: Path, seconds: float, now: float | None = None) -> bool:
    """Check whether a file was modified less than ``seconds`` ago."""
    age = file_age_seconds(path, now)
    return age is not None and age < seconds
