"""Parsing the tail of a CLI conversation log into session data.

Only the trailing lines of a log are read; logs grow without bound and the
state we care about is always at the end. Two independent backward scans run
over those lines:

1. Metadata/status: the most recent sessionId, gitBranch and timestamp, plus
   the most recent record with non-empty content, which drives the status.
2. Preview: the most recent record with displayable text. This may be an
   older record than the status one (e.g., when the last record is a bare
   tool_result).
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from agent_sessions.models.log_record import LogRecord
from agent_sessions.models.process import MonitoredProcess
from agent_sessions.models.session import Session, SessionStatus
from agent_sessions.services.log_locator import file_age_seconds
from agent_sessions.services.status_classifier import (
    StatusSignals,
    determine_status,
    extract_text,
    has_content,
    has_tool_result,
    has_tool_use,
    is_interrupted_request,
    is_local_slash_command,
)

logger = logging.getLogger(__name__)

DEFAULT_TAIL_LINES = 100
DEFAULT_FRESH_SECONDS = 3.0
PREVIEW_MAX_CHARS = 100
UNKNOWN_TIMESTAMP = "Unknown"


@dataclass
class ParsedLog:
    """Data extracted from one conversation log."""

    session_id: str
    git_branch: str | None = None
    timestamp: str | None = None
    role: str | None = None
    preview: str | None = None
    signals: StatusSignals = field(default_factory=StatusSignals)

    @property
    def status(self) -> SessionStatus:
        """Status inferred from this log's signals."""
        return determine_status(self.signals)


def parse_record(line: str) -> LogRecord | None:
    """Parse one log line, returning None for blank or malformed lines."""
    line = line.strip()
    if not line:
        return None
    try:
        return LogRecord.model_validate_json(line)
    except ValidationError:
        return None


def read_tail_lines(path: Path, max_lines: int = DEFAULT_TAIL_LINES) -> list[str] | None:
    """Read the last ``max_lines`` lines of a file.

    Returns:
        The lines in file order, or None if the file can't be read.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            return list(deque(f, maxlen=max_lines))
    except OSError as e:
        logger.debug(f"Cannot read log {path}: {e}")
        return None


def truncate_preview(text: str, limit: int = PREVIEW_MAX_CHARS) -> str:
    """Truncate to ``limit`` characters, appending '...' when cut."""
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text


def project_name_from_path(project_path: str) -> str:
    """Get the display name of a project (last non-empty path segment)."""
    segments = [s for s in project_path.split("/") if s]
    return segments[-1] if segments else "Unknown"


def parse_log_lines(lines: list[str], file_fresh: bool = False) -> ParsedLog | None:
    """Extract session data from log lines.

    Args:
        lines: Log lines in file order (oldest first).
        file_fresh: Whether the log was modified within the freshness window.

    Returns:
        ParsedLog, or None if no record carries a session id.
    """
    records = [record for record in map(parse_record, reversed(lines)) if record is not None]

    session_id = None
    git_branch = None
    timestamp = None
    role = None
    signals = StatusSignals(file_fresh=file_fresh)
    found_status = False

    for record in records:
        session_id = session_id or record.session_id
        git_branch = git_branch or record.git_branch
        timestamp = timestamp or record.timestamp

        if not found_status and record.message is not None:
            content = record.message.content
            if has_content(content):
                role = record.message.role
                signals = StatusSignals(
                    msg_type=record.msg_type,
                    has_tool_use=has_tool_use(content),
                    has_tool_result=has_tool_result(content),
                    is_local_command=is_local_slash_command(content),
                    is_interrupted=is_interrupted_request(content),
                    file_fresh=file_fresh,
                )
                found_status = True

        if session_id and found_status:
            break

    if not session_id:
        return None

    preview = None
    for record in records:
        if record.message is None:
            continue
        text = extract_text(record.message.content)
        if text:
            preview = truncate_preview(text)
            break

    return ParsedLog(
        session_id=session_id,
        git_branch=git_branch,
        timestamp=timestamp,
        role=role,
        preview=preview,
        signals=signals,
    )


def parse_log_file(
    path: Path,
    tail_lines: int = DEFAULT_TAIL_LINES,
    fresh_seconds: float = DEFAULT_FRESH_SECONDS,
    now: float | None = None,
) -> ParsedLog | None:
    """Parse the tail of a conversation log.

    Args:
        path: Path to the JSONL log.
        tail_lines: Number of trailing lines to read.
        fresh_seconds: Freshness window for the modification time.
        now: Reference time (defaults to the current time).

    Returns:
        ParsedLog, or None if the file is unreadable or has no session id.
    """
    now = time.time() if now is None else now
    age = file_age_seconds(path, now)
    file_fresh = age is not None and age < fresh_seconds

    lines = read_tail_lines(path, tail_lines)
    if lines is None:
        return None

    parsed = parse_log_lines(lines, file_fresh=file_fresh)
    if parsed is None:
        logger.debug(f"No session id in last {tail_lines} lines of {path.name}")
        return None

    logger.debug(
        f"Parsed {path.name}: type={parsed.signals.msg_type}, "
        f"tool_use={parsed.signals.has_tool_use}, tool_result={parsed.signals.has_tool_result}, "
        f"local_cmd={parsed.signals.is_local_command}, "
        f"interrupted={parsed.signals.is_interrupted}, fresh={file_fresh} -> {parsed.status.value}"
    )
    return parsed


def read_session_id(path: Path, max_lines: int = 10) -> str | None:
    """Get the session id from the first lines of a log.

    Sub-agent logs record their parent's session id, so this links a
    sub-agent log back to the session that spawned it.
    """
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for _, line in zip(range(max_lines), f):
                record = parse_record(line)
                if record is not None and record.session_id:
                    return record.session_id
    except OSError as e:
        logger.debug(f"Cannot read log {path}: {e}")
    return None


def build_session(
    parsed: ParsedLog,
    project_path: str,
    process: MonitoredProcess,
    status: SessionStatus | None = None,
    remote_url: str | None = None,
    active_sub_agent_count: int = 0,
) -> Session:
    """Combine parsed log data and process data into a Session."""
    return Session(
        id=parsed.session_id,
        project_name=project_name_from_path(project_path),
        project_path=project_path,
        git_branch=parsed.git_branch,
        status=status or parsed.status,
        last_message_preview=parsed.preview,
        last_message_role=parsed.role,
        last_activity_at=parsed.timestamp or UNKNOWN_TIMESTAMP,
        pid=process.pid,
        cpu_percent=process.cpu_percent,
        remote_url=remote_url,
        active_sub_agent_count=active_sub_agent_count,
    )


def parse_session_file(
    path: Path,
    project_path: str,
    process: MonitoredProcess,
    tail_lines: int = DEFAULT_TAIL_LINES,
    fresh_seconds: float = DEFAULT_FRESH_SECONDS,
) -> Session | None:
    """Parse a conversation log into a Session for the given process.

    Returns:
        Session, or None if the log has no usable session id.
    """
    parsed = parse_log_file(path, tail_lines=tail_lines, fresh_seconds=fresh_seconds)
    if parsed is None:
        return None
    return build_session(parsed, project_path, process)
