"""Domain models for Agent Sessions."""

from agent_sessions.models.config import (
    AppConfig,
    RemoteUrlConfig,
    ScanConfig,
    TransitionLogConfig,
)
from agent_sessions.models.log_record import LogRecord, MessageContent
from agent_sessions.models.process import MonitoredProcess
from agent_sessions.models.session import (
    Session,
    SessionsSnapshot,
    SessionStatus,
    format_tray_title,
)

__all__ = [
    # Session
    "Session",
    "SessionsSnapshot",
    "SessionStatus",
    "format_tray_title",
    # Process
    "MonitoredProcess",
    # Log records
    "LogRecord",
    "MessageContent",
    # Config
    "AppConfig",
    "RemoteUrlConfig",
    "ScanConfig",
    "TransitionLogConfig",
]
