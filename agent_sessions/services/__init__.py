"""Services for Agent Sessions."""

from agent_sessions.services.config_service import (
    ConfigService,
    get_config_service,
    reset_config_service,
)
from agent_sessions.services.git_remote import RemoteUrlLookup, get_remote_url, normalize_remote_url
from agent_sessions.services.path_codec import dir_name_to_path, path_to_dir_name
from agent_sessions.services.process_scanner import ProcessScanner
from agent_sessions.services.session_aggregator import SessionAggregator
from agent_sessions.services.session_parser import ParsedLog, parse_log_file, parse_session_file
from agent_sessions.services.status_classifier import (
    StatusSignals,
    determine_status,
    status_sort_priority,
)
from agent_sessions.services.terminal_resolver import TerminalResolver, get_pid_tty
from agent_sessions.services.transition_log import TransitionLog

__all__ = [
    # Config
    "ConfigService",
    "get_config_service",
    "reset_config_service",
    # Discovery
    "ProcessScanner",
    "SessionAggregator",
    "dir_name_to_path",
    "path_to_dir_name",
    # Parsing
    "ParsedLog",
    "StatusSignals",
    "determine_status",
    "parse_log_file",
    "parse_session_file",
    "status_sort_priority",
    # Remote URLs
    "RemoteUrlLookup",
    "get_remote_url",
    "normalize_remote_url",
    # Focus
    "TerminalResolver",
    "get_pid_tty",
    # Diagnostics
    "TransitionLog",
]
