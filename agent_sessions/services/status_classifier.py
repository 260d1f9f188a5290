"""Status inference for CLI sessions.

Maps the most recent meaningful log record of a conversation to one of the
four SessionStatus values. ``determine_status`` is pure: it only looks at a
StatusSignals value, so it can be exercised without touching the filesystem.

Decision table (first matching row wins):

    type       tool_use  tool_result  local_cmd  interrupted  fresh  -> status
    assistant  yes       -            -          -            -      PROCESSING
    assistant  no        -            -          -            yes    PROCESSING
    assistant  no        -            -          -            no     WAITING
    user       -         -            yes        -            -      WAITING
    user       -         -            no         yes          -      WAITING
    user       -         yes          no         no           yes    THINKING
    user       -         yes          no         no           no     PROCESSING
    user       -         no           no         no           -      THINKING
    other      -         -            -          -            yes    THINKING
    other      -         -            -          -            no     IDLE
"""

from dataclasses import dataclass
from typing import Any

from agent_sessions.models.session import SessionStatus

TOOL_USE_BLOCK = "tool_use"
TOOL_RESULT_BLOCK = "tool_result"
TEXT_BLOCK = "text"

INTERRUPTION_MARKER = "[Request interrupted by user]"

# Slash commands handled by the CLI itself; they never make the model think
LOCAL_COMMANDS = (
    "/clear",
    "/compact",
    "/help",
    "/config",
    "/cost",
    "/doctor",
    "/init",
    "/login",
    "/logout",
    "/memory",
    "/model",
    "/permissions",
    "/pr-comments",
    "/review",
    "/status",
    "/terminal-setup",
    "/vim",
)

_STATUS_PRIORITY = {
    SessionStatus.THINKING: 0,
    SessionStatus.PROCESSING: 0,
    SessionStatus.WAITING: 1,
    SessionStatus.IDLE: 2,
}


@dataclass(frozen=True)
class StatusSignals:
    """Everything the classifier needs to know about a conversation."""

    msg_type: str | None = None  # "user", "assistant", or anything else
    has_tool_use: bool = False
    has_tool_result: bool = False
    is_local_command: bool = False
    is_interrupted: bool = False
    file_fresh: bool = False  # Log modified within the freshness window


def _blocks(content: Any) -> list[dict]:
    if not isinstance(content, list):
        return []
    return [block for block in content if isinstance(block, dict)]


def _has_block(content: Any, block_type: str) -> bool:
    return any(block.get("type") == block_type for block in _blocks(content))


def has_tool_use(content: Any) -> bool:
    """Check whether message content contains a tool invocation block."""
    return _has_block(content, TOOL_USE_BLOCK)


def has_tool_result(content: Any) -> bool:
    """Check whether message content contains a tool result block."""
    return _has_block(content, TOOL_RESULT_BLOCK)


def has_content(content: Any) -> bool:
    """Check whether content is a non-empty string or a non-empty block list."""
    if isinstance(content, (str, list)):
        return len(content) > 0
    return False


def extract_text(content: Any) -> str | None:
    """Get displayable text from message content.

    Args:
        content: String content or a list of content blocks.

    Returns:
        The string itself, or the text of the first non-empty text block.
        None when there is no text.
    """
    if isinstance(content, str):
        return content or None
    for block in _blocks(content):
        text = block.get("text")
        if block.get("type") == TEXT_BLOCK and isinstance(text, str) and text:
            return text
    return None


def is_local_slash_command(content: Any) -> bool:
    """Check whether a user message is a command the CLI handles locally.

    Matches "/clear" as well as "/model sonnet", but not "/custom-command"
    or free text.
    """
    if isinstance(content, str):
        text = content
    else:
        text = next(
            (b["text"] for b in _blocks(content) if isinstance(b.get("text"), str)),
            "",
        )

    trimmed = text.strip()
    return any(trimmed == cmd or trimmed.startswith(f"{cmd} ") for cmd in LOCAL_COMMANDS)


def is_interrupted_request(content: Any) -> bool:
    """Check whether message text carries the user interruption marker."""
    if isinstance(content, str):
        return INTERRUPTION_MARKER in content
    return any(
        isinstance(block.get("text"), str) and INTERRUPTION_MARKER in block["text"]
        for block in _blocks(content)
    )


def status_sort_priority(status: SessionStatus) -> int:
    """Return the display priority of a status (lower sorts first)."""
    return _STATUS_PRIORITY[status]


def determine_status(signals: StatusSignals) -> SessionStatus:
    """Infer a session's status from its most recent meaningful log record.

    Args:
        signals: Signals extracted from the log by the session parser.

    Returns:
        The inferred SessionStatus.
    """
    if signals.msg_type == "assistant":
        if signals.has_tool_use:
            return SessionStatus.PROCESSING
        # Text written moments ago may still be streaming
        if signals.file_fresh:
            return SessionStatus.PROCESSING
        return SessionStatus.WAITING

    if signals.msg_type == "user":
        if signals.is_local_command or signals.is_interrupted:
            return SessionStatus.WAITING
        if signals.has_tool_result:
            return SessionStatus.THINKING if signals.file_fresh else SessionStatus.PROCESSING
        return SessionStatus.THINKING

    if signals.file_fresh:
        return SessionStatus.THINKING
    return SessionStatus.IDLE
