"""Session models with Pydantic validation.

Sessions are rebuilt from scratch on every scan. They serialize to camelCase
JSON, which is the shape the dashboard front end consumes.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SessionStatus(str, Enum):
    """Inferred activity state of a CLI session.

    Display priority (lower sorts first):
    - THINKING, PROCESSING: 0 (active)
    - WAITING: 1 (needs attention)
    - IDLE: 2
    """

    WAITING = "waiting"
    """The CLI is waiting for the user to type something."""

    PROCESSING = "processing"
    """A tool call is in flight."""

    THINKING = "thinking"
    """The model is generating a response."""

    IDLE = "idle"
    """No recent activity."""


class Session(BaseModel):
    """One live conversation paired with the process that owns it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Session identifier taken from the log")
    project_name: str = Field(..., description="Last segment of the project path")
    project_path: str = Field(..., description="Working directory of the process")
    git_branch: str | None = Field(default=None, description="Branch recorded in the log")
    status: SessionStatus = Field(default=SessionStatus.IDLE)
    last_message_preview: str | None = Field(
        default=None,
        description="Most recent message text, at most 100 characters plus '...'",
    )
    last_message_role: str | None = Field(default=None)
    last_activity_at: str = Field(
        default="Unknown",
        description="Raw timestamp of the most recent log record",
    )
    pid: int = Field(..., description="PID of the owning CLI process")
    cpu_percent: float = Field(default=0.0)
    remote_url: str | None = Field(
        default=None,
        description="Browsable URL of the project's origin remote",
    )
    active_sub_agent_count: int = Field(default=0, ge=0)


class SessionsSnapshot(BaseModel):
    """Result of one full scan."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sessions: list[Session] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    waiting_count: int = Field(default=0, ge=0)

    @classmethod
    def from_sessions(cls, sessions: list[Session]) -> "SessionsSnapshot":
        """Build a snapshot whose counts are derived from ``sessions``."""
        waiting = sum(1 for s in sessions if s.status == SessionStatus.WAITING)
        return cls(sessions=sessions, total_count=len(sessions), waiting_count=waiting)


def format_tray_title(total: int, waiting: int) -> str:
    """Format the menu bar title for a snapshot.

    Args:
        total: Number of sessions.
        waiting: Number of sessions waiting for input.

    Returns:
        "3 (1 waiting)", "3", or "" when there are no sessions.
    """
    if waiting > 0:
        return f"{total} ({waiting} waiting)"
    if total > 0:
        return str(total)
    return ""
