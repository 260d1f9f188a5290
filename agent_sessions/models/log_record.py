"""Schema for a single line of a CLI conversation log (JSONL)."""

from typing import Any

from pydantic import BaseModel, Field


class MessageContent(BaseModel):
    """The ``message`` object of a log record.

    ``content`` is either a string or a list of typed blocks
    (``text``, ``tool_use``, ``tool_result``, ...). It is kept untyped
    so that unexpected block shapes don't reject the whole line.
    """

    role: str | None = None
    content: Any = None


class LogRecord(BaseModel):
    """One JSON object per log line. Unknown keys are ignored."""

    session_id: str | None = Field(default=None, alias="sessionId")
    git_branch: str | None = Field(default=None, alias="gitBranch")
    timestamp: str | None = None
    msg_type: str | None = Field(default=None, alias="type")
    message: MessageContent | None = None
