"""Application configuration models with Pydantic validation."""

from pydantic import BaseModel, Field


class ScanConfig(BaseModel):
    """Thresholds used by the session scan."""

    tail_lines: int = Field(
        default=100,
        ge=10,
        le=5000,
        description="Trailing log lines read per conversation log",
    )
    fresh_seconds: float = Field(
        default=3.0,
        gt=0,
        le=60,
        description="A log modified this recently is considered actively written",
    )
    reconcile_seconds: float = Field(
        default=10.0,
        gt=0,
        le=300,
        description="Sibling logs modified this recently can upgrade a session's status",
    )
    subagent_active_seconds: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="Sub-agent logs modified this recently count as active",
    )
    cpu_busy_percent: float = Field(
        default=5.0,
        ge=0,
        le=100,
        description="CPU usage above which a waiting session is shown as processing",
    )


class TransitionLogConfig(BaseModel):
    """Diagnostic log of session status changes."""

    enabled: bool = Field(
        default=True,
        description="Whether status transitions are appended to the log file",
    )
    path: str = Field(
        default="data/logs/state_transitions.jsonl",
        description="JSONL file receiving one line per status change",
    )


class RemoteUrlConfig(BaseModel):
    """Git remote lookup configuration."""

    enabled: bool = Field(
        default=True,
        description="Whether to resolve each project's origin remote",
    )
    cache_seconds: int = Field(
        default=60,
        ge=0,
        le=3600,
        description="How long a resolved remote URL is reused",
    )


class AppConfig(BaseModel):
    """Root application configuration.

    Loaded from config.yaml and validated with Pydantic.
    """

    projects_dir: str = Field(
        default="~/.claude/projects",
        description="Root of the CLI's conversation log store",
    )
    process_name: str = Field(
        default="claude",
        min_length=1,
        description="Invocation name of the monitored CLI",
    )
    own_process_aliases: list[str] = Field(
        default_factory=lambda: ["claude-sessions", "tauri-temp", "agent-sessions"],
        description="Process names belonging to this application (never monitored)",
    )
    external_agent_signatures: list[str] = Field(
        default_factory=lambda: ["claude-code-acp"],
        description="Parent command-line fragments marking IDE-spawned agents",
    )
    scan: ScanConfig = Field(
        default_factory=ScanConfig,
        description="Session scan thresholds",
    )
    focus_timeout: int = Field(
        default=5,
        ge=1,
        le=30,
        description="Timeout in seconds for each terminal automation call",
    )
    transition_log: TransitionLogConfig = Field(
        default_factory=TransitionLogConfig,
        description="Status transition diagnostics",
    )
    remote_url: RemoteUrlConfig = Field(
        default_factory=RemoteUrlConfig,
        description="Git remote lookup",
    )
    port: int = Field(
        default=5051,
        ge=1024,
        le=65535,
        description="Port for the Flask server",
    )
    debug: bool = Field(
        default=False,
        description="Enable Flask debug mode",
    )
