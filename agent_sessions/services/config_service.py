"""Configuration loading service.

Handles loading config.yaml, applying environment overrides, and saving.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from agent_sessions.models.config import AppConfig

logger = logging.getLogger(__name__)

PROJECTS_DIR_ENV = "CLAUDE_PROJECTS_DIR"

# Keys written by older releases that are no longer read
DEPRECATED_FIELDS = ("poll_interval", "scan_interval", "terminal_backend")


class ConfigService:
    """Service for loading and managing application configuration.

    Handles:
    - Loading config from config.yaml
    - Validating against Pydantic schema
    - Applying environment overrides
    - Saving updated config
    """

    def __init__(self, config_path: str | Path = "config.yaml"):
        """Initialize the config service.

        Args:
            config_path: Path to the config file.
        """
        self.config_path = Path(config_path)
        self._config: AppConfig | None = None

    def load(self) -> AppConfig:
        """Load and validate configuration.

        Returns:
            Validated AppConfig instance. Defaults are used when the file is
            missing, unreadable, or invalid.
        """
        raw_config = self._read_raw()
        try:
            config = AppConfig(**self._normalize(raw_config))
        except ValidationError as e:
            logger.warning(f"Config validation error: {e}, using defaults")
            config = AppConfig(**self._normalize({}))

        self._config = config
        return self._config

    def get_config(self) -> AppConfig:
        """Get the current configuration.

        Loads from disk if not already loaded.
        """
        if self._config is None:
            return self.load()
        return self._config

    def reload(self) -> AppConfig:
        """Force reload configuration from disk."""
        self._config = None
        return self.load()

    def save(self, config: AppConfig | None = None) -> bool:
        """Save configuration to disk.

        Args:
            config: Config to save. Uses current config if not provided.

        Returns:
            True if save succeeded.
        """
        config = config or self._config
        if config is None:
            return False

        try:
            config_dict = config.model_dump(mode="json")
            with open(self.config_path, "w") as f:
                yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
            return True
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            return False

    def _read_raw(self) -> dict[str, Any]:
        if not self.config_path.exists():
            logger.info(f"Config file not found at {self.config_path}, using defaults")
            return {}

        try:
            with open(self.config_path) as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Error reading config file: {e}, using defaults")
            return {}

        if not isinstance(raw, dict):
            logger.warning(f"Config file {self.config_path} is not a mapping, using defaults")
            return {}
        return raw

    def _normalize(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Apply environment overrides and drop deprecated fields.

        Args:
            raw: Raw config dictionary from YAML.

        Returns:
            Config dictionary ready for validation.
        """
        normalized = {key: value for key, value in raw.items() if key not in DEPRECATED_FIELDS}
        for field in DEPRECATED_FIELDS:
            if field in raw:
                logger.info(f"Ignoring deprecated config field: {field}")

        env_projects_dir = os.environ.get(PROJECTS_DIR_ENV)
        if env_projects_dir:
            normalized["projects_dir"] = env_projects_dir

        projects_dir = normalized.get("projects_dir", AppConfig.model_fields["projects_dir"].default)
        if isinstance(projects_dir, str):
            normalized["projects_dir"] = os.path.expanduser(projects_dir)

        return normalized


# Module-level singleton
_config_service: ConfigService | None = None


def get_config_service(config_path: str | Path = "config.yaml") -> ConfigService:
    """Get the global config service instance.

    Args:
        config_path: Path to config file (only used on first call).

    Returns:
        ConfigService singleton.
    """
    global _config_service
    if _config_service is None:
        _config_service = ConfigService(config_path)
    return _config_service


def reset_config_service() -> None:
    """Reset the global config service (for testing)."""
    global _config_service
    _config_service = None
