"""Flask application factory for Agent Sessions.

This module creates and configures the Flask application, wiring together
the services:

- ConfigService: Configuration loading
- ProcessScanner: Discovery of running CLI processes
- SessionAggregator: Correlation of processes with conversation logs
- TerminalResolver: Terminal focusing
- TransitionLog: Status change diagnostics

Usage:
    from agent_sessions.app import create_app
    app = create_app()
    app.run(port=5051)
"""

import logging

from flask import Flask

from agent_sessions.models import AppConfig
from agent_sessions.routes import register_blueprints
from agent_sessions.services import (
    ProcessScanner,
    RemoteUrlLookup,
    SessionAggregator,
    TerminalResolver,
    TransitionLog,
    get_config_service,
)

logger = logging.getLogger(__name__)


def create_app(config_path: str = "config.yaml") -> Flask:
    """Create and configure the Flask application.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Configured Flask application.
    """
    config_service = get_config_service(config_path)
    config = config_service.get_config()

    app = Flask(__name__)
    app.config["TESTING"] = False

    # Store services on app for access in routes
    app.extensions["config"] = config
    app.extensions["config_service"] = config_service

    _init_services(app, config)

    register_blueprints(app)

    return app


def _init_services(app: Flask, config: AppConfig) -> None:
    """Initialize all services and wire them together.

    Args:
        app: Flask application.
        config: Application configuration.
    """
    # One scanner for the life of the app so CPU usage spans consecutive scans
    scanner = ProcessScanner(
        process_name=config.process_name,
        own_aliases=config.own_process_aliases,
        external_agent_signatures=config.external_agent_signatures,
    )

    remote_lookup = None
    if config.remote_url.enabled:
        remote_lookup = RemoteUrlLookup(
            cache_seconds=config.remote_url.cache_seconds,
            timeout=config.focus_timeout,
        )

    transition_log = TransitionLog(
        log_file=config.transition_log.path,
        enabled=config.transition_log.enabled,
    )
    app.extensions["transition_log"] = transition_log

    aggregator = SessionAggregator(
        scanner=scanner,
        projects_dir=config.projects_dir,
        scan_config=config.scan,
        remote_lookup=remote_lookup,
        transition_log=transition_log,
    )
    app.extensions["session_aggregator"] = aggregator

    resolver = TerminalResolver(timeout=config.focus_timeout)
    app.extensions["terminal_resolver"] = resolver

    logger.info(f"Services initialized (log store: {aggregator.projects_dir})")


def main():
    """Run the Flask application."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = create_app()
    config = app.extensions.get("config")

    port = config.port if config else 5051
    debug = config.debug if config else False

    if debug:
        logging.getLogger("agent_sessions").setLevel(logging.DEBUG)

    logger.info(f"Starting Agent Sessions on port {port}")
    app.run(host="127.0.0.1", port=port, debug=debug, threaded=True)


if __name__ == "__main__":
    main()
