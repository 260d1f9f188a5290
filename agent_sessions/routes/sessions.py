"""Session routes for Agent Sessions.

Provides REST API endpoints for the session dashboard:
- GET /api/sessions - Scan and list live sessions
- POST /api/sessions/focus - Bring a session's terminal to the foreground
- GET /api/health - Liveness check
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from agent_sessions.models.session import format_tray_title
from agent_sessions.services.session_aggregator import SessionAggregator
from agent_sessions.services.terminal_resolver import TerminalResolver

sessions_bp = Blueprint("sessions", __name__)

logger = logging.getLogger(__name__)


def _get_aggregator() -> SessionAggregator:
    """Get the session aggregator from app extensions."""
    return current_app.extensions["session_aggregator"]


def _get_resolver() -> TerminalResolver:
    """Get the terminal resolver from app extensions."""
    return current_app.extensions["terminal_resolver"]


@sessions_bp.route("/sessions", methods=["GET"])
def list_sessions():
    """Scan for live sessions.

    Returns:
        JSON object with sessions, totalCount, waitingCount and trayTitle.
    """
    snapshot = _get_aggregator().get_all_sessions()
    payload = snapshot.model_dump(mode="json", by_alias=True)
    payload["trayTitle"] = format_tray_title(snapshot.total_count, snapshot.waiting_count)
    return jsonify(payload)


@sessions_bp.route("/sessions/focus", methods=["POST"])
def focus_session():
    """Focus the terminal of a session.

    Request body:
        {"pid": 12345, "projectPath": "/Users/me/Projects/app"}

    Returns:
        {"success": bool}, or 400 when pid is missing or invalid.
    """
    data = request.get_json(silent=True) or {}

    pid = data.get("pid")
    if isinstance(pid, bool) or not isinstance(pid, int) or pid <= 0:
        return jsonify({"success": False, "error": "pid must be a positive integer"}), 400

    project_path = data.get("projectPath") or ""
    if not isinstance(project_path, str):
        return jsonify({"success": False, "error": "projectPath must be a string"}), 400

    success = _get_resolver().focus_session(pid, project_path)
    if not success:
        logger.info(f"Focus request for pid={pid} found no terminal")
    return jsonify({"success": success})


@sessions_bp.route("/health", methods=["GET"])
def health():
    """Liveness check."""
    return jsonify({"status": "ok"})
