#!/usr/bin/env python3
"""Agent Sessions - Run the application.

Usage:
    python run.py
    # Or: python -m agent_sessions.app

The session API will be available at http://localhost:5051/api/sessions
"""

from agent_sessions.app import main

if __name__ == "__main__":
    main()
