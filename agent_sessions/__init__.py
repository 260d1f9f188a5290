"""Agent Sessions: live status of local AI coding assistant CLI sessions."""

__version__ = "0.1.0"
