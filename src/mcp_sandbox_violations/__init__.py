"""Collect sandbox denial events from OS logs and serve them over MCP."""

__version__ = "0.1.0"
