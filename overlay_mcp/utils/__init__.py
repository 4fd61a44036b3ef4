"""Utility modules for Overlay MCP."""
