"""Configuration module for Overlay MCP."""

from overlay_mcp.config.settings import Settings

__all__ = ["Settings"]
