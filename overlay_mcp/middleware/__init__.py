"""Overlay MCP middleware components."""

from overlay_mcp.middleware.base import OverlayMiddleware
from overlay_mcp.middleware.errors import ErrorHandlingMiddleware
from overlay_mcp.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "OverlayMiddleware",
]
