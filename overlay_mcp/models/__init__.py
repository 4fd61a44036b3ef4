"""Data models for Overlay MCP."""

from overlay_mcp.models.command import CommandPair, SessionResult
from overlay_mcp.models.diagnostic import DiagnosticResult, DiagnosticType
from overlay_mcp.models.node import Credential, Node
from overlay_mcp.models.tunnel import Tunnel, TunnelSpec, TunnelStatus, TunnelType

__all__ = [
    "CommandPair",
    "Credential",
    "DiagnosticResult",
    "DiagnosticType",
    "Node",
    "SessionResult",
    "Tunnel",
    "TunnelSpec",
    "TunnelStatus",
    "TunnelType",
]
