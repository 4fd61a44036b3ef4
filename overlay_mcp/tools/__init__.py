"""MCP tools for Overlay MCP."""

from overlay_mcp.tools.diagnostics import run_diagnostic
from overlay_mcp.tools.nodes import add_node, list_nodes, remove_node
from overlay_mcp.tools.tunnels import create_tunnel, delete_tunnel, list_tunnels

__all__ = [
    "add_node",
    "create_tunnel",
    "delete_tunnel",
    "list_nodes",
    "list_tunnels",
    "remove_node",
    "run_diagnostic",
]
