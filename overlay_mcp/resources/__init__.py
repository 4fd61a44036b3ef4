"""MCP resources for Overlay MCP."""

from overlay_mcp.resources.nodes import list_nodes_resource
from overlay_mcp.resources.tunnels import list_tunnels_resource, tunnel_resource

__all__ = ["list_nodes_resource", "list_tunnels_resource", "tunnel_resource"]
