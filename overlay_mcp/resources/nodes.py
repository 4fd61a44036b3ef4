"""Nodes resource listing registered nodes with reachability."""

from overlay_mcp.services import get_dependencies
from overlay_mcp.utils.ping import check_nodes_online


async def list_nodes_resource() -> str:
    """List registered nodes with SSH port reachability.

    Reachability is a plain TCP check of the SSH port; it does not
    authenticate.

    Returns:
        Formatted list of nodes and their online status
    """
    nodes = await get_dependencies().registry.list_nodes()
    if not nodes:
        return "No nodes registered."

    online_status = await check_nodes_online(nodes, timeout=2.0)

    lines = ["Registered Nodes", "=" * 40, ""]
    for node in nodes:
        online = online_status.get(node.id, False)
        status_icon = "✓" if online else "✗"
        lines.append(f"[{status_icon}] {node.name} ({'online' if online else 'offline'})")
        lines.append(f"    Id:       {node.id}")
        lines.append(f"    SSH:      {node.endpoint}")
        lines.append(f"    Auth:     {node.credential.kind}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
