"""Tunnel resources."""

from fastmcp.exceptions import ResourceError

from overlay_mcp.services import get_dependencies
from overlay_mcp.services.teardown import cleanup_interface


async def list_tunnels_resource() -> str:
    """List recorded tunnels.

    Returns:
        Formatted list of tunnels
    """
    registry = get_dependencies().registry
    tunnels = await registry.list_tunnels()
    if not tunnels:
        return "No tunnels recorded."

    node_names = {n.id: n.name for n in await registry.list_nodes()}
    lines = ["Recorded Tunnels", "=" * 40, ""]
    for t in tunnels:
        lines.append(f"{t.name} ({t.tunnel_type}, {t.status.value})")
        lines.append(f"    Id:       {t.id}")
        lines.append(
            f"    Local:    {node_names.get(t.local_node_id, t.local_node_id)} {t.local_ip}"
        )
        lines.append(
            f"    Remote:   {node_names.get(t.remote_node_id, t.remote_node_id)} {t.remote_ip}"
        )
        if t.vni is not None:
            lines.append(f"    VNI:      {t.vni}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


async def tunnel_resource(tunnel_id: str) -> str:
    """Show one tunnel, including whether delete will clean it remotely.

    Raises:
        ResourceError: If the tunnel is not recorded
    """
    registry = get_dependencies().registry
    tunnel = await registry.find_tunnel(tunnel_id)
    if tunnel is None:
        raise ResourceError(f"Tunnel not found: {tunnel_id}")

    local = await registry.find_node(tunnel.local_node_id)
    remote = await registry.find_node(tunnel.remote_node_id)
    cleanup = "remote interfaces" if cleanup_interface(tunnel) else "record only"

    lines = [
        f"Tunnel {tunnel.name}",
        f"  Id:        {tunnel.id}",
        f"  Type:      {tunnel.tunnel_type}",
        f"  Interface: {tunnel.interface or '(unknown)'}",
        f"  Status:    {tunnel.status.value}",
        f"  Local:     {local.name if local else tunnel.local_node_id} ({tunnel.local_ip})",
        f"  Remote:    {remote.name if remote else tunnel.remote_node_id} ({tunnel.remote_ip})",
    ]
    if tunnel.vni is not None:
        lines.append(f"  VNI:       {tunnel.vni}")
    lines.append(f"  Created:   {tunnel.created_at.isoformat(timespec='seconds')}")
    lines.append(f"  On delete: {cleanup}")
    return "\n".join(lines)
