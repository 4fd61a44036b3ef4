"""Tunnel provisioning and teardown tools."""

from overlay_mcp.models import Tunnel, TunnelSpec
from overlay_mcp.services import (
    NodeNotFound,
    TunnelNotFound,
    TunnelProvisioningFailed,
    get_dependencies,
)


def format_tunnel(tunnel: Tunnel, node_names: dict[str, str] | None = None) -> str:
    """One-line tunnel description."""
    names = node_names or {}
    local = names.get(tunnel.local_node_id, tunnel.local_node_id)
    remote = names.get(tunnel.remote_node_id, tunnel.remote_node_id)
    vni = f" vni={tunnel.vni}" if tunnel.vni is not None else ""
    return (
        f"{tunnel.name} [{tunnel.id}] {tunnel.tunnel_type}{vni} "
        f"{local} ({tunnel.local_ip}) <-> {remote} ({tunnel.remote_ip}) "
        f"{tunnel.status.value}"
    )


async def create_tunnel(
    tunnel_type: str,
    local_node_id: str,
    remote_node_id: str,
    local_ip: str,
    remote_ip: str,
    name: str | None = None,
) -> str:
    """Create a GRE or VXLAN tunnel between two registered nodes.

    Both nodes are configured concurrently. The tunnel is recorded only if
    both accepted their commands. If just one side succeeded, its interface
    is left in place and not removed automatically.

    Args:
        tunnel_type: "gre" (/30 overlay) or "vxlan" (/24 overlay, UDP 4789).
        local_node_id: Id of the first endpoint.
        remote_node_id: Id of the second endpoint.
        local_ip: Overlay address for the first endpoint (no prefix).
        remote_ip: Overlay address for the second endpoint (no prefix).
        name: Optional label. Defaults to the generated interface name.
            Tunnels with a custom label are not cleaned up remotely on delete.

    Returns:
        Description of the created tunnel, or an error message.
    """
    spec = TunnelSpec(
        tunnel_type=tunnel_type,
        local_node_id=local_node_id,
        remote_node_id=remote_node_id,
        local_ip=local_ip,
        remote_ip=remote_ip,
        name=name,
    )
    try:
        tunnel = await get_dependencies().provisioning.create(spec)
    except (ValueError, NodeNotFound, TunnelProvisioningFailed) as e:
        return f"Error: {e}"

    return f"Tunnel created: {format_tunnel(tunnel)}"


async def list_tunnels() -> str:
    """List recorded tunnels, newest first.

    Returns:
        One line per tunnel with both endpoints and overlay addresses.
    """
    registry = get_dependencies().registry
    tunnels = await registry.list_tunnels()
    if not tunnels:
        return "No tunnels recorded."

    node_names = {n.id: n.name for n in await registry.list_nodes()}
    return "\n".join(
        ["Tunnels:"] + [f"  {format_tunnel(t, node_names)}" for t in tunnels]
    )


async def delete_tunnel(tunnel_id: str) -> str:
    """Delete a tunnel.

    The interface is removed from both nodes on a best-effort basis and
    the record is deleted even if the nodes are unreachable.

    Args:
        tunnel_id: Id of the tunnel to delete.

    Returns:
        Confirmation, or an error message.
    """
    try:
        await get_dependencies().teardown.delete_tunnel(tunnel_id)
    except TunnelNotFound as e:
        return f"Error: {e}"

    return f"Tunnel {tunnel_id} deleted."
