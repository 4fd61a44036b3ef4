"""Best-effort tunnel teardown.

Remote cleanup is advisory: every outcome of the delete commands is logged
and ignored, and the registry record is removed regardless. After teardown
the registry says nothing about what interfaces still exist on the hosts.
"""

import asyncio
import logging

from overlay_mcp.models import Node, Tunnel
from overlay_mcp.protocols import Registry, RemoteRunner
from overlay_mcp.services.registry import NodeNotFound, TunnelNotFound
from overlay_mcp.services.synthesizer import is_generated_name, teardown_command

logger = logging.getLogger(__name__)


def cleanup_interface(tunnel: Tunnel) -> str | None:
    """Return the interface to delete on both hosts, or None to skip.

    Only tunnels still labelled with their own synthesized interface name
    are cleaned remotely. An operator label, even one that starts with
    "gre" or "vxlan", means the record only is removed.
    """
    interface = tunnel.interface
    if interface is None or tunnel.name != interface:
        return None
    if not is_generated_name(interface):
        return None
    return interface


class TeardownOrchestrator:
    """Removes tunnels and nodes, cleaning remote interfaces when it can."""

    def __init__(self, registry: Registry, runner: RemoteRunner) -> None:
        self.registry = registry
        self.runner = runner

    async def _remove_interface(self, tunnel: Tunnel) -> None:
        """Delete the tunnel's interface on both ends, ignoring failures."""
        interface = cleanup_interface(tunnel)
        if interface is None:
            logger.info(
                "Tunnel %s has a custom name, skipping remote cleanup",
                tunnel.name,
            )
            return

        command = teardown_command(interface)
        nodes: list[Node] = []
        for node_id in (tunnel.local_node_id, tunnel.remote_node_id):
            node = await self.registry.find_node(node_id)
            if node is None:
                logger.warning("Tunnel %s references missing node %s", tunnel.name, node_id)
                continue
            nodes.append(node)

        results = await asyncio.gather(
            *(self.runner.run(node, command) for node in nodes),
            return_exceptions=True,
        )
        for node, result in zip(nodes, results):
            if isinstance(result, Exception):
                logger.warning(
                    "Teardown of %s on %s failed (ignored): %s",
                    tunnel.name,
                    node.name,
                    result,
                )
            else:
                logger.info("Teardown of %s dispatched on %s", tunnel.name, node.name)

    async def delete_tunnel(self, tunnel_id: str) -> None:
        """Tear down a tunnel and delete its record.

        Raises:
            TunnelNotFound: If the tunnel is not registered
        """
        tunnel = await self.registry.find_tunnel(tunnel_id)
        if tunnel is None:
            raise TunnelNotFound(tunnel_id)

        await self._remove_interface(tunnel)
        await self.registry.delete_tunnel(tunnel_id)

    async def delete_node(self, node_id: str) -> list[str]:
        """Tear down every tunnel on a node, then delete the node.

        Tunnels are processed one after another; the two ends of each
        tunnel are cleaned in parallel. The tunnel list is read once and no
        lock is held, so a tunnel deleted concurrently after that read is
        torn down again and still appears in the returned ids.

        Returns:
            Ids of the tunnels removed along with the node

        Raises:
            NodeNotFound: If the node is not registered
        """
        node = await self.registry.find_node(node_id)
        if node is None:
            raise NodeNotFound(node_id)

        tunnels = await self.registry.find_tunnels_by_node(node_id)
        logger.info(
            "Removing node %s with %d tunnel(s)",
            node.name,
            len(tunnels),
        )
        for tunnel in tunnels:
            await self._remove_interface(tunnel)

        await self.registry.delete_node(node_id)
        return [tunnel.id for tunnel in tunnels]
