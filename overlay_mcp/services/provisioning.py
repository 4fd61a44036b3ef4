"""Tunnel provisioning across two nodes.

Both endpoint commands are dispatched concurrently and the tunnel is
recorded only when both dispatches succeed. Dispatch success is trusted as
tunnel success: nothing checks afterwards that the interface came up.

A failure on one side does not undo the other side. Whatever the succeeded
side created stays on that host, unmanaged, and is reported in the log.
"""

import asyncio
import logging

from overlay_mcp.models import Node, Tunnel, TunnelSpec, TunnelStatus
from overlay_mcp.protocols import NameAllocator, Registry, RemoteRunner
from overlay_mcp.services.registry import NodeNotFound
from overlay_mcp.services.session import ConnectionError, ExecutionError
from overlay_mcp.services.synthesizer import RandomAllocator, synthesize

logger = logging.getLogger(__name__)


class TunnelProvisioningFailed(Exception):
    """One or both endpoints failed to accept their tunnel command."""

    def __init__(self, tunnel_type: str, failures: dict[str, Exception]):
        """Initialize provisioning error.

        Args:
            tunnel_type: Tunnel type that was being created
            failures: Side label ("local"/"remote") to the error on that side
        """
        self.tunnel_type = tunnel_type
        self.failures = failures
        details = "; ".join(f"{side}: {err}" for side, err in failures.items())
        succeeded = [side for side in ("local", "remote") if side not in failures]
        message = f"Failed to configure {tunnel_type} tunnel ({details})"
        if succeeded:
            message += (
                f". The {succeeded[0]} side accepted its command and may hold an "
                "orphaned interface"
            )
        super().__init__(message)


class ProvisioningOrchestrator:
    """Creates tunnels between registered nodes."""

    def __init__(
        self,
        registry: Registry,
        runner: RemoteRunner,
        allocator: NameAllocator | None = None,
    ) -> None:
        self.registry = registry
        self.runner = runner
        self.allocator = allocator or RandomAllocator()

    async def _resolve(self, node_id: str) -> Node:
        node = await self.registry.find_node(node_id)
        if node is None:
            raise NodeNotFound(node_id)
        return node

    async def create(self, spec: TunnelSpec) -> Tunnel:
        """Provision a tunnel on both nodes and record it.

        Args:
            spec: Requested tunnel

        Returns:
            The persisted Tunnel with status ACTIVE

        Raises:
            ValueError: If spec is incomplete or names the same node twice
            NodeNotFound: If either node is not registered
            UnsupportedTunnelType: If the tunnel type is not supported
            TunnelProvisioningFailed: If either endpoint failed
        """
        spec.validate()
        local_node = await self._resolve(spec.local_node_id)
        remote_node = await self._resolve(spec.remote_node_id)

        pair = synthesize(
            spec.tunnel_type,
            local_node.address,
            remote_node.address,
            spec.local_ip,
            spec.remote_ip,
            self.allocator,
        )
        logger.info(
            "Provisioning %s tunnel %s between %s (%s) and %s (%s)",
            pair.tunnel_type,
            pair.interface,
            local_node.name,
            local_node.address,
            remote_node.name,
            remote_node.address,
        )

        results = await asyncio.gather(
            self.runner.run(local_node, pair.local_command),
            self.runner.run(remote_node, pair.remote_command),
            return_exceptions=True,
        )

        failures: dict[str, Exception] = {}
        for side, node, result in zip(("local", "remote"), (local_node, remote_node), results):
            if isinstance(result, (ConnectionError, ExecutionError)):
                failures[side] = result
                logger.error(
                    "Tunnel %s: %s side %s failed: %s",
                    pair.interface,
                    side,
                    node.name,
                    result,
                )
            elif isinstance(result, BaseException):
                raise result
            elif result.output.strip():
                logger.debug("Tunnel %s: %s side output: %s", pair.interface, side, result.output.strip())

        if failures:
            if len(failures) == 1:
                logger.warning(
                    "Tunnel %s not recorded; %s may hold an orphaned interface %s",
                    pair.interface,
                    (remote_node if "local" in failures else local_node).name,
                    pair.interface,
                )
            raise TunnelProvisioningFailed(pair.tunnel_type, failures)

        tunnel = await self.registry.create_tunnel(
            {
                "name": spec.name or pair.interface,
                "tunnel_type": pair.tunnel_type,
                "local_node_id": local_node.id,
                "remote_node_id": remote_node.id,
                "local_ip": pair.local_overlay_ip,
                "remote_ip": pair.remote_overlay_ip,
                "status": TunnelStatus.ACTIVE,
                "interface": pair.interface,
                "vni": pair.vni,
            }
        )
        logger.info("Tunnel %s (%s) is active", tunnel.name, tunnel.id)
        return tunnel
