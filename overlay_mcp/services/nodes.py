"""Node admission and removal."""

import logging

from overlay_mcp.models import Credential, Node
from overlay_mcp.protocols import Registry, RemoteRunner
from overlay_mcp.services.teardown import TeardownOrchestrator
from overlay_mcp.utils.validation import validate_host, validate_port

logger = logging.getLogger(__name__)


class NodeUnreachable(Exception):
    """Connectivity probe failed, so the node was not registered."""

    def __init__(self, address: str, port: int):
        self.address = address
        self.port = port
        super().__init__(
            f"SSH connection to {address}:{port} failed. Check credentials, address, and port."
        )


class NodeService:
    """Registers nodes after a successful probe and removes them with cascade."""

    def __init__(
        self,
        registry: Registry,
        runner: RemoteRunner,
        teardown: TeardownOrchestrator,
    ) -> None:
        self.registry = registry
        self.runner = runner
        self.teardown = teardown

    async def add_node(
        self,
        name: str,
        address: str,
        port: int,
        username: str,
        credential: Credential,
    ) -> Node:
        """Probe a host and register it as a node.

        Raises:
            ValueError: If a field is missing or invalid
            NodeUnreachable: If the probe failed
            DuplicateNode: If (address, port) is already registered
        """
        if not name:
            raise ValueError("Node name cannot be empty")
        if not username:
            raise ValueError("Username cannot be empty")
        address = validate_host(address)
        port = validate_port(port)

        if not await self.runner.check(address, port, username, credential):
            raise NodeUnreachable(address, port)

        return await self.registry.create_node(
            {
                "name": name,
                "address": address,
                "port": port,
                "username": username,
                "credential": credential,
            }
        )

    async def list_nodes(self) -> list[Node]:
        """Return registered nodes, newest first."""
        return await self.registry.list_nodes()

    async def remove_node(self, node_id: str) -> list[str]:
        """Remove a node after tearing down its tunnels.

        Returns:
            Ids of the tunnels removed along with the node

        Raises:
            NodeNotFound: If the node is not registered
        """
        return await self.teardown.delete_node(node_id)
