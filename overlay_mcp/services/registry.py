"""In-memory Node/Tunnel registry.

Implements the Registry protocol for single-process use and tests. A
relational store can replace it as long as it keeps the same contract:
(address, port) uniqueness and cascading tunnel deletion.
"""

import asyncio
import logging
import uuid
from typing import Any

from overlay_mcp.models import Node, Tunnel

logger = logging.getLogger(__name__)


class NodeNotFound(LookupError):
    """No node with this id."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class TunnelNotFound(LookupError):
    """No tunnel with this id."""

    def __init__(self, tunnel_id: str):
        self.tunnel_id = tunnel_id
        super().__init__(f"Tunnel not found: {tunnel_id}")


class DuplicateNode(ValueError):
    """A node with the same address and port is already registered."""

    def __init__(self, address: str, port: int):
        self.address = address
        self.port = port
        super().__init__(f"Node {address}:{port} is already registered")


class InMemoryRegistry:
    """Dict-backed registry.

    Each write takes a single lock for the duration of the write only; no
    lock is held across remote calls made by the orchestrators.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._tunnels: dict[str, Tunnel] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    async def find_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    async def find_tunnel(self, tunnel_id: str) -> Tunnel | None:
        return self._tunnels.get(tunnel_id)

    async def find_tunnels_by_node(self, node_id: str) -> list[Tunnel]:
        return [t for t in self._tunnels.values() if t.involves(node_id)]

    async def list_nodes(self) -> list[Node]:
        return list(reversed(self._nodes.values()))

    async def list_tunnels(self) -> list[Tunnel]:
        return list(reversed(self._tunnels.values()))

    async def create_node(self, fields: dict[str, Any]) -> Node:
        """Insert a node.

        Raises:
            DuplicateNode: If (address, port) is already registered
        """
        async with self._lock:
            node = Node(id=self._new_id(), **fields)
            for existing in self._nodes.values():
                if (existing.address, existing.port) == (node.address, node.port):
                    raise DuplicateNode(node.address, node.port)
            self._nodes[node.id] = node

        logger.info("Registered node %s (%s) as %s", node.name, node.endpoint, node.id)
        return node

    async def delete_node(self, node_id: str) -> None:
        """Delete node and every tunnel that references it.

        Raises:
            NodeNotFound: If node does not exist
        """
        async with self._lock:
            if node_id not in self._nodes:
                raise NodeNotFound(node_id)
            cascaded = [tid for tid, t in self._tunnels.items() if t.involves(node_id)]
            for tunnel_id in cascaded:
                del self._tunnels[tunnel_id]
            node = self._nodes.pop(node_id)

        logger.info(
            "Deleted node %s (%s), cascaded %d tunnel record(s)",
            node.name,
            node_id,
            len(cascaded),
        )

    async def create_tunnel(self, fields: dict[str, Any]) -> Tunnel:
        """Insert a tunnel.

        Raises:
            NodeNotFound: If either referenced node does not exist
            ValueError: If both ends reference the same node
        """
        async with self._lock:
            tunnel = Tunnel(id=self._new_id(), **fields)
            if tunnel.local_node_id == tunnel.remote_node_id:
                raise ValueError("A tunnel needs two different nodes")
            for node_id in (tunnel.local_node_id, tunnel.remote_node_id):
                if node_id not in self._nodes:
                    raise NodeNotFound(node_id)
            self._tunnels[tunnel.id] = tunnel

        logger.info("Registered tunnel %s (%s) as %s", tunnel.name, tunnel.tunnel_type, tunnel.id)
        return tunnel

    async def delete_tunnel(self, tunnel_id: str) -> None:
        """Delete tunnel.

        Raises:
            TunnelNotFound: If tunnel does not exist
        """
        async with self._lock:
            if self._tunnels.pop(tunnel_id, None) is None:
                raise TunnelNotFound(tunnel_id)

        logger.info("Deleted tunnel record %s", tunnel_id)
