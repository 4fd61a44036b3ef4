"""Protocol interfaces for dependency inversion.

The orchestrators depend on these contracts rather than on asyncssh or a
concrete store, so tests can hand them fakes.

Usage Example:

    from overlay_mcp.protocols import RemoteRunner

    class RecordingRunner:
        def __init__(self):
            self.calls = []

        async def run(self, node, command):
            self.calls.append((node.id, command))
            return SessionResult(host=node.address, command=command, output="")

    orchestrator = ProvisioningOrchestrator(registry, RecordingRunner())
"""

from typing import Any, Protocol, runtime_checkable

from overlay_mcp.models import Credential, Node, SessionResult, Tunnel


@runtime_checkable
class RemoteRunner(Protocol):
    """Runs one command on one node over a fresh remote session."""

    async def run(self, node: Node, command: str) -> SessionResult:
        """Run command on node and return its merged output.

        Raises:
            ConnectionError: If the session could not be established
            ExecutionError: If the command could not be dispatched
        """
        ...

    async def check(
        self,
        host: str,
        port: int,
        username: str,
        credential: Credential,
    ) -> bool:
        """Return True if a session can be opened with these parameters."""
        ...


@runtime_checkable
class NameAllocator(Protocol):
    """Source of interface names and VXLAN network identifiers.

    Implementations may track allocations to guarantee uniqueness; the
    default draws random values without checking.
    """

    def interface_name(self, tunnel_type: str) -> str:
        """Return an interface name for a new tunnel of this type."""
        ...

    def vni(self) -> int:
        """Return a VXLAN network identifier."""
        ...


@runtime_checkable
class Registry(Protocol):
    """Persistence contract for Node and Tunnel records.

    All identifiers are opaque strings. Nodes are unique on
    (address, port); deleting a node deletes every tunnel that references
    it.
    """

    async def find_node(self, node_id: str) -> Node | None:
        """Return node or None."""
        ...

    async def find_tunnel(self, tunnel_id: str) -> Tunnel | None:
        """Return tunnel or None."""
        ...

    async def find_tunnels_by_node(self, node_id: str) -> list[Tunnel]:
        """Return tunnels that reference node on either side."""
        ...

    async def list_nodes(self) -> list[Node]:
        """Return all nodes, newest first."""
        ...

    async def list_tunnels(self) -> list[Tunnel]:
        """Return all tunnels, newest first."""
        ...

    async def create_node(self, fields: dict[str, Any]) -> Node:
        """Insert a node.

        Raises:
            DuplicateNode: If (address, port) is already registered
        """
        ...

    async def delete_node(self, node_id: str) -> None:
        """Delete node and cascade to its tunnels.

        Raises:
            NodeNotFound: If node does not exist
        """
        ...

    async def create_tunnel(self, fields: dict[str, Any]) -> Tunnel:
        """Insert a tunnel.

        Raises:
            NodeNotFound: If either referenced node does not exist
        """
        ...

    async def delete_tunnel(self, tunnel_id: str) -> None:
        """Delete tunnel.

        Raises:
            TunnelNotFound: If tunnel does not exist
        """
        ...
